"""Tests for registry assembly, lookups and parameter resolution."""

import json

import pytest

from modelcatalog.core.composer import ProviderSpec
from modelcatalog.core.errors import (
    CatalogError,
    DuplicateProviderKeyError,
    UnknownPackageError,
    UnknownProviderError,
    UnknownTagError,
)
from modelcatalog.core.inputs import override_input
from modelcatalog.core.packages import ModelPackage, PackageLibrary, override_package
from modelcatalog.core.registry import CatalogHolder, build_flat_listing, build_registry
from modelcatalog.core.tags import ProviderTag


def _spec(key, provider=None, tags=(ProviderTag.LOCAL,), packages=("gpt_4o",), inputs=(), **extra):
    identity = {
        "title": key.title(),
        "provider": provider or key,
        "description": f"{key} provider",
        "tags": list(tags),
    }
    identity.update(extra)
    return ProviderSpec(key=key, identity=identity, packages=tuple(packages), inputs=tuple(inputs))


@pytest.fixture
def registry():
    return build_registry(
        [
            _spec("alpha", tags=[ProviderTag.REQUIRES_API_KEY], inputs=["api_key"]),
            _spec("beta", provider="alpha", tags=[ProviderTag.LOCAL, ProviderTag.OPEN_SOURCE]),
            _spec(
                "gamma",
                packages=[override_package("llama3_chat", params={"temperature": 0.2})],
                inputs=[override_input("context_length", default_value=2048), "api_base"],
                params={"apiBase": "http://provider", "temperature": 0.9},
            ),
        ]
    )


def test_registry_preserves_declaration_order(registry):
    assert registry.keys() == ["alpha", "beta", "gamma"]
    assert list(registry) == ["alpha", "beta", "gamma"]
    assert len(registry) == 3
    assert "beta" in registry
    assert registry["alpha"].title == "Alpha"


def test_duplicate_provider_key_fails():
    with pytest.raises(DuplicateProviderKeyError) as excinfo:
        build_registry([_spec("alpha"), _spec("alpha")])
    assert excinfo.value.error_code == "duplicate_provider_key"


def test_bad_spec_aborts_the_build():
    with pytest.raises(UnknownPackageError):
        build_registry([_spec("alpha"), _spec("beta", packages=["gpt_9"])])


def test_unknown_provider_lookup(registry):
    with pytest.raises(UnknownProviderError) as excinfo:
        registry.get("delta")
    assert excinfo.value.error_code == "unknown_provider"
    assert "delta" not in registry


def test_providers_view_is_read_only(registry):
    with pytest.raises(TypeError):
        registry.providers["delta"] = registry["alpha"]


def test_by_tag(registry):
    assert [key for key, _ in registry.by_tag(ProviderTag.LOCAL)] == ["beta", "gamma"]
    assert [key for key, _ in registry.by_tag("open-source")] == ["beta"]
    with pytest.raises(UnknownTagError):
        registry.by_tag("Cloud")


def test_by_backend_groups_keys_sharing_a_provider(registry):
    assert [key for key, _ in registry.by_backend("alpha")] == ["alpha", "beta"]
    assert registry.by_backend("missing") == []


def test_resolve_params_precedence(registry):
    params = registry.resolve_params("gamma", "Llama3 Chat", {"apiBase": "http://user"})

    assert params["provider"] == "gamma"
    assert params["model"] == "llama3-8b"
    # Package params win over provider params.
    assert params["temperature"] == 0.2
    # Input defaults win over package params.
    assert params["contextLength"] == 2048
    # User values win over everything else.
    assert params["apiBase"] == "http://user"


def test_resolve_params_with_dimension(registry):
    params = registry.resolve_params("gamma", 0, dimensions={"Parameter Count": "70b"})
    assert params["model"] == "llama3-70b"
    assert params["apiBase"] == "http://provider"


def test_resolve_params_reports_backend_not_key(registry):
    assert registry.resolve_params("beta", "GPT-4o")["provider"] == "alpha"


def test_resolve_params_does_not_mutate_catalog(registry):
    params = registry.resolve_params("gamma", 0)
    params["model"] = "changed"
    assert registry["gamma"].packages[0].params["model"] == "llama3-8b"


def test_composed_catalog_cannot_be_edited_in_place(registry):
    package = registry["gamma"].packages[0]
    with pytest.raises(TypeError):
        package.params["model"] = "changed"
    with pytest.raises(TypeError):
        package.dimensions[0].options["70b"]["model"] = "changed"
    assert registry.resolve_params("gamma", 0, dimensions={"Parameter Count": "70b"})["model"] == (
        "llama3-70b"
    )


def test_payload_is_json_ready_and_camel_cased(registry):
    payload = registry.to_payload()
    text = json.dumps(payload)

    alpha = payload["providers"]["alpha"]
    assert alpha["tags"] == ["Requires API Key"]
    assert alpha["collectInputFor"][0]["key"] == "apiKey"
    assert "longDescription" not in alpha
    assert payload["listing"][0] == "OpenAI"
    assert "collect_input_for" not in text
    gamma_params = payload["providers"]["gamma"]["packages"][0]["params"]
    assert type(gamma_params) is dict
    assert gamma_params["temperature"] == 0.2


def test_flat_listing_holds_labels_then_clones():
    package = ModelPackage(title="Only", params={"model": "only"})
    listing = build_flat_listing(("First", "Second"), PackageLibrary([("only", package)]))

    assert listing[:2] == ("First", "Second")
    assert listing[2] == package
    assert listing[2] is not package


def test_holder_builds_lazily_and_once():
    calls = []

    def builder():
        calls.append(1)
        return build_registry([_spec("alpha")])

    holder = CatalogHolder(builder)
    assert calls == []
    first = holder.current
    assert holder.current is first
    assert len(calls) == 1


def test_holder_reload_swaps_whole_registry():
    holder = CatalogHolder(lambda: build_registry([_spec("alpha")]))
    before = holder.current

    after = holder.reload(lambda: build_registry([_spec("alpha"), _spec("beta")]))

    assert holder.current is after
    assert before.keys() == ["alpha"]
    assert after.keys() == ["alpha", "beta"]


def test_failed_reload_keeps_previous_registry():
    holder = CatalogHolder(lambda: build_registry([_spec("alpha")]))
    before = holder.current

    with pytest.raises(CatalogError):
        holder.reload(lambda: build_registry([_spec("alpha"), _spec("alpha")]))

    assert holder.current is before
