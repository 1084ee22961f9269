"""Tests for the shipped provider catalog."""

import pytest

from modelcatalog.core.inputs import COMPLETION_PARAMS, INPUT_DESCRIPTORS
from modelcatalog.core.packages import AUTODETECT_MODEL, MODEL_PACKAGES, filter_pool, is_open_source
from modelcatalog.core.providers import builtin_provider_specs
from modelcatalog.core.registry import CATEGORY_LABELS, build_registry
from modelcatalog.core.tags import ProviderTag

EXPECTED_KEYS = [
    "openai",
    "anthropic",
    "mistral",
    "ollama",
    "cohere",
    "groq",
    "together",
    "gemini",
    "lmstudio",
    "llamafile",
    "replicate",
    "llamacpp",
    "openai-aiohttp",
    "freetrial",
]

OPEN_SOURCE_COUNT = len(filter_pool(is_open_source))


@pytest.fixture(scope="module")
def catalog():
    return build_registry(builtin_provider_specs())


def test_builtin_keys_in_display_order(catalog):
    assert catalog.keys() == EXPECTED_KEYS


def test_every_provider_is_well_formed(catalog):
    for key, definition in catalog.items():
        keys = [field.key for field in definition.collect_input_for]
        assert len(keys) == len(set(keys)), key
        assert definition.description.strip(), key
        assert all(isinstance(tag, ProviderTag) for tag in definition.tags), key
        for package in definition.packages:
            assert "model" in package.params, (key, package.title)


def test_openai_compatible_entry_shares_backend(catalog):
    assert [key for key, _ in catalog.by_backend("openai")] == ["openai", "openai-aiohttp"]
    aiohttp = catalog["openai-aiohttp"]
    assert aiohttp.collect_input_for[0].key == "apiBase"
    assert aiohttp.collect_input_for[0].default_value == "http://localhost:8000/v1/"


def test_anthropic_context_length_override_comes_last(catalog):
    fields = catalog["anthropic"].collect_input_for
    assert fields[0].key == "apiKey"
    assert fields[-1].key == "contextLength"
    assert fields[-1].default_value == 100_000
    assert len(fields) == 1 + len(COMPLETION_PARAMS.items)
    assert INPUT_DESCRIPTORS["context_length"].default_value is None


def test_groq_trailing_gap_is_skipped(catalog):
    assert [package.title for package in catalog["groq"].packages] == [
        "Llama3 70b Chat",
        "Llama3 8b Chat",
        "Mixtral",
        "Llama2 70b Chat",
        "Groq",
    ]


def test_together_context_length_stays_local(catalog):
    packages = catalog["together"].packages
    assert [package.title for package in packages] == ["Llama3 Chat", "CodeLlama Instruct", "Mistral"]
    assert {package.params["contextLength"] for package in packages} == {4096}
    assert MODEL_PACKAGES["llama3_chat"].params["contextLength"] == 8192
    assert catalog["replicate"].package("Llama3 Chat").params["contextLength"] == 8192


@pytest.mark.parametrize("key", ["ollama", "lmstudio", "openai-aiohttp"])
def test_local_servers_offer_autodetect_then_open_source(catalog, key):
    packages = catalog[key].packages
    assert packages[0].params == {"model": AUTODETECT_MODEL}
    assert len(packages) == 1 + OPEN_SOURCE_COUNT
    assert all(package.is_open_source for package in packages[1:])


def test_ollama_api_base_default(catalog):
    assert catalog["ollama"].input("apiBase").default_value == "http://localhost:11434"
    assert catalog["ollama"].packages[0].title == "Ollama"


def test_freetrial_titles_and_backend(catalog):
    freetrial = catalog["freetrial"]
    titles = [package.title for package in freetrial.packages]

    assert freetrial.provider == "free-trial"
    assert "GPT-4o (trial)" in titles
    assert "Claude 3 Haiku (trial)" in titles
    assert MODEL_PACKAGES["gpt_4o"].title == "GPT-4o"
    assert "50 free uses" in freetrial.long_description


def test_free_trial_limit_is_interpolated():
    catalog = build_registry(builtin_provider_specs(free_trial_limit=5))
    assert "5 free uses" in catalog["freetrial"].long_description


def test_flat_listing_labels_then_every_package(catalog):
    listing = catalog.flat_listing
    assert listing[: len(CATEGORY_LABELS)] == CATEGORY_LABELS
    packages = listing[len(CATEGORY_LABELS) :]
    assert [package.title for package in packages] == [package.title for package in MODEL_PACKAGES]


def test_resolve_anthropic_params(catalog):
    params = catalog.resolve_params("anthropic", "Claude 3 Opus", {"apiKey": "sk-test"})
    assert params == {
        "title": "Claude 3 Opus",
        "model": "claude-3-opus-20240229",
        "contextLength": 100_000,
        "apiKey": "sk-test",
        "provider": "anthropic",
    }


def test_resolve_keeps_provider_placeholder_params(catalog):
    params = catalog.resolve_params("mistral", "Codestral")
    assert params["apiKey"] == ""
    assert params["model"] == "codestral-latest"


def test_resolve_replicate_parameter_count(catalog):
    params = catalog.resolve_params(
        "replicate", "CodeLlama Instruct", dimensions={"Parameter Count": "34b"}
    )
    assert params["model"] == "codellama-34b"
    assert params["provider"] == "replicate"


def test_tags_select_local_providers(catalog):
    local = [key for key, _ in catalog.by_tag(ProviderTag.LOCAL)]
    assert local == ["ollama", "lmstudio", "llamafile", "llamacpp", "openai-aiohttp"]
    assert [key for key, _ in catalog.by_tag(ProviderTag.FREE)] == ["freetrial"]
