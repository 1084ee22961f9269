"""Catalog registry assembly and the read-only views handed to consumers."""

from __future__ import annotations

from types import MappingProxyType
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from modelcatalog.core.composer import ProviderDefinition, ProviderSpec, compose_spec
from modelcatalog.core.errors import (
    CatalogError,
    DuplicateProviderKeyError,
    UnknownProviderError,
    UnknownTagError,
)
from modelcatalog.core.frozen import thaw_value
from modelcatalog.core.inputs import INPUT_DESCRIPTORS, InputLibrary
from modelcatalog.core.packages import MODEL_PACKAGES, ModelPackage, PackageLibrary
from modelcatalog.core.tags import ProviderTag
from modelcatalog.utils.log import get_logger

logger = get_logger()

CATEGORY_LABELS: Tuple[str, ...] = (
    "OpenAI",
    "Anthropic",
    "Mistral",
    "Cohere",
    "Gemini",
    "Open Source",
)

ListingEntry = Union[str, ModelPackage]


class CatalogRegistry:
    """Immutable mapping from provider key to composed definition."""

    def __init__(
        self,
        providers: Mapping[str, ProviderDefinition],
        flat_listing: Sequence[ListingEntry],
    ) -> None:
        self._providers: Mapping[str, ProviderDefinition] = MappingProxyType(dict(providers))
        self._flat_listing: Tuple[ListingEntry, ...] = tuple(flat_listing)

    @property
    def providers(self) -> Mapping[str, ProviderDefinition]:
        """Read-only view of all providers in declaration order."""
        return self._providers

    @property
    def flat_listing(self) -> Tuple[ListingEntry, ...]:
        """Category labels interleaved with every library package."""
        return self._flat_listing

    def get(self, key: str) -> ProviderDefinition:
        try:
            return self._providers[key]
        except KeyError:
            raise UnknownProviderError(f"Unknown provider '{key}'") from None

    def __getitem__(self, key: str) -> ProviderDefinition:
        return self.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._providers

    def __iter__(self) -> Iterator[str]:
        return iter(self._providers)

    def __len__(self) -> int:
        return len(self._providers)

    def keys(self) -> List[str]:
        """Return provider keys in declaration order."""
        return list(self._providers)

    def items(self) -> List[Tuple[str, ProviderDefinition]]:
        return list(self._providers.items())

    def by_tag(self, tag: Union[ProviderTag, str]) -> List[Tuple[str, ProviderDefinition]]:
        """Providers carrying ``tag``, in declaration order."""
        try:
            wanted = ProviderTag(tag)
        except ValueError:
            raise UnknownTagError(f"Unknown provider tag {tag!r}") from None
        return [(key, item) for key, item in self._providers.items() if wanted in item.tags]

    def by_backend(self, provider: str) -> List[Tuple[str, ProviderDefinition]]:
        """Registry entries that target the backend identifier ``provider``."""
        return [(key, item) for key, item in self._providers.items() if item.provider == provider]

    def resolve_params(
        self,
        key: str,
        package: Union[str, int],
        user_values: Optional[Mapping[str, Any]] = None,
        dimensions: Optional[Mapping[str, str]] = None,
    ) -> Dict[str, Any]:
        """Flat parameter mapping handed to the runtime for one provider/package choice.

        Later sources win: provider params, package params (after dimension
        selection), input defaults, then values the user supplied. The backend
        identifier is always set under ``provider``. Required-field checks are
        left to the form that collected ``user_values``.
        """
        definition = self.get(key)
        chosen = definition.package(package)
        if dimensions:
            chosen = chosen.select(dimensions)

        resolved: Dict[str, Any] = thaw_value(definition.params)
        resolved.update(thaw_value(chosen.params))
        for descriptor in definition.collect_input_for:
            if descriptor.default_value is not None:
                resolved[descriptor.key] = thaw_value(descriptor.default_value)
        if user_values:
            resolved.update(thaw_value(user_values))
        resolved["provider"] = definition.provider
        return resolved

    def to_payload(self) -> Dict[str, Any]:
        """JSON-ready view for the UI, using camelCase field names."""
        return {
            "providers": {
                key: item.model_dump(mode="json", by_alias=True, exclude_none=True)
                for key, item in self._providers.items()
            },
            "listing": [
                entry
                if isinstance(entry, str)
                else entry.model_dump(mode="json", by_alias=True, exclude_none=True)
                for entry in self._flat_listing
            ],
        }


def build_flat_listing(
    labels: Iterable[str] = CATEGORY_LABELS,
    library: PackageLibrary = MODEL_PACKAGES,
) -> Tuple[ListingEntry, ...]:
    """Category labels followed by every library package, in declaration order."""
    return (*labels, *(package.clone() for package in library))


def build_registry(
    specs: Iterable[ProviderSpec],
    *,
    labels: Iterable[str] = CATEGORY_LABELS,
    package_library: PackageLibrary = MODEL_PACKAGES,
    input_library: InputLibrary = INPUT_DESCRIPTORS,
) -> CatalogRegistry:
    """Compose every spec once and freeze the result."""
    providers: Dict[str, ProviderDefinition] = {}
    for spec in specs:
        if spec.key in providers:
            raise DuplicateProviderKeyError(f"Provider key '{spec.key}' is declared twice")
        try:
            providers[spec.key] = compose_spec(
                spec,
                package_library=package_library,
                input_library=input_library,
            )
        except CatalogError as exc:
            logger.error(
                "[registry] Failed to compose provider %s: %s",
                spec.key,
                exc,
                extra={"key": spec.key, "error_code": exc.error_code},
            )
            raise

    registry = CatalogRegistry(providers, build_flat_listing(labels, package_library))
    logger.debug(
        "[registry] Built catalog",
        extra={"providers": len(registry), "listing": len(registry.flat_listing)},
    )
    return registry


class CatalogHolder:
    """Holds the active registry behind one reference.

    ``reload`` builds a complete registry before swapping it in, so readers see
    either the old catalog or the new one, never a partial build.
    """

    def __init__(self, builder: Callable[[], CatalogRegistry]) -> None:
        self._builder = builder
        self._registry: Optional[CatalogRegistry] = None

    @property
    def current(self) -> CatalogRegistry:
        registry = self._registry
        if registry is None:
            registry = self._builder()
            self._registry = registry
        return registry

    def reload(self, builder: Optional[Callable[[], CatalogRegistry]] = None) -> CatalogRegistry:
        """Rebuild the catalog; on failure the previous registry stays active."""
        next_builder = builder or self._builder
        registry = next_builder()
        self._registry = registry
        self._builder = next_builder
        logger.info("[registry] Catalog reloaded", extra={"providers": len(registry)})
        return registry


__all__ = [
    "CATEGORY_LABELS",
    "CatalogHolder",
    "CatalogRegistry",
    "ListingEntry",
    "build_flat_listing",
    "build_registry",
]
