"""Catalog composition engine."""

from modelcatalog.core.composer import (
    ProviderDefinition,
    ProviderIdentity,
    ProviderSpec,
    compose_provider,
)
from modelcatalog.core.errors import CatalogError
from modelcatalog.core.inputs import (
    COMPLETION_PARAMS,
    INPUT_DESCRIPTORS,
    InputDescriptor,
    api_key_input,
    override_input,
)
from modelcatalog.core.packages import (
    AUTODETECT,
    MODEL_PACKAGES,
    OPEN_SOURCE_POOL,
    ModelPackage,
    autodetect,
    filter_pool,
    is_open_source,
    override_all,
    override_package,
)
from modelcatalog.core.registry import CatalogRegistry, build_registry
from modelcatalog.core.tags import InputType, ProviderTag

__all__ = [
    "AUTODETECT",
    "COMPLETION_PARAMS",
    "INPUT_DESCRIPTORS",
    "MODEL_PACKAGES",
    "OPEN_SOURCE_POOL",
    "CatalogError",
    "CatalogRegistry",
    "InputDescriptor",
    "InputType",
    "ModelPackage",
    "ProviderDefinition",
    "ProviderIdentity",
    "ProviderSpec",
    "ProviderTag",
    "api_key_input",
    "autodetect",
    "build_registry",
    "compose_provider",
    "filter_pool",
    "is_open_source",
    "override_all",
    "override_input",
    "override_package",
]
