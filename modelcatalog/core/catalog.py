"""The process-wide catalog built from the shipped providers and user config."""

from __future__ import annotations

from typing import Iterable, Optional

from modelcatalog.core.composer import ProviderSpec
from modelcatalog.core.config import CatalogConfig, get_config, get_config_manager
from modelcatalog.core.providers import builtin_provider_specs
from modelcatalog.core.registry import CatalogHolder, CatalogRegistry, build_registry
from modelcatalog.utils.log import get_logger, log_file_path

logger = get_logger()


def enabled_specs(
    specs: Iterable[ProviderSpec],
    disabled: Iterable[str],
) -> list[ProviderSpec]:
    """Drop specs whose key is disabled; unknown disabled keys are reported."""
    spec_list = list(specs)
    disabled_keys = set(disabled)
    known = {spec.key for spec in spec_list}
    for key in sorted(disabled_keys - known):
        logger.warning(
            "[config] Disabled provider %r is not in the catalog",
            key,
            extra={"key": key},
        )
    return [spec for spec in spec_list if spec.key not in disabled_keys]


def build_catalog(config: Optional[CatalogConfig] = None) -> CatalogRegistry:
    """Build the registry for the shipped providers under ``config``."""
    config = config or get_config()
    if config.log_level:
        logger.set_console_level(config.log_level)
    if config.log_dir is not None and logger.log_file is None:
        logger.attach_file_handler(log_file_path(config.log_dir.expanduser()))
    specs = builtin_provider_specs(free_trial_limit=config.free_trial_limit)
    return build_registry(enabled_specs(specs, config.disabled_providers))


_holder: Optional[CatalogHolder] = None


def get_catalog_holder() -> CatalogHolder:
    global _holder
    if _holder is None:
        _holder = CatalogHolder(build_catalog)
    return _holder


def get_catalog() -> CatalogRegistry:
    """Return the active catalog, building it on first use."""
    return get_catalog_holder().current


def reload_catalog(config: Optional[CatalogConfig] = None) -> CatalogRegistry:
    """Rebuild the active catalog, re-reading the config file unless ``config`` is given."""
    if config is None:
        get_config_manager().invalidate()
        return get_catalog_holder().reload(build_catalog)
    return get_catalog_holder().reload(lambda: build_catalog(config))


__all__ = [
    "build_catalog",
    "enabled_specs",
    "get_catalog",
    "get_catalog_holder",
    "reload_catalog",
]
