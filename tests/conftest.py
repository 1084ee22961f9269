"""Pytest configuration and fixtures for all tests."""

import logging

import pytest

from modelcatalog.core import catalog as catalog_module
from modelcatalog.core import config as config_module
from modelcatalog.utils import log as log_module


@pytest.fixture(autouse=True)
def isolated_catalog_state(tmp_path, monkeypatch):
    """Keep every test away from the real home directory and process-wide caches.

    The config manager and the catalog holder are module-level singletons, so a
    test that points them at a temporary file would otherwise leak into the next.
    """
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv(config_module.CONFIG_ENV_VAR, raising=False)
    monkeypatch.delenv("MODELCATALOG_LOG_LEVEL", raising=False)
    monkeypatch.setattr(config_module, "_config_manager", None)
    monkeypatch.setattr(catalog_module, "_holder", None)
    monkeypatch.setattr(log_module, "_logger", log_module._logger)
    yield
    root = logging.getLogger(log_module.LOGGER_NAME)
    for handler in list(root.handlers):
        if isinstance(handler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
