"""Closed vocabularies the UI dispatches on."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ProviderTag(str, Enum):
    """Badges attached to a provider card."""

    REQUIRES_API_KEY = "Requires API Key"
    LOCAL = "Local"
    OPEN_SOURCE = "Open-Source"
    FREE = "Free"

    @classmethod
    def _aliases(cls) -> dict[str, "ProviderTag"]:
        return {
            "requiresapikey": cls.REQUIRES_API_KEY,
            "requires_api_key": cls.REQUIRES_API_KEY,
            "requires api key": cls.REQUIRES_API_KEY,
            "local": cls.LOCAL,
            "opensource": cls.OPEN_SOURCE,
            "open_source": cls.OPEN_SOURCE,
            "open-source": cls.OPEN_SOURCE,
            "free": cls.FREE,
        }

    @classmethod
    def _missing_(cls, value: object) -> Optional["ProviderTag"]:
        """Accept member names and case variants of the display values."""
        if isinstance(value, str):
            return cls._aliases().get(value.strip().lower())
        return None


class InputType(str, Enum):
    """Form widget kinds the UI knows how to render."""

    TEXT = "text"
    NUMBER = "number"
    PASSWORD = "password"
    URL = "url"
    CHECKBOX = "checkbox"


__all__ = ["InputType", "ProviderTag"]
