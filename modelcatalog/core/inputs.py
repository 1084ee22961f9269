"""Reusable form-field descriptors and their override rules.

Every provider collects a handful of values from the user before a model can
be configured: an API key, a base URL, completion parameters. Those fields are
declared once here and referenced by name from the provider definitions. A
provider that needs a different default or label overrides the shared entry,
which always yields a fresh descriptor.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from modelcatalog.core.errors import MalformedSpecError, UnknownInputError, validate_model
from modelcatalog.core.frozen import freeze_value, thaw_value
from modelcatalog.core.library import NamedLibrary
from modelcatalog.core.tags import InputType


class InputDescriptor(BaseModel):
    """One user-supplied configuration field."""

    model_config = ConfigDict(
        frozen=True, extra="forbid", alias_generator=to_camel, populate_by_name=True
    )

    key: str
    label: str
    input_type: InputType = InputType.TEXT
    placeholder: Optional[str] = None
    required: bool = False
    default_value: Any = None
    description: Optional[str] = None
    min_value: Optional[float] = Field(default=None, alias="min")
    max_value: Optional[float] = Field(default=None, alias="max")
    step: Optional[float] = None

    @field_validator("key", "label")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("default_value")
    @classmethod
    def _read_only_default(cls, value: Any) -> Any:
        return freeze_value(value)

    @field_serializer("default_value")
    def _plain_default(self, value: Any) -> Any:
        return thaw_value(value)

    def override(self, **fields: Any) -> "InputDescriptor":
        """Return a copy with ``fields`` laid over this descriptor."""
        unknown = sorted(set(fields) - set(type(self).model_fields))
        if unknown:
            raise MalformedSpecError(
                f"input '{self.key}': cannot override unknown field(s) {', '.join(unknown)}"
            )
        data = self.model_dump()
        data.update(thaw_value(fields))
        return validate_model(InputDescriptor, data, f"input '{self.key}'")


InputSource = Union[InputDescriptor, str]


@dataclass(frozen=True)
class InputOverride:
    """Reference to a descriptor plus the fields a provider replaces."""

    base: InputSource
    fields: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class InputBundle:
    """Ordered group of descriptors spliced into a provider as a unit."""

    name: str
    items: Tuple[InputSource, ...]


class InputLibrary(NamedLibrary[InputDescriptor]):
    """Shared input descriptors, addressable by name."""

    kind = "input descriptor"

    def _missing(self, name: str) -> UnknownInputError:
        return UnknownInputError(f"Unknown input descriptor '{name}'")


def override_input(base: InputSource, **fields: Any) -> InputOverride:
    """Declare a per-provider override of a shared descriptor."""
    return InputOverride(base=base, fields=dict(fields))


INPUT_DESCRIPTORS = InputLibrary(
    [
        (
            "api_key",
            InputDescriptor(
                key="apiKey",
                label="API Key",
                input_type=InputType.TEXT,
                placeholder="Enter your API key",
                required=True,
            ),
        ),
        (
            "api_base",
            InputDescriptor(
                key="apiBase",
                label="API Base",
                input_type=InputType.TEXT,
                placeholder="e.g. http://localhost:8080",
                required=False,
            ),
        ),
        (
            "context_length",
            InputDescriptor(
                key="contextLength",
                label="Context Length",
                input_type=InputType.NUMBER,
                placeholder="e.g. 4096",
                required=False,
                description="Maximum number of tokens the model can attend to",
            ),
        ),
        (
            "temperature",
            InputDescriptor(
                key="completionOptions.temperature",
                label="Temperature",
                input_type=InputType.NUMBER,
                required=False,
                min_value=0.0,
                max_value=1.0,
                step=0.01,
            ),
        ),
        (
            "top_p",
            InputDescriptor(
                key="completionOptions.topP",
                label="Top-P",
                input_type=InputType.NUMBER,
                required=False,
                min_value=0.0,
                max_value=1.0,
                step=0.01,
            ),
        ),
        (
            "top_k",
            InputDescriptor(
                key="completionOptions.topK",
                label="Top-K",
                input_type=InputType.NUMBER,
                required=False,
                min_value=1,
                max_value=100,
                step=1,
            ),
        ),
        (
            "presence_penalty",
            InputDescriptor(
                key="completionOptions.presencePenalty",
                label="Presence Penalty",
                input_type=InputType.NUMBER,
                required=False,
                min_value=0.0,
                max_value=1.0,
                step=0.01,
            ),
        ),
        (
            "frequency_penalty",
            InputDescriptor(
                key="completionOptions.frequencyPenalty",
                label="Frequency Penalty",
                input_type=InputType.NUMBER,
                required=False,
                min_value=0.0,
                max_value=1.0,
                step=0.01,
            ),
        ),
        (
            "max_tokens",
            InputDescriptor(
                key="completionOptions.maxTokens",
                label="Max Tokens",
                input_type=InputType.NUMBER,
                required=False,
                min_value=1,
                step=1,
            ),
        ),
    ]
)

COMPLETION_PARAMS = InputBundle(
    name="completion_params",
    items=(
        "context_length",
        "temperature",
        "top_p",
        "top_k",
        "presence_penalty",
        "frequency_penalty",
        "max_tokens",
    ),
)


def api_key_input(provider_title: str) -> InputOverride:
    """Required API key field worded for ``provider_title``."""
    return override_input("api_key", placeholder=f"Enter your {provider_title} API key")


__all__ = [
    "COMPLETION_PARAMS",
    "INPUT_DESCRIPTORS",
    "InputBundle",
    "InputDescriptor",
    "InputLibrary",
    "InputOverride",
    "InputSource",
    "api_key_input",
    "override_input",
]
