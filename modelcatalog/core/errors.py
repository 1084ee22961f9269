"""Catalog build errors with stable error codes."""

from __future__ import annotations

from typing import Any, Mapping, Type, TypeVar

from pydantic import BaseModel, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

_INPUT_TYPE_FIELDS = {"input_type", "inputType"}
_TAG_FIELDS = {"tags"}


class CatalogError(Exception):
    """Base catalog exception with a stable error code."""

    def __init__(self, error_code: str, message: str) -> None:
        super().__init__(message)
        self.error_code = error_code


class MalformedSpecError(CatalogError):
    """A provider, package or input spec cannot be composed."""

    def __init__(self, message: str, *, error_code: str = "malformed_spec") -> None:
        super().__init__(error_code, message)


class MissingFieldError(MalformedSpecError):
    """A required field is absent."""

    def __init__(self, message: str) -> None:
        super().__init__(message, error_code="missing_field")


class UnknownTagError(MalformedSpecError):
    """Tag outside the provider tag vocabulary."""

    def __init__(self, message: str) -> None:
        super().__init__(message, error_code="unknown_tag")


class UnknownInputTypeError(MalformedSpecError):
    """Input widget kind outside the supported set."""

    def __init__(self, message: str) -> None:
        super().__init__(message, error_code="unknown_input_type")


class UnknownPackageError(CatalogError):
    """Model package reference that does not resolve."""

    def __init__(self, message: str) -> None:
        super().__init__("unknown_package", message)


class UnknownInputError(CatalogError):
    """Input descriptor reference that does not resolve."""

    def __init__(self, message: str) -> None:
        super().__init__("unknown_input", message)


class DuplicateProviderKeyError(CatalogError):
    """Two provider specs share a registry key."""

    def __init__(self, message: str) -> None:
        super().__init__("duplicate_provider_key", message)


class DuplicateLibraryEntryError(CatalogError):
    """Two library entries share a name."""

    def __init__(self, message: str) -> None:
        super().__init__("duplicate_library_entry", message)


class UnknownProviderError(CatalogError):
    """Lookup of a provider key absent from the registry."""

    def __init__(self, message: str) -> None:
        super().__init__("unknown_provider", message)


def from_validation_error(exc: ValidationError, context: str) -> MalformedSpecError:
    """Translate a pydantic validation failure into the catalog error taxonomy."""
    details = exc.errors()
    if not details:
        return MalformedSpecError(f"{context}: {exc}")

    def _describe(detail: Any) -> str:
        where = ".".join(str(part) for part in detail["loc"]) or "<root>"
        return f"{context}: {where}: {detail['msg']}"

    for detail in details:
        if detail["type"] == "missing":
            return MissingFieldError(_describe(detail))
    for detail in details:
        field = str(detail["loc"][0]) if detail["loc"] else ""
        if detail["type"] == "enum" and field in _TAG_FIELDS:
            return UnknownTagError(_describe(detail))
        if detail["type"] == "enum" and field in _INPUT_TYPE_FIELDS:
            return UnknownInputTypeError(_describe(detail))
    return MalformedSpecError(_describe(details[0]))


def validate_model(model_cls: Type[ModelT], data: Mapping[str, Any], context: str) -> ModelT:
    """Validate ``data`` into ``model_cls`` or raise a catalog error naming ``context``."""
    try:
        return model_cls.model_validate(dict(data))
    except ValidationError as exc:
        raise from_validation_error(exc, context) from exc
