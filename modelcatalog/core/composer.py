"""Compose provider definitions from library packages and input descriptors.

A provider is declared as an identity (title, backend identifier, marketing
copy, tags) plus two ordered reference lists: the model packages it offers and
the fields it collects from the user. Composition resolves every reference
against the shared libraries and produces a frozen ``ProviderDefinition``.

Rules:

* Display order is declaration order; pools are spliced in where they appear.
* Every package placed into a provider is its own copy, and its ``params``
  are read-only, so no provider can change the library or another provider.
* ``None`` entries (stray gaps in a hand-written list) are skipped.
* When two input references produce the same ``key``, the later one wins and
  keeps the later position.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from modelcatalog.core.errors import (
    MalformedSpecError,
    UnknownPackageError,
    UnknownTagError,
    validate_model,
)
from modelcatalog.core.frozen import freeze_value, thaw_value
from modelcatalog.core.inputs import (
    INPUT_DESCRIPTORS,
    InputBundle,
    InputDescriptor,
    InputLibrary,
    InputOverride,
)
from modelcatalog.core.packages import (
    MODEL_PACKAGES,
    ModelPackage,
    PackageGroupOverride,
    PackageLibrary,
    PackageOverride,
    PackagePool,
    resolve_package_source,
)
from modelcatalog.core.tags import ProviderTag
from modelcatalog.utils.log import get_logger

logger = get_logger()


def _coerce_tags(value: Any) -> Tuple[ProviderTag, ...]:
    if value is None:
        return ()
    if isinstance(value, (str, ProviderTag)):
        value = [value]
    tags: List[ProviderTag] = []
    for raw in value:
        try:
            tag = ProviderTag(raw)
        except ValueError:
            raise UnknownTagError(f"Unknown provider tag {raw!r}") from None
        if tag not in tags:
            tags.append(tag)
    return tuple(tags)


class ProviderIdentity(BaseModel):
    """Everything about a provider except its packages and input fields."""

    model_config = ConfigDict(
        frozen=True, extra="forbid", alias_generator=to_camel, populate_by_name=True
    )

    title: str
    provider: str
    description: str
    long_description: Optional[str] = None
    icon: Optional[str] = None
    tags: Tuple[ProviderTag, ...] = ()
    params: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)
    ref_page: Optional[str] = None
    api_key_url: Optional[str] = None
    download_url: Optional[str] = None

    @field_validator("tags", mode="before")
    @classmethod
    def _known_tags(cls, value: Any) -> Tuple[ProviderTag, ...]:
        return _coerce_tags(value)

    @field_validator("title", "provider", "description")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("params")
    @classmethod
    def _read_only_params(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return freeze_value(value)

    @field_serializer("params")
    def _plain_params(self, value: Mapping[str, Any]) -> Dict[str, Any]:
        return thaw_value(value)


class ProviderDefinition(ProviderIdentity):
    """A fully composed, read-only catalog entry."""

    packages: Tuple[ModelPackage, ...] = ()
    collect_input_for: Tuple[InputDescriptor, ...] = ()

    @model_validator(mode="after")
    def _unique_input_keys(self) -> "ProviderDefinition":
        seen: set[str] = set()
        for descriptor in self.collect_input_for:
            if descriptor.key in seen:
                raise ValueError(f"input key '{descriptor.key}' is collected twice")
            seen.add(descriptor.key)
        return self

    def package(self, selector: Union[str, int]) -> ModelPackage:
        """Find an offered package by display title or position."""
        if isinstance(selector, int):
            if 0 <= selector < len(self.packages):
                return self.packages[selector]
            raise UnknownPackageError(
                f"provider '{self.title}' has no package at index {selector}"
            )
        for candidate in self.packages:
            if candidate.title == selector:
                return candidate
        raise UnknownPackageError(f"provider '{self.title}' offers no package '{selector}'")

    def input(self, key: str) -> Optional[InputDescriptor]:
        for descriptor in self.collect_input_for:
            if descriptor.key == key:
                return descriptor
        return None


PackageRef = Union[
    ModelPackage, str, PackagePool, PackageOverride, PackageGroupOverride, None
]
InputRef = Union[InputDescriptor, str, InputOverride, InputBundle, None]


@dataclass(frozen=True)
class ProviderSpec:
    """Declarative recipe for one registry entry."""

    key: str
    identity: Union[ProviderIdentity, Mapping[str, Any]]
    packages: Tuple[PackageRef, ...] = ()
    inputs: Tuple[InputRef, ...] = ()


def _resolve_input_source(source: Any, library: InputLibrary) -> InputDescriptor:
    if isinstance(source, InputDescriptor):
        return source
    if isinstance(source, str):
        return library.get(source)
    raise MalformedSpecError(f"Unsupported input reference: {source!r}")


def expand_packages(
    refs: Iterable[PackageRef],
    library: PackageLibrary = MODEL_PACKAGES,
) -> List[ModelPackage]:
    """Resolve package references into independent package copies, in order."""
    resolved: List[ModelPackage] = []
    for ref in refs:
        if ref is None:
            continue
        if isinstance(ref, PackagePool):
            resolved.extend(package.clone() for package in ref.resolve(library))
        elif isinstance(ref, PackageOverride):
            resolved.append(ref.apply(resolve_package_source(ref.base, library)))
        elif isinstance(ref, PackageGroupOverride):
            members = expand_packages(ref.refs, library)
            resolved.extend(member.override(params=ref.params) for member in members)
        else:
            resolved.append(resolve_package_source(ref, library).clone())
    return resolved


def expand_inputs(
    refs: Iterable[InputRef],
    library: InputLibrary = INPUT_DESCRIPTORS,
) -> List[InputDescriptor]:
    """Resolve input references in order; a repeated key replaces the earlier field."""
    flattened: List[InputDescriptor] = []
    for ref in refs:
        if ref is None:
            continue
        if isinstance(ref, InputBundle):
            flattened.extend(expand_inputs(ref.items, library))
        elif isinstance(ref, InputOverride):
            flattened.append(_resolve_input_source(ref.base, library).override(**ref.fields))
        else:
            flattened.append(_resolve_input_source(ref, library).model_copy())

    by_key: Dict[str, InputDescriptor] = {}
    for descriptor in flattened:
        if descriptor.key in by_key:
            logger.debug(
                "[composer] Input field superseded by later reference",
                extra={"input_key": descriptor.key},
            )
            del by_key[descriptor.key]
        by_key[descriptor.key] = descriptor
    return list(by_key.values())


def compose_provider(
    identity: Union[ProviderIdentity, Mapping[str, Any]],
    packages: Sequence[PackageRef],
    inputs: Sequence[InputRef],
    *,
    key: Optional[str] = None,
    package_library: PackageLibrary = MODEL_PACKAGES,
    input_library: InputLibrary = INPUT_DESCRIPTORS,
) -> ProviderDefinition:
    """Merge identity, package refs and input refs into one provider definition."""
    context = f"provider '{key}'" if key else "provider"
    if isinstance(identity, ProviderIdentity):
        identity_data = identity.model_dump()
    else:
        identity_data = thaw_value(identity)
    overlap = {"packages", "collect_input_for", "collectInputFor"} & set(identity_data)
    if overlap:
        raise MalformedSpecError(
            f"{context}: packages and inputs must be passed separately, not in the identity"
        )

    resolved_identity = validate_model(ProviderIdentity, identity_data, context)
    definition = validate_model(
        ProviderDefinition,
        {
            **resolved_identity.model_dump(),
            "packages": expand_packages(packages, package_library),
            "collect_input_for": expand_inputs(inputs, input_library),
        },
        context,
    )
    logger.debug(
        "[composer] Composed provider",
        extra={
            "key": key,
            "provider": definition.provider,
            "packages": len(definition.packages),
            "inputs": len(definition.collect_input_for),
        },
    )
    return definition


def compose_spec(
    spec: ProviderSpec,
    *,
    package_library: PackageLibrary = MODEL_PACKAGES,
    input_library: InputLibrary = INPUT_DESCRIPTORS,
) -> ProviderDefinition:
    """Compose the definition described by ``spec``."""
    return compose_provider(
        spec.identity,
        spec.packages,
        spec.inputs,
        key=spec.key,
        package_library=package_library,
        input_library=input_library,
    )


__all__ = [
    "InputRef",
    "PackageRef",
    "ProviderDefinition",
    "ProviderIdentity",
    "ProviderSpec",
    "compose_provider",
    "compose_spec",
    "expand_inputs",
    "expand_packages",
]
