"""Model package templates, pools and the override rules that apply to them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, field_serializer, field_validator, model_validator
from pydantic.alias_generators import to_camel

from modelcatalog.core.errors import MalformedSpecError, UnknownPackageError, validate_model
from modelcatalog.core.frozen import freeze_value, thaw_value
from modelcatalog.core.library import NamedLibrary

AUTODETECT_MODEL = "AUTODETECT"


class PackageDimension(BaseModel):
    """A named choice on a package, e.g. parameter count, whose options overlay params."""

    model_config = ConfigDict(
        frozen=True, extra="forbid", alias_generator=to_camel, populate_by_name=True
    )

    name: str
    description: Optional[str] = None
    options: Mapping[str, Mapping[str, Any]]
    default_option: Optional[str] = None

    @field_validator("options")
    @classmethod
    def _read_only_options(cls, value: Mapping[str, Mapping[str, Any]]) -> Mapping[str, Any]:
        return freeze_value(value)

    @field_serializer("options")
    def _plain_options(self, value: Mapping[str, Mapping[str, Any]]) -> Dict[str, Any]:
        return thaw_value(value)

    @model_validator(mode="after")
    def _default_is_an_option(self) -> "PackageDimension":
        if not self.options:
            raise ValueError(f"dimension '{self.name}' has no options")
        if self.default_option is not None and self.default_option not in self.options:
            raise ValueError(
                f"default option '{self.default_option}' is not one of dimension '{self.name}'"
            )
        return self


class ModelPackage(BaseModel):
    """Template of default parameters for one concrete model."""

    model_config = ConfigDict(
        frozen=True, extra="forbid", alias_generator=to_camel, populate_by_name=True
    )

    title: str
    params: Mapping[str, Any]
    is_open_source: bool = False
    description: Optional[str] = None
    icon: Optional[str] = None
    ref_url: Optional[str] = None
    dimensions: Tuple[PackageDimension, ...] = ()

    @field_validator("params")
    @classmethod
    def _read_only_params(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return freeze_value(value)

    @field_serializer("params")
    def _plain_params(self, value: Mapping[str, Any]) -> Dict[str, Any]:
        return thaw_value(value)

    def clone(self) -> "ModelPackage":
        """Distinct package equal to this one; its read-only containers are shared."""
        return self.model_copy()

    def override(
        self,
        *,
        title: Optional[str] = None,
        params: Optional[Mapping[str, Any]] = None,
        **fields: Any,
    ) -> "ModelPackage":
        """Return a copy with ``title``/``fields`` replaced and ``params`` merged key by key."""
        unknown = sorted(set(fields) - set(type(self).model_fields))
        if unknown:
            raise MalformedSpecError(
                f"package '{self.title}': cannot override field(s) {', '.join(unknown)}"
            )
        data = self.model_dump()
        data.update(thaw_value(fields))
        if title is not None:
            data["title"] = title
        if params:
            data["params"] = {**data["params"], **thaw_value(params)}
        return validate_model(ModelPackage, data, f"package '{self.title}'")

    def dimension(self, name: str) -> PackageDimension:
        for dimension in self.dimensions:
            if dimension.name == name:
                return dimension
        raise UnknownPackageError(f"package '{self.title}' has no dimension '{name}'")

    def select(self, choices: Mapping[str, str]) -> "ModelPackage":
        """Return a copy with the chosen dimension options merged into ``params``."""
        overlay: Dict[str, Any] = {}
        for name, option in choices.items():
            dimension = self.dimension(name)
            if option not in dimension.options:
                raise UnknownPackageError(
                    f"package '{self.title}': dimension '{name}' has no option '{option}'"
                )
            overlay.update(dimension.options[option])
        if not overlay:
            return self.clone()
        return self.override(params=overlay)


class PackageLibrary(NamedLibrary[ModelPackage]):
    """Shared model packages, addressable by name."""

    kind = "model package"

    def _missing(self, name: str) -> UnknownPackageError:
        return UnknownPackageError(f"Unknown model package '{name}'")


PackageSource = Union[ModelPackage, str]


def is_open_source(package: ModelPackage) -> bool:
    return package.is_open_source


@dataclass(frozen=True)
class PackagePool:
    """Lazily filtered subset of a package library.

    The pool is re-derived each time it is resolved, so it always reflects the
    library it is resolved against.
    """

    name: str
    predicate: Callable[[ModelPackage], bool]

    def resolve(self, library: PackageLibrary) -> Tuple[ModelPackage, ...]:
        return library.filter(self.predicate)


@dataclass(frozen=True)
class PackageOverride:
    """Reference to a package plus a title and/or field-level params overlay."""

    base: PackageSource
    title: Optional[str] = None
    params: Dict[str, Any] = field(default_factory=dict)
    fields: Dict[str, Any] = field(default_factory=dict)

    def apply(self, package: ModelPackage) -> ModelPackage:
        return package.override(title=self.title, params=self.params, **self.fields)


@dataclass(frozen=True)
class PackageGroupOverride:
    """The same params overlay applied to clones of every package in ``refs``."""

    refs: Tuple[Union[PackageSource, PackagePool], ...]
    params: Dict[str, Any] = field(default_factory=dict)


def resolve_package_source(source: Any, library: PackageLibrary) -> ModelPackage:
    if isinstance(source, ModelPackage):
        return source
    if isinstance(source, str):
        return library.get(source)
    raise MalformedSpecError(f"Unsupported package reference: {source!r}")


def override_package(
    base: PackageSource,
    *,
    title: Optional[str] = None,
    params: Optional[Mapping[str, Any]] = None,
    **fields: Any,
) -> PackageOverride:
    """Declare a per-provider clone-and-merge of a shared package."""
    return PackageOverride(base=base, title=title, params=dict(params or {}), fields=dict(fields))


def override_all(
    refs: Sequence[Union[PackageSource, PackagePool]],
    *,
    params: Mapping[str, Any],
) -> PackageGroupOverride:
    """Declare one params overlay for every package in ``refs``."""
    return PackageGroupOverride(refs=tuple(refs), params=dict(params))


AUTODETECT = ModelPackage(
    title="Autodetect",
    description=(
        "Automatically populate the model list by calling the /models endpoint of the server"
    ),
    params={"model": AUTODETECT_MODEL},
    is_open_source=False,
)


def autodetect(title: str) -> PackageOverride:
    """AUTODETECT branded for one provider; only the title changes."""
    return override_package(AUTODETECT, title=title)


def _parameter_count(model_prefix: str, title_prefix: str, *sizes: str) -> PackageDimension:
    return PackageDimension(
        name="Parameter Count",
        description="The number of parameters in the model",
        options={
            size: {"model": f"{model_prefix}-{size}", "title": f"{title_prefix}-{size}"}
            for size in sizes
        },
        default_option=sizes[0],
    )


MODEL_PACKAGES = PackageLibrary(
    [
        ("autodetect", AUTODETECT),
        (
            "llama3_chat",
            ModelPackage(
                title="Llama3 Chat",
                description="The latest model from Meta, fine-tuned for chat",
                params={"title": "Llama3-8b", "model": "llama3-8b", "contextLength": 8192},
                icon="meta.png",
                dimensions=(_parameter_count("llama3", "Llama3", "8b", "70b"),),
                is_open_source=True,
            ),
        ),
        (
            "code_llama_instruct",
            ModelPackage(
                title="CodeLlama Instruct",
                description="A model from Meta, fine-tuned for code generation and conversation",
                params={"title": "CodeLlama-7b", "model": "codellama-7b", "contextLength": 4096},
                icon="meta.png",
                dimensions=(
                    _parameter_count("codellama", "CodeLlama", "7b", "13b", "34b", "70b"),
                ),
                is_open_source=True,
            ),
        ),
        (
            "wizard_coder",
            ModelPackage(
                title="WizardCoder",
                description=(
                    "A CodeLlama-based code generation model from WizardLM, "
                    "focused on Python"
                ),
                ref_url="https://huggingface.co/WizardLM/WizardCoder-Python-34B-V1.0",
                params={"title": "WizardCoder-7b", "model": "wizardcoder-7b", "contextLength": 4096},
                icon="wizardlm.png",
                dimensions=(_parameter_count("wizardcoder", "WizardCoder", "7b", "13b", "34b"),),
                is_open_source=True,
            ),
        ),
        (
            "phind_code_llama",
            ModelPackage(
                title="Phind CodeLlama (34b)",
                description="A finetune of CodeLlama by Phind",
                params={
                    "title": "Phind CodeLlama",
                    "model": "phind-codellama-34b",
                    "contextLength": 4096,
                },
                icon="phind.png",
                is_open_source=True,
            ),
        ),
        (
            "mistral_os",
            ModelPackage(
                title="Mistral",
                description=(
                    "A 7b parameter base model created by Mistral AI, "
                    "very competent for code generation and other tasks"
                ),
                params={"title": "Mistral", "model": "mistral-7b", "contextLength": 4096},
                icon="mistral.png",
                is_open_source=True,
            ),
        ),
        (
            "deepseek",
            ModelPackage(
                title="DeepSeek-Coder",
                description=(
                    "A model pre-trained on 2 trillion tokens including 80+ programming languages "
                    "and a repo-level corpus."
                ),
                params={"title": "DeepSeek-7b", "model": "deepseek-7b", "contextLength": 4096},
                icon="deepseek.png",
                dimensions=(_parameter_count("deepseek", "DeepSeek", "7b", "1b", "33b"),),
                is_open_source=True,
            ),
        ),
        (
            "codellama_70b_trial",
            ModelPackage(
                title="Codellama 70b (trial)",
                description="The best code model from Meta, served by the free trial proxy",
                params={"title": "Codellama 70b (trial)", "model": "codellama-70b", "contextLength": 4096},
                icon="meta.png",
            ),
        ),
        (
            "mixtral_trial",
            ModelPackage(
                title="Mixtral (trial)",
                description="Mixtral 8x7b served by the free trial proxy",
                params={"title": "Mixtral (trial)", "model": "mistral-8x7b", "contextLength": 32768},
                icon="mistral.png",
            ),
        ),
        (
            "llama3_70b_chat",
            ModelPackage(
                title="Llama3 70b Chat",
                description="The largest Llama3 model, fine-tuned for chat",
                params={"title": "Llama3 70b Chat", "model": "llama3-70b", "contextLength": 8192},
                icon="meta.png",
            ),
        ),
        (
            "llama3_8b_chat",
            ModelPackage(
                title="Llama3 8b Chat",
                description="The small Llama3 model, fine-tuned for chat",
                params={"title": "Llama3 8b Chat", "model": "llama3-8b", "contextLength": 8192},
                icon="meta.png",
            ),
        ),
        (
            "llama2_70b_chat",
            ModelPackage(
                title="Llama2 70b Chat",
                description="The largest Llama2 model, fine-tuned for chat",
                params={"title": "Llama2 70b Chat", "model": "llama2-70b", "contextLength": 4096},
                icon="meta.png",
            ),
        ),
        (
            "gpt_4o",
            ModelPackage(
                title="GPT-4o",
                description="OpenAI's most capable multimodal model",
                params={"title": "GPT-4o", "model": "gpt-4o", "contextLength": 128_000},
                icon="openai.png",
            ),
        ),
        (
            "gpt_4_turbo",
            ModelPackage(
                title="GPT-4 Turbo",
                description="A faster, cheaper GPT-4 with a 128k context window",
                params={"title": "GPT-4 Turbo", "model": "gpt-4-turbo", "contextLength": 128_000},
                icon="openai.png",
            ),
        ),
        (
            "gpt_35_turbo",
            ModelPackage(
                title="GPT-3.5-Turbo",
                description="A faster, cheaper OpenAI model, slightly less capable",
                params={"title": "GPT-3.5-Turbo", "model": "gpt-3.5-turbo", "contextLength": 16_385},
                icon="openai.png",
            ),
        ),
        (
            "claude_3_opus",
            ModelPackage(
                title="Claude 3 Opus",
                description="Anthropic's most capable model, beating GPT-4 on many benchmarks",
                params={
                    "title": "Claude 3 Opus",
                    "model": "claude-3-opus-20240229",
                    "contextLength": 200_000,
                },
                icon="anthropic.png",
            ),
        ),
        (
            "claude_3_sonnet",
            ModelPackage(
                title="Claude 3 Sonnet",
                description="The second most capable model in the Claude 3 series",
                params={
                    "title": "Claude 3 Sonnet",
                    "model": "claude-3-sonnet-20240229",
                    "contextLength": 200_000,
                },
                icon="anthropic.png",
            ),
        ),
        (
            "claude_3_haiku",
            ModelPackage(
                title="Claude 3 Haiku",
                description="The third most capable model in the Claude 3 series",
                params={
                    "title": "Claude 3 Haiku",
                    "model": "claude-3-haiku-20240307",
                    "contextLength": 200_000,
                },
                icon="anthropic.png",
            ),
        ),
        (
            "codestral",
            ModelPackage(
                title="Codestral",
                description="Mistral AI's model trained specifically for code",
                params={"title": "Codestral", "model": "codestral-latest", "contextLength": 32_000},
                icon="mistral.png",
            ),
        ),
        (
            "mistral_large",
            ModelPackage(
                title="Mistral Large",
                description="Mistral AI's flagship model for complex reasoning",
                params={"title": "Mistral Large", "model": "mistral-large-latest", "contextLength": 32_000},
                icon="mistral.png",
            ),
        ),
        (
            "mistral_small",
            ModelPackage(
                title="Mistral Small",
                description="A cost-efficient Mistral AI model for simple tasks",
                params={"title": "Mistral Small", "model": "mistral-small-latest", "contextLength": 32_000},
                icon="mistral.png",
            ),
        ),
        (
            "mistral_8x22b",
            ModelPackage(
                title="Mixtral 8x22b",
                description="The largest open-weight mixture-of-experts model from Mistral AI",
                params={"title": "Mixtral 8x22b", "model": "open-mixtral-8x22b", "contextLength": 65_536},
                icon="mistral.png",
            ),
        ),
        (
            "mistral_8x7b",
            ModelPackage(
                title="Mixtral 8x7b",
                description="A sparse mixture-of-experts model served by the Mistral API",
                params={"title": "Mixtral 8x7b", "model": "open-mixtral-8x7b", "contextLength": 32_000},
                icon="mistral.png",
            ),
        ),
        (
            "mistral_7b",
            ModelPackage(
                title="Mistral 7b",
                description="The original 7b model from Mistral AI, served by their API",
                params={"title": "Mistral 7b", "model": "open-mistral-7b", "contextLength": 32_000},
                icon="mistral.png",
            ),
        ),
        (
            "command_r",
            ModelPackage(
                title="Command R",
                description="Cohere's model for retrieval-augmented generation and tool use",
                params={"title": "Command R", "model": "command-r", "contextLength": 128_000},
                icon="cohere.png",
            ),
        ),
        (
            "command_r_plus",
            ModelPackage(
                title="Command R+",
                description="Cohere's most capable model for enterprise workloads",
                params={"title": "Command R+", "model": "command-r-plus", "contextLength": 128_000},
                icon="cohere.png",
            ),
        ),
        (
            "gemini_15_pro",
            ModelPackage(
                title="Gemini 1.5 Pro",
                description="Google's mid-size multimodal model with a 1M token context window",
                params={
                    "title": "Gemini 1.5 Pro",
                    "model": "gemini-1.5-pro-latest",
                    "contextLength": 1_000_000,
                },
                icon="gemini.png",
            ),
        ),
        (
            "gemini_pro",
            ModelPackage(
                title="Gemini Pro",
                description="Google's previous-generation general purpose model",
                params={"title": "Gemini Pro", "model": "gemini-pro", "contextLength": 32_000},
                icon="gemini.png",
            ),
        ),
        (
            "gemini_15_flash",
            ModelPackage(
                title="Gemini 1.5 Flash",
                description="A fast and versatile multimodal model from Google",
                params={
                    "title": "Gemini 1.5 Flash",
                    "model": "gemini-1.5-flash-latest",
                    "contextLength": 1_000_000,
                },
                icon="gemini.png",
            ),
        ),
    ]
)

OPEN_SOURCE_POOL = PackagePool(name="open-source", predicate=is_open_source)


def filter_pool(
    predicate: Callable[[ModelPackage], bool],
    library: PackageLibrary = MODEL_PACKAGES,
) -> Tuple[ModelPackage, ...]:
    """Copies of every package in ``library`` satisfying ``predicate``, in declaration order."""
    return tuple(package.clone() for package in library.filter(predicate))


__all__ = [
    "AUTODETECT",
    "AUTODETECT_MODEL",
    "MODEL_PACKAGES",
    "OPEN_SOURCE_POOL",
    "ModelPackage",
    "PackageDimension",
    "PackageGroupOverride",
    "PackageLibrary",
    "PackageOverride",
    "PackagePool",
    "PackageSource",
    "autodetect",
    "filter_pool",
    "is_open_source",
    "override_all",
    "override_package",
    "resolve_package_source",
]
