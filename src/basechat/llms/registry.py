"""
Model registry: the single source of truth for providers and their models.

'ModelRegistry' is an immutable configuration object built once at start-up from
a provider table and passed by reference to everything that needs it (the
orchestrator, the controller, the models API route). Lookups never raise: an
unknown model resolves to 'None' and the caller decides the fallback.

The registry also owns the provider -> backend dispatch. 'llm_for' builds the
concrete 'StructuredLLM' for a resolved provider from the factories it was
constructed with, so the orchestrator only ever depends on the interface.
"""

from collections.abc import Callable, Mapping
from enum import StrEnum
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict

from basechat.llms.base import StructuredLLM


class Provider(StrEnum):
    OPENAI = "openai"
    GOOGLE = "google"
    ANTHROPIC = "anthropic"


class ProviderConfig(BaseModel):
    """Models, logo and display names offered by one provider."""

    model_config = ConfigDict(frozen=True)

    models: tuple[str, ...]
    logo: str
    display_names: Mapping[str, str]


class ModelDescriptor(BaseModel):
    """A '(provider, model_id)' pair with its UI presentation."""

    model_config = ConfigDict(frozen=True)

    provider: Provider
    model_id: str
    display_name: str
    logo: str


PROVIDER_CONFIG: Mapping[Provider, ProviderConfig] = MappingProxyType(
    {
        Provider.OPENAI: ProviderConfig(
            models=("gpt-4o", "gpt-3.5-turbo"),
            logo="/openai.svg",
            display_names={"gpt-4o": "GPT-4o", "gpt-3.5-turbo": "GPT-3.5 Turbo"},
        ),
        Provider.GOOGLE: ProviderConfig(
            models=("gemini-2.0-flash", "gemini-1.5-pro"),
            logo="/gemini.svg",
            display_names={"gemini-2.0-flash": "Gemini 2.0 Flash", "gemini-1.5-pro": "Gemini 1.5 Pro"},
        ),
        Provider.ANTHROPIC: ProviderConfig(
            models=("claude-3-7-sonnet-latest", "claude-3-5-haiku-latest"),
            logo="/anthropic.svg",
            display_names={
                "claude-3-7-sonnet-latest": "Claude 3.7 Sonnet",
                "claude-3-5-haiku-latest": "Claude 3.5 Haiku",
            },
        ),
    }
)

DEFAULT_MODEL = "claude-3-7-sonnet-latest"
DEFAULT_PROVIDER = Provider.ANTHROPIC
# Naming always goes through the OpenAI backend
DEFAULT_NAMING_MODEL = "gpt-4o-mini"

LLMFactory = Callable[[str], StructuredLLM]


class ModelRegistry:
    """
    Immutable lookup over a provider table.

    Attributes:
        default_model: Model pre-selected in the UI and used when none is given.
        default_provider: Provider substituted when a model cannot be resolved.
        default_naming_model: Model used to title new conversations.
    """

    def __init__(
        self,
        providers: Mapping[Provider, ProviderConfig] = PROVIDER_CONFIG,
        default_model: str = DEFAULT_MODEL,
        default_provider: Provider = DEFAULT_PROVIDER,
        default_naming_model: str = DEFAULT_NAMING_MODEL,
        llm_factories: Mapping[Provider, LLMFactory] | None = None,
    ) -> None:
        descriptors: dict[str, ModelDescriptor] = {}
        for provider, config in providers.items():
            for model_id in config.models:
                if model_id in descriptors:
                    raise ValueError(
                        f"Model {model_id!r} is listed under both {descriptors[model_id].provider!r} and {provider!r}"
                    )
                descriptors[model_id] = ModelDescriptor(
                    provider=provider,
                    model_id=model_id,
                    display_name=config.display_names.get(model_id, model_id),
                    logo=config.logo,
                )
        self._descriptors: Mapping[str, ModelDescriptor] = MappingProxyType(descriptors)
        self._llm_factories: Mapping[Provider, LLMFactory] = MappingProxyType(dict(llm_factories or {}))
        self.default_model = default_model
        self.default_provider = default_provider
        self.default_naming_model = default_naming_model

    def resolve_provider(self, model_id: str) -> Provider | None:
        descriptor = self._descriptors.get(model_id)
        return descriptor.provider if descriptor else None

    def is_supported(self, model_id: str) -> bool:
        return model_id in self._descriptors

    def get_descriptor(self, model_id: str) -> ModelDescriptor | None:
        return self._descriptors.get(model_id)

    def list_models(self) -> list[ModelDescriptor]:
        return list(self._descriptors.values())

    def display_name(self, model_id: str) -> str:
        descriptor = self._descriptors.get(model_id)
        return descriptor.display_name if descriptor else model_id

    def logo(self, model_id: str) -> str | None:
        descriptor = self._descriptors.get(model_id)
        return descriptor.logo if descriptor else None

    def llm_for(self, provider: Provider, model_id: str) -> StructuredLLM:
        """Build the backend for 'provider' bound to 'model_id'."""
        if provider not in self._llm_factories:
            raise ValueError(f"No LLM backend configured for provider {provider!r}")
        return self._llm_factories[provider](model_id)
