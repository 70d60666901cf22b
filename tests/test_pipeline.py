"""
Tests for wiring the application from settings.
"""

import pytest

from basechat.llms.anthropic import AnthropicLLM
from basechat.llms.google import GoogleLLM
from basechat.llms.openai import OpenAILLM
from basechat.llms.registry import Provider
from basechat.pipeline import build_controller, build_llm, build_registry
from basechat.settings import Settings


@pytest.fixture
def settings() -> Settings:
    return Settings(
        openai_api_key="sk-test",
        anthropic_api_key="sk-ant-test",
        google_api_key="g-test",
        ragie_api_key="r-test",
        generation_timeout=30.0,
    )


@pytest.mark.parametrize(
    "provider, backend",
    [(Provider.OPENAI, OpenAILLM), (Provider.GOOGLE, GoogleLLM), (Provider.ANTHROPIC, AnthropicLLM)],
)
def test_build_llm_per_provider(settings, provider, backend):
    llm = build_llm(provider, "some-model", settings)
    assert isinstance(llm, backend)
    assert llm.model_name == "some-model"


def test_registry_dispatches_resolved_provider(settings):
    registry = build_registry(settings)
    provider = registry.resolve_provider("claude-3-5-haiku-latest")
    llm = registry.llm_for(provider, "claude-3-5-haiku-latest")
    assert isinstance(llm, AnthropicLLM)


def test_build_controller_defaults(settings):
    controller = build_controller(settings)
    assert controller.retriever.top_k == 6
    assert controller.retriever.rerank is True
    assert controller.orchestrator.temperature == 0.3
    assert controller.orchestrator.timeout == 30.0
    assert controller.naming_llm.model_name == "gpt-4o-mini"


def test_bind_address_from_environment(monkeypatch):
    monkeypatch.setenv("HOST", "0.0.0.0")
    monkeypatch.setenv("PORT", "9001")
    settings = Settings(_env_file=None)
    assert settings.host == "0.0.0.0"
    assert settings.port == 9001
