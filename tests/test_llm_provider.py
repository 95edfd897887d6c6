"""
Tests for the OpenAI-compatible provider: fallback models, empty answers and code fences.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import httpx
import openai
import pytest

from app.config import Settings
from app.exceptions import LLMProviderError
from app.services.llm.factory import create_llm_provider
from app.services.llm.openai_provider import OpenAIProvider, strip_code_fences


def completion(content, model="gpt-4o-mini", usage=(11, 22)):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(prompt_tokens=usage[0], completion_tokens=usage[1]) if usage else None,
        model=model,
    )


def connection_error():
    return openai.APIConnectionError(request=httpx.Request("POST", "https://api.example.test/v1/chat/completions"))


def make_provider(*side_effect, fallback_models=("gpt-4o",)):
    provider = OpenAIProvider(api_key="test", model="gpt-4o-mini", fallback_models=fallback_models)
    create = AsyncMock(side_effect=list(side_effect))
    provider.client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    return provider, create


class TestOpenAIProvider:
    @pytest.mark.asyncio
    async def test_primary_model_answers(self):
        provider, create = make_provider(completion('{"ok": true}'))

        response = await provider.complete([{"role": "user", "content": "hi"}], response_format={"type": "json_object"})

        assert response.content == '{"ok": true}'
        assert (response.input_tokens, response.output_tokens, response.total_tokens) == (11, 22, 33)
        assert create.await_args.kwargs["response_format"] == {"type": "json_object"}

    @pytest.mark.asyncio
    async def test_falls_back_to_next_model(self):
        provider, create = make_provider(connection_error(), completion("fallback", model="gpt-4o"))

        response = await provider.complete([{"role": "user", "content": "hi"}])

        assert response.content == "fallback"
        assert response.model == "gpt-4o"
        assert [call.kwargs["model"] for call in create.await_args_list] == ["gpt-4o-mini", "gpt-4o"]

    @pytest.mark.asyncio
    async def test_empty_answer_moves_to_fallback(self):
        provider, _ = make_provider(completion(""), completion("second", usage=None))

        response = await provider.complete([{"role": "user", "content": "hi"}])

        assert response.content == "second"
        assert response.input_tokens == 0

    @pytest.mark.asyncio
    async def test_all_models_failing(self):
        provider, _ = make_provider(connection_error(), connection_error())

        with pytest.raises(LLMProviderError) as exc_info:
            await provider.complete([{"role": "user", "content": "hi"}])

        assert "gpt-4o-mini" in str(exc_info.value)
        assert "gpt-4o:" in str(exc_info.value)

    def test_fallbacks_skip_the_primary_model(self):
        provider = OpenAIProvider(api_key="test", model="gpt-4o-mini", fallback_models=["gpt-4o-mini", "", "gpt-4o"])
        assert provider.fallback_models == ["gpt-4o"]


class TestHelpers:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ('```json\n{"a": 1}\n```', '{"a": 1}'),
            ("```\n<p>x</p>\n```", "<p>x</p>"),
            ("  plain  ", "plain"),
        ],
    )
    def test_strip_code_fences(self, raw, expected):
        assert strip_code_fences(raw) == expected

    def test_factory_builds_openrouter_provider(self):
        settings = Settings(
            LLM_PROVIDER="openrouter",
            OPENROUTER_API_KEY="or-key",
            LLM_MODEL="openai/gpt-4o-mini",
            DATABASE_URL="sqlite+aiosqlite://",
            DATABASE_URL_SYNC="sqlite://",
        )

        provider = create_llm_provider(settings)

        assert provider.provider_name == "openrouter"
        assert provider.model == "openai/gpt-4o-mini"
        assert "openrouter.ai" in str(provider.client.base_url)
