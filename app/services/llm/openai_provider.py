import logging
import re
import time

import openai
from openai import AsyncOpenAI
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from app.exceptions import LLMProviderError
from app.services.llm.base import LLMProvider, LLMResponse

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"^```[a-zA-Z]*\s*|\s*```$")


def strip_code_fences(text: str) -> str:
    """Remove a Markdown code fence wrapped around the whole answer."""
    return _CODE_FENCE.sub("", text.strip()).strip()


class OpenAIProvider(LLMProvider):
    """Chat completions against any OpenAI-compatible endpoint.

    Each model gets up to three attempts on rate limits and timeouts; after
    that the next fallback model is tried. OpenRouter is served by pointing
    base_url at its API.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        fallback_models: list[str] | tuple = (),
        base_url: str | None = None,
        timeout: float = 30.0,
        provider_name: str = "openai",
    ):
        self.client = AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout)
        self.model = model
        self.fallback_models = [m for m in fallback_models if m and m != model]
        self.provider_name = provider_name

    async def complete(
        self,
        messages: list[dict],
        temperature: float = 0.0,
        max_tokens: int = 2000,
        response_format: dict | None = None,
    ) -> LLMResponse:
        errors = []
        for model in [self.model, *self.fallback_models]:
            try:
                return await self._complete_with_model(
                    model, messages, temperature, max_tokens, response_format
                )
            except (openai.OpenAIError, LLMProviderError) as e:
                logger.warning(f"LLM call failed: provider={self.provider_name} model={model} error={e}")
                errors.append(f"{model}: {e}")

        raise LLMProviderError(f"All models failed ({'; '.join(errors)})")

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type((openai.RateLimitError, openai.APITimeoutError)),
        reraise=True,
    )
    async def _complete_with_model(
        self,
        model: str,
        messages: list[dict],
        temperature: float,
        max_tokens: int,
        response_format: dict | None,
    ) -> LLMResponse:
        start = time.monotonic()

        kwargs: dict = {
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if response_format:
            kwargs["response_format"] = response_format

        response = await self.client.chat.completions.create(**kwargs)
        latency_ms = int((time.monotonic() - start) * 1000)

        if not response.choices or not response.choices[0].message.content:
            raise LLMProviderError(f"Empty completion from model {model}")

        usage = response.usage
        return LLMResponse(
            content=strip_code_fences(response.choices[0].message.content),
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
            model=response.model or model,
            latency_ms=latency_ms,
        )
