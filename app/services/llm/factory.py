from app.services.llm.base import LLMProvider


def create_llm_provider(settings) -> LLMProvider:
    """Create and return the configured LLM provider.

    Reads LLM_PROVIDER from settings. Both supported providers speak the
    OpenAI chat API, so they share one implementation with a different
    endpoint and key.
    """
    from app.services.llm.openai_provider import OpenAIProvider

    common = {
        "model": settings.LLM_MODEL,
        "fallback_models": settings.LLM_FALLBACK_MODELS,
        "timeout": settings.LLM_TIMEOUT_SECONDS,
    }

    if settings.LLM_PROVIDER == "openai":
        return OpenAIProvider(api_key=settings.OPENAI_API_KEY, provider_name="openai", **common)

    if settings.LLM_PROVIDER == "openrouter":
        return OpenAIProvider(
            api_key=settings.OPENROUTER_API_KEY,
            base_url=settings.OPENROUTER_BASE_URL,
            provider_name="openrouter",
            **common,
        )

    raise ValueError(f"Unsupported LLM provider: {settings.LLM_PROVIDER!r}")
