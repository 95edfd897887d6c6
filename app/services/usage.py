import logging
import uuid

from app.services.llm.base import LLMResponse

logger = logging.getLogger(__name__)


def _calculate_cost(input_tokens: int, output_tokens: int, model: str) -> float:
    """Estimate cost in USD based on OpenAI pricing (per 1M tokens)."""
    PRICING: dict[str, dict[str, float]] = {
        "gpt-4o-mini": {"input": 0.15, "output": 0.60},
        "gpt-4o": {"input": 2.50, "output": 10.00},
    }
    # OpenRouter reports models as "openai/gpt-4o-mini"
    rates = PRICING.get(model.rsplit("/", 1)[-1], PRICING["gpt-4o-mini"])
    return (input_tokens * rates["input"] + output_tokens * rates["output"]) / 1_000_000


async def record_llm_usage(
    repo,
    *,
    provider: str,
    operation: str,
    response: LLMResponse,
    document_id: uuid.UUID | None = None,
) -> None:
    """Write one usage row. Never raises: accounting must not fail the caller."""
    if repo is None:
        return
    try:
        await repo.create(
            document_id=document_id,
            provider=provider,
            model=response.model,
            operation=operation,
            input_tokens=response.input_tokens,
            output_tokens=response.output_tokens,
            cost_usd=_calculate_cost(response.input_tokens, response.output_tokens, response.model),
            latency_ms=response.latency_ms,
            success=True,
        )
        logger.info(
            f"LLM usage recorded: operation={operation} model={response.model} "
            f"tokens={response.total_tokens} latency_ms={response.latency_ms}"
        )
    except Exception as e:
        logger.warning(f"LLM usage log failed: operation={operation} model={response.model} error={e}")
