from sqlalchemy.ext.asyncio import AsyncSession

from app.models.llm_usage_log import LLMUsageLog


class LLMUsageLogRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **kwargs) -> LLMUsageLog:
        """Log one LLM call. Required: provider, model, operation, input_tokens, output_tokens, latency_ms, success.

        Runs in a SAVEPOINT so a failed insert does not poison the caller's transaction.
        """
        log = LLMUsageLog(**kwargs)
        async with self.session.begin_nested():
            self.session.add(log)
        return log
