from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class LLMResponse:
    """Normalized answer of one completion.

    content is plain text with any Markdown code fence already removed, so
    workflows parse it directly (json.loads for clause drafts, as-is for
    translations).
    """

    content: str
    input_tokens: int
    output_tokens: int
    model: str
    latency_ms: int

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


class LLMProvider(ABC):
    # Recorded on every usage log row
    provider_name: str = "unknown"

    @abstractmethod
    async def complete(
        self,
        messages: list[dict],
        temperature: float = 0.0,
        max_tokens: int = 2000,
        response_format: dict | None = None,
    ) -> LLMResponse:
        """Send chat messages and return the normalized response.

        Raises LLMProviderError once no usable response could be obtained.
        """
        ...
