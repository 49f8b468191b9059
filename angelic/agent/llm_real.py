"""AnthropicLLM: production LLMClient backed by the Anthropic async SDK."""

import structlog
from anthropic import AsyncAnthropic

from angelic.agent.llm_helpers import _invoke_with_retry
from angelic.core.config import get_settings

logger = structlog.get_logger(__name__)


class AnthropicLLM:
    """LLMClient that calls Claude with overload retry."""

    def __init__(self, model: str | None = None, client: AsyncAnthropic | None = None):
        settings = get_settings()
        self.model = model or settings.chat_model
        self.client = client or AsyncAnthropic(api_key=settings.anthropic_api_key)

    async def complete(
        self,
        system: str,
        messages: list[dict],
        *,
        max_tokens: int = 1024,
        temperature: float = 0.3,
        model: str | None = None,
    ) -> str:
        model_name = model or self.model
        logger.debug("llm_call_started", model=model_name, max_tokens=max_tokens, turns=len(messages))
        text = await _invoke_with_retry(
            self.client,
            model_name,
            system,
            messages,
            max_tokens=max_tokens,
            temperature=temperature,
        )
        logger.debug("llm_call_completed", model=model_name, chars=len(text))
        return text
