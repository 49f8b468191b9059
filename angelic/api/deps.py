"""Shared FastAPI dependencies."""

import structlog

from angelic.agent.llm import LLMClient
from angelic.agent.llm_fake import LLMFake
from angelic.agent.llm_real import AnthropicLLM
from angelic.core.config import get_settings

logger = structlog.get_logger(__name__)


def get_llm() -> LLMClient:
    """Dependency that provides the LLMClient.

    Returns AnthropicLLM when an API key is configured, LLMFake otherwise.
    Override this dependency in tests via app.dependency_overrides.
    """
    settings = get_settings()
    if settings.anthropic_api_key:
        return AnthropicLLM()
    logger.warning("llm_fake_in_use", reason="anthropic_api_key_missing")
    return LLMFake()
