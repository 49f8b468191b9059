"""LLMClient protocol: the seam between prompt logic and the model provider.

Services build prompts and interpret replies; an LLMClient only turns a
system prompt plus a message list into text. Production uses AnthropicLLM
(llm_real.py), tests use the scripted LLMFake (llm_fake.py).
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class LLMClient(Protocol):
    async def complete(
        self,
        system: str,
        messages: list[dict],
        *,
        max_tokens: int = 1024,
        temperature: float = 0.3,
        model: str | None = None,
    ) -> str:
        """Return the model's text reply.

        Args:
            system: System prompt
            messages: Chat turns as ``{"role": "user"|"assistant", "content": str}``,
                starting with a user turn
            max_tokens: Output bound
            temperature: Sampling temperature
            model: Model override (defaults to the client's model)

        Raises:
            Exception: Any provider failure propagates to the caller.
        """
        ...
