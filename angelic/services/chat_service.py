"""Chat service: one advisory turn against the LLM.

- Persona- and language-specific system prompt
- Reply cleanup (markdown, numbered/emoji lists, bullets)
- Multi-question guard: replies using two or more ordering words are replaced
  by a single focused question
- Best-effort follow-up question suggestions
"""

import re
from dataclasses import dataclass, field

import structlog

from angelic.agent.llm import LLMClient
from angelic.agent.personas import DEFAULT_PERSONA, get_persona
from angelic.core.config import get_settings
from angelic.core.exceptions import AIServiceUnavailableError
from angelic.prompts.chat import (
    CONSULTANT_SYSTEM_PROMPT,
    FOLLOW_UP_PROMPT,
    FOLLOW_UP_SYSTEM_PROMPT,
    LANGUAGE_INSTRUCTION,
    LANGUAGE_NAMES,
    PERSONA_SYSTEM_PROMPT,
    SINGLE_QUESTION_FALLBACK,
)

logger = structlog.get_logger(__name__)

CHAT_MAX_TOKENS = 1500
CHAT_TEMPERATURE = 0.4
FOLLOW_UP_MAX_TOKENS = 200
FOLLOW_UP_TEMPERATURE = 0.7
MAX_FOLLOW_UPS = 3

ORDERING_WORDS = ("首先", "其次", "再次", "最后", "第一", "第二", "第三")
ORDERING_WORD_LIMIT = 2

_BOLD = re.compile(r"\*\*([^*]+)\*\*")
_HEADER = re.compile(r"^#{1,6}\s+", re.MULTILINE)
_NUMBERED = re.compile(r"^\d+[.)]\s+", re.MULTILINE)
_EMOJI_NUMBER = re.compile("[0-9]️⃣\\s*")
_BULLET = re.compile(r"^[•\-*]\s+", re.MULTILINE)
_NUMBERED_PREFIX = re.compile(r"^\d+[.)]")

UNAVAILABLE_MESSAGE = "AI chat service temporarily unavailable, please try again later"


@dataclass
class ChatTurn:
    response: str
    follow_up_questions: list[str] = field(default_factory=list)
    analysis_data: dict | None = None
    fallback_used: bool = False


def clean_ai_response(text: str) -> str:
    """Strip chatbot-style formatting so the reply reads as plain conversation."""
    cleaned = _BOLD.sub(r"\1", text)
    cleaned = _HEADER.sub("", cleaned)
    cleaned = _NUMBERED.sub("", cleaned)
    cleaned = _EMOJI_NUMBER.sub("", cleaned)
    cleaned = _BULLET.sub("", cleaned)
    return cleaned.strip()


def count_ordering_words(text: str) -> int:
    return sum(1 for word in ORDERING_WORDS if word in text)


def build_system_prompt(persona_id: str, language: str) -> str:
    if persona_id == DEFAULT_PERSONA:
        return CONSULTANT_SYSTEM_PROMPT.format(language_name=LANGUAGE_NAMES[language])
    return PERSONA_SYSTEM_PROMPT.format(
        language_code=language.upper(),
        language_instruction=LANGUAGE_INSTRUCTION[language],
        persona_prompt=get_persona(persona_id).system_prompt,
    )


def parse_follow_ups(content: str) -> list[str]:
    questions = [line.strip() for line in content.split("\n")]
    questions = [q for q in questions if q and not _NUMBERED_PREFIX.match(q)]
    return questions[:MAX_FOLLOW_UPS]


async def generate_follow_ups(llm: LLMClient, user_message: str, ai_response: str, language: str) -> list[str]:
    """Suggest up to three follow-up questions; failures yield an empty list."""
    prompt = FOLLOW_UP_PROMPT[language].format(user_message=user_message, ai_response=ai_response)
    try:
        content = await llm.complete(
            FOLLOW_UP_SYSTEM_PROMPT[language],
            [{"role": "user", "content": prompt}],
            max_tokens=FOLLOW_UP_MAX_TOKENS,
            temperature=FOLLOW_UP_TEMPERATURE,
            model=get_settings().utility_model,
        )
    except Exception as exc:
        logger.warning("follow_up_generation_failed", error=str(exc), error_type=type(exc).__name__)
        return []
    return parse_follow_ups(content or "")


async def chat_with_ai(
    llm: LLMClient,
    message: str,
    history: list[dict],
    language: str = "zh",
    persona_id: str = DEFAULT_PERSONA,
) -> ChatTurn:
    """Run one chat turn.

    Args:
        llm: LLMClient
        message: The new user message
        history: Prior turns as ``{"role", "content"}`` dicts, oldest first
        language: UI language the reply must use ("zh" | "en")
        persona_id: "consultant" | "customer"

    Raises:
        AIServiceUnavailableError: The model call failed or the reply was empty
    """
    messages = [{"role": turn["role"], "content": turn["content"]} for turn in history]
    messages.append({"role": "user", "content": message})

    try:
        raw = await llm.complete(
            build_system_prompt(persona_id, language),
            messages,
            max_tokens=CHAT_MAX_TOKENS,
            temperature=CHAT_TEMPERATURE,
            model=get_settings().chat_model,
        )
    except Exception as exc:
        logger.error("chat_llm_call_failed", error=str(exc), error_type=type(exc).__name__)
        raise AIServiceUnavailableError(UNAVAILABLE_MESSAGE) from exc

    reply = clean_ai_response(raw or "")
    if not reply:
        logger.error("chat_llm_empty_reply")
        raise AIServiceUnavailableError(UNAVAILABLE_MESSAGE)

    ordering_words = count_ordering_words(reply)
    if ordering_words >= ORDERING_WORD_LIMIT:
        logger.warning("chat_multi_question_reply_rejected", ordering_words=ordering_words)
        return ChatTurn(response=SINGLE_QUESTION_FALLBACK[language], fallback_used=True)

    follow_ups = await generate_follow_ups(llm, message, reply, language)
    logger.info("chat_turn_completed", persona=persona_id, language=language, follow_ups=len(follow_ups))
    return ChatTurn(response=reply, follow_up_questions=follow_ups)
