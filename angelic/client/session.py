"""Anonymous session identity for API callers.

The session id is an opaque correlation key the server uses to tie anonymous
conversations, report requests and feedback to one visitor. It lives in an
injectable ``SessionStorage`` so scripts can persist it to disk and tests can
keep it in memory.
"""

import json
import secrets
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Protocol

import structlog

logger = structlog.get_logger(__name__)

SESSION_STORAGE_KEY = "angelic_session_id"


class SessionStorageError(Exception):
    """The backing store cannot be read or written."""


class SessionStorage(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class InMemorySessionStorage:
    def __init__(self, initial: dict[str, str] | None = None):
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class FileSessionStorage:
    """Key/value pairs in a small JSON file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _load(self) -> dict[str, str]:
        try:
            if not self.path.exists():
                return {}
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as exc:
            raise SessionStorageError(f"Cannot read {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise SessionStorageError(f"{self.path} does not hold a JSON object")
        return data

    def _save(self, data: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data), encoding="utf-8")
        except OSError as exc:
            raise SessionStorageError(f"Cannot write {self.path}: {exc}") from exc

    def get_item(self, key: str) -> str | None:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove_item(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._save(data)


def fallback_session_id() -> str:
    """``session_<random>_<timestamp>`` id used when UUID generation is unavailable."""
    return f"session_{secrets.token_hex(8)}_{format(int(time.time() * 1000), 'x')}"


def generate_session_id(uuid_factory: Callable[[], uuid.UUID] = uuid.uuid4) -> str:
    try:
        return str(uuid_factory())
    except (OSError, NotImplementedError) as exc:
        logger.warning("session_uuid_unavailable", error=str(exc))
        return fallback_session_id()


class SessionManager:
    """Read-or-create the visitor's session id.

    When the storage raises any exception, a per-manager in-memory id is used
    instead so repeated calls still agree with each other.
    """

    def __init__(
        self,
        storage: SessionStorage | None = None,
        uuid_factory: Callable[[], uuid.UUID] = uuid.uuid4,
    ):
        self.storage = storage if storage is not None else InMemorySessionStorage()
        self.uuid_factory = uuid_factory
        self._memory_id: str | None = None

    def _memory_fallback(self) -> str:
        if self._memory_id is None:
            self._memory_id = generate_session_id(self.uuid_factory)
        return self._memory_id

    def get_session_id(self) -> str:
        try:
            session_id = self.storage.get_item(SESSION_STORAGE_KEY)
            if not session_id:
                session_id = generate_session_id(self.uuid_factory)
                self.storage.set_item(SESSION_STORAGE_KEY, session_id)
            return session_id
        except Exception as exc:
            logger.warning("session_storage_unavailable", error=str(exc), error_type=type(exc).__name__)
            return self._memory_fallback()

    def clear_session(self) -> None:
        self._memory_id = None
        try:
            self.storage.remove_item(SESSION_STORAGE_KEY)
        except Exception as exc:
            logger.warning("session_clear_failed", error=str(exc), error_type=type(exc).__name__)


@dataclass(frozen=True)
class SessionContext:
    """Per-visitor request context passed explicitly to the API client."""

    session_id: str
    language: str = "zh"
    persona: str = "consultant"
    auth_token: str | None = None

    @classmethod
    def from_manager(cls, manager: SessionManager, **kwargs) -> "SessionContext":
        return cls(session_id=manager.get_session_id(), **kwargs)

    def with_language(self, language: str) -> "SessionContext":
        return replace(self, language=language)

    def with_persona(self, persona: str) -> "SessionContext":
        return replace(self, persona=persona)

    def with_token(self, token: str | None) -> "SessionContext":
        return replace(self, auth_token=token)
