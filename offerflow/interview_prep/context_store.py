"""
Context Store - keyed persistence for interview prep state.

Maps each (company, role) context to a question bank snapshot and keeps the
installation-wide slots (resume context, mock usage counter, paid unlock
counter, points balance). Reads never fail: absent or malformed content
degrades to the relevant empty default.
"""

import json
import threading
from typing import Any, Dict, List, Optional, Protocol

from .models import ContextKey, QuestionItem
from ..utils import get_store_logger

logger = get_store_logger()

QUESTIONS_PREFIX = "prep_questions:"
INTRO_DRAFT_PREFIX = "intro_draft:"
RESUME_CONTEXT_KEY = "offerflow_resume_context"
MOCK_USAGE_KEY = "offerflow_mock_usage"
PAID_UNLOCKS_KEY = "offerflow_paid_unlocks"
POINTS_KEY = "offerflow_points"

class SettingsBackend(Protocol):
    """Anything with DatabaseManager-style settings accessors."""

    def get_setting(self, key: str, default: Any = None) -> Any: ...

    def set_setting(self, key: str, value: Any) -> None: ...

class InMemorySettingsStore:
    """Process-local settings backend; values round-trip through JSON like SQLite."""

    def __init__(self):
        self._values: Dict[str, str] = {}
        self._lock = threading.Lock()

    def get_setting(self, key: str, default: Any = None) -> Any:
        with self._lock:
            raw = self._values.get(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            return raw

    def set_setting(self, key: str, value: Any) -> None:
        raw = value if isinstance(value, str) else json.dumps(value)
        with self._lock:
            self._values[key] = raw

def _scoped_key(prefix: str, key: ContextKey) -> str:
    # JSON keeps ("a_b", "c") and ("a", "b_c") apart
    return prefix + json.dumps([key.company, key.role], ensure_ascii=False)

def _as_count(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(0, value)
    if isinstance(value, str):
        try:
            return max(0, int(value.strip()))
        except ValueError:
            return 0
    return 0

class ContextStore:
    """Typed accessors over a string-keyed settings backend."""

    def __init__(self, backend: SettingsBackend):
        self.backend = backend

    def _read(self, key: str, default: Any = None) -> Any:
        try:
            return self.backend.get_setting(key, default)
        except Exception as e:
            logger.error(f"Failed to read {key}: {e}")
            return default

    # Question banks
    def load_bank(self, key: ContextKey) -> List[QuestionItem]:
        """Stored bank for a context, or an empty list."""
        raw = self._read(_scoped_key(QUESTIONS_PREFIX, key))
        if raw is None:
            return []
        if not isinstance(raw, list):
            logger.warning(f"Discarding malformed question bank for {key}")
            return []

        items = []
        for record in raw:
            item = QuestionItem.from_dict(record)
            if item is None:
                logger.warning(f"Skipping malformed stored question for {key}")
                continue
            items.append(item)
        return items

    def save_bank(self, key: ContextKey, items: List[QuestionItem]) -> None:
        """Write a full snapshot of a context's bank; last write wins."""
        self.backend.set_setting(
            _scoped_key(QUESTIONS_PREFIX, key), [item.to_dict() for item in items]
        )
        logger.debug(f"Saved {len(items)} questions for {key}")

    # Resume context
    def get_resume_context(self) -> Optional[str]:
        value = self._read(RESUME_CONTEXT_KEY)
        if isinstance(value, str) and value:
            return value
        return None

    def set_resume_context(self, text: str) -> None:
        """Written by the resume flow when a resume is submitted."""
        # Stored JSON-encoded so numeric-looking resumes come back as text
        self.backend.set_setting(RESUME_CONTEXT_KEY, json.dumps(text))
        logger.info(f"Stored resume context ({len(text)} chars)")

    # Mock interview accounting
    def get_usage_count(self) -> int:
        return _as_count(self._read(MOCK_USAGE_KEY, 0))

    def set_usage_count(self, count: int) -> None:
        self.backend.set_setting(MOCK_USAGE_KEY, max(0, int(count)))

    def get_paid_unlocks(self) -> int:
        return _as_count(self._read(PAID_UNLOCKS_KEY, 0))

    def record_paid_unlock(self) -> int:
        count = self.get_paid_unlocks() + 1
        self.backend.set_setting(PAID_UNLOCKS_KEY, count)
        return count

    # Points balance, mutated only through PointsLedger
    def get_points_balance(self) -> Optional[int]:
        value = self._read(POINTS_KEY)
        if value is None:
            return None
        return _as_count(value)

    def set_points_balance(self, balance: int) -> None:
        self.backend.set_setting(POINTS_KEY, max(0, int(balance)))

    # Self-introduction drafts
    def load_intro_draft(self, key: ContextKey) -> str:
        value = self._read(_scoped_key(INTRO_DRAFT_PREFIX, key))
        return value if isinstance(value, str) else ""

    def save_intro_draft(self, key: ContextKey, text: str) -> None:
        self.backend.set_setting(_scoped_key(INTRO_DRAFT_PREFIX, key), json.dumps(text))
