"""
Data structures shared by the interview preparation components.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple
import uuid

class QuestionCategory(Enum):
    """Closed set of interview question categories."""
    BEHAVIORAL = "Behavioral"
    TECHNICAL = "Technical"
    SYSTEM_DESIGN = "System Design"
    CULTURAL_FIT = "Cultural Fit"

class QuestionSource(Enum):
    """Where a generated question was derived from."""
    COMMUNITY = "Community"
    RESUME_PROBE = "Resume Probe"
    ROLE_REQUIREMENT = "Role Requirement"

class SessionState(Enum):
    """Mock interview session states."""
    IDLE = "idle"
    AWAITING_PERMISSION = "awaiting_permission"
    ACTIVE = "active"
    ENDED = "ended"

class Speaker(Enum):
    """Transcript speaker roles."""
    INTERVIEWER = "interviewer"
    CANDIDATE = "candidate"

def _match_label(enum_cls, value: Any):
    """Case-insensitive lookup of an enum member by its label."""
    if not isinstance(value, str):
        return None
    wanted = value.strip().lower()
    for member in enum_cls:
        if member.value.lower() == wanted:
            return member
    return None

@dataclass(frozen=True)
class ContextKey:
    """(company, role) pair; exact, case- and whitespace-sensitive match."""
    company: str
    role: str

    def as_tuple(self) -> Tuple[str, str]:
        return (self.company, self.role)

    def __str__(self) -> str:
        return f"{self.role} @ {self.company}"

@dataclass
class QuestionItem:
    """A single interview question in a question bank."""
    question: str
    category: Optional[QuestionCategory] = None
    source: Optional[QuestionSource] = None
    hint: str = ""
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    is_bookmarked: bool = False
    user_answer: Optional[str] = None
    ai_feedback: Optional[str] = None

    @property
    def has_answer(self) -> bool:
        return bool(self.user_answer)

    @classmethod
    def from_descriptor(cls, descriptor: Any) -> Optional["QuestionItem"]:
        """
        Build a fresh item from a generated ``{question, type, source, hint}`` descriptor.

        Returns None when the descriptor has no usable question text.
        """
        if not isinstance(descriptor, dict):
            return None
        text = descriptor.get("question")
        if not isinstance(text, str) or not text.strip():
            return None
        hint = descriptor.get("hint")
        return cls(
            question=text,
            category=_match_label(QuestionCategory, descriptor.get("type")),
            source=_match_label(QuestionSource, descriptor.get("source")),
            hint=hint if isinstance(hint, str) else "",
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for persistence."""
        return {
            "id": self.id,
            "question": self.question,
            "type": self.category.value if self.category else None,
            "source": self.source.value if self.source else None,
            "hint": self.hint,
            "isBookmarked": self.is_bookmarked,
            "userAnswer": self.user_answer,
            "aiFeedback": self.ai_feedback,
        }

    @classmethod
    def from_dict(cls, data: Any) -> Optional["QuestionItem"]:
        """Restore a persisted item; None if the record is unusable."""
        item = cls.from_descriptor(data)
        if item is None:
            return None
        stored_id = data.get("id")
        if isinstance(stored_id, str) and stored_id:
            item.id = stored_id
        item.is_bookmarked = bool(data.get("isBookmarked", False))
        answer = data.get("userAnswer")
        item.user_answer = answer if isinstance(answer, str) else None
        feedback = data.get("aiFeedback")
        item.ai_feedback = feedback if isinstance(feedback, str) else None
        return item

@dataclass
class TranscriptEntry:
    """One turn in a mock interview transcript."""
    role: Speaker
    text: str
    timestamp: datetime = field(default_factory=datetime.now)

@dataclass
class IntroResult:
    """Generated self-introduction strategy and spoken script."""
    rationale: str
    script: str
