"""
Question Bank Engine

Holds the working set of interview questions for the active (company, role)
context. Generation results are append-merged into the bank, answers and
bookmarks are edited in place, and every mutation is written through to the
Context Store under the context it belongs to.
"""

from typing import Callable, Dict, List, Optional, Set, TYPE_CHECKING

from .context_store import ContextStore
from .errors import GatewayError, ValidationError
from .models import ContextKey, QuestionItem
from ..ai_processing.llm_manager import parse_json_payload
from ..utils import get_question_bank_logger

if TYPE_CHECKING:
    from ..ai_processing.interview_gateway import InterviewAIGateway

logger = get_question_bank_logger()

class QuestionBank:
    """Question bank for one active context at a time."""

    def __init__(self, gateway: "InterviewAIGateway", store: ContextStore):
        self.gateway = gateway
        self.store = store
        self.context: Optional[ContextKey] = None
        self._items: List[QuestionItem] = []
        self._refreshing: Set[ContextKey] = set()
        self._feedback_pending: Set[str] = set()

    @property
    def items(self) -> List[QuestionItem]:
        """Items in insertion order (a copy of the list, not of the items)."""
        return list(self._items)

    @property
    def is_refreshing(self) -> bool:
        return self.context is not None and self.context in self._refreshing

    def __len__(self) -> int:
        return len(self._items)

    def get(self, item_id: str) -> Optional[QuestionItem]:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def is_feedback_pending(self, item_id: str) -> bool:
        return item_id in self._feedback_pending

    def set_active_context(self, company: str, role: str) -> None:
        """Switch banks, flushing the current one and loading the stored one for the new key."""
        if not company or not company.strip() or not role or not role.strip():
            raise ValidationError("Company and role are both required")

        key = ContextKey(company, role)
        if key == self.context:
            return

        if self.context is not None and self._items:
            self.store.save_bank(self.context, self._items)

        self.context = key
        self._items = self.store.load_bank(key)
        logger.set_context(company=company, role=role)
        logger.info(f"Activated question bank with {len(self._items)} stored questions")

    def _require_context(self) -> ContextKey:
        if self.context is None:
            raise ValidationError("Set a target company and role first")
        return self.context

    def _persist(self) -> None:
        if self.context is not None:
            self.store.save_bank(self.context, self._items)

    def _apply(self, key: ContextKey, mutate: Callable[[List[QuestionItem]], bool]) -> bool:
        """
        Run a mutation against the bank for ``key`` and write it through.

        Targets the live bank when ``key`` is still active, otherwise the
        stored snapshot, so late results land in the context that asked.
        """
        if key == self.context:
            changed = mutate(self._items)
            if changed:
                self._persist()
            return changed

        items = self.store.load_bank(key)
        changed = mutate(items)
        if changed:
            self.store.save_bank(key, items)
        return changed

    async def request_more_questions(self) -> int:
        """
        Ask the AI gateway for more questions and append the new ones.

        Returns:
            Number of questions appended; 0 if the response was unusable or a
            refresh for this context is already running
        """
        key = self._require_context()
        if key in self._refreshing:
            logger.debug("Question refresh already in flight, ignoring request")
            return 0

        exclude = [item.question for item in self._items]
        self._refreshing.add(key)
        try:
            raw = await self.gateway.generate_questions(key.company, key.role, exclude)
        except GatewayError as e:
            logger.warning(f"Question generation failed: {e}")
            return 0
        finally:
            self._refreshing.discard(key)

        new_items = self._parse_questions(raw, exclude)
        if not new_items:
            return 0

        totals: List[int] = []

        def append(items: List[QuestionItem]) -> bool:
            items.extend(new_items)
            totals.append(len(items))
            return True

        self._apply(key, append)
        # Tag with the bank that grew, which may no longer be the active one
        logger.info(
            f"Added {len(new_items)} questions",
            company=key.company, role=key.role, total=totals[0]
        )
        return len(new_items)

    def _parse_questions(self, raw: str, exclude: List[str]) -> List[QuestionItem]:
        """
        Turn a gateway response into fresh items.

        Exact-text duplicates of the exclusion list or of earlier entries in
        the same response are dropped; near-duplicates are not detected.
        """
        try:
            parsed = parse_json_payload(raw)
        except ValueError:
            logger.warning("Question response was not valid JSON")
            return []

        if not isinstance(parsed, list):
            logger.warning(f"Question response was {type(parsed).__name__}, expected a list")
            return []

        seen = set(exclude)
        new_items = []
        for descriptor in parsed:
            item = QuestionItem.from_descriptor(descriptor)
            if item is None:
                logger.debug("Skipping malformed question descriptor")
                continue
            if item.question in seen:
                continue
            seen.add(item.question)
            new_items.append(item)
        return new_items

    def toggle_bookmark(self, item_id: str) -> bool:
        item = self.get(item_id)
        if item is None:
            return False
        item.is_bookmarked = not item.is_bookmarked
        self._persist()
        return True

    def set_answer(self, item_id: str, text: str) -> bool:
        item = self.get(item_id)
        if item is None:
            return False
        item.user_answer = text
        self._persist()
        return True

    async def request_answer_feedback(self, item_id: str) -> Optional[str]:
        """
        Fetch AI feedback on the item's current draft answer.

        An empty draft is valid; the service answers with an outline instead
        of a critique. The draft itself is never modified.

        Returns:
            The feedback text, or None if the item is unknown, already busy,
            or the gateway failed
        """
        key = self.context
        item = self.get(item_id)
        if key is None or item is None:
            return None
        if item_id in self._feedback_pending:
            logger.debug(f"Feedback already pending for question {item_id}")
            return None

        self._feedback_pending.add(item_id)
        try:
            feedback = await self.gateway.generate_answer_feedback(item.question, item.user_answer or "")
        except GatewayError as e:
            logger.warning(f"Answer feedback failed for question {item_id}: {e}")
            return None
        finally:
            self._feedback_pending.discard(item_id)

        def set_feedback(items: List[QuestionItem]) -> bool:
            for candidate in items:
                if candidate.id == item_id:
                    candidate.ai_feedback = feedback
                    return True
            return False

        if not self._apply(key, set_feedback):
            logger.debug(f"Question {item_id} disappeared before feedback arrived")
            return None
        return feedback

    def ordered_view(self) -> List[QuestionItem]:
        """Bookmarked first, then answered, then the rest; insertion order within each group."""
        def rank(item: QuestionItem) -> int:
            if item.is_bookmarked:
                return 0
            if item.has_answer:
                return 1
            return 2

        return sorted(self._items, key=rank)

    def summary(self) -> Dict[str, int]:
        """Counts for display."""
        return {
            "total": len(self._items),
            "bookmarked": sum(1 for item in self._items if item.is_bookmarked),
            "answered": sum(1 for item in self._items if item.has_answer),
            "with_feedback": sum(1 for item in self._items if item.ai_feedback),
        }
