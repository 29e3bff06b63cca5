"""
Mock Session Lifecycle

State machine for quota-gated mock interviews:

    IDLE -> AWAITING_PERMISSION -> ACTIVE -> IDLE
                    |                 ^
                    +--(denied)-------+--> IDLE

``close()`` moves to the terminal ENDED state. Media acquired on entry to
ACTIVE is released on every path out of it. Each session carries a
generation token; responses that arrive after teardown are discarded.
"""

import uuid
from typing import List, Optional, TYPE_CHECKING

from .context_store import ContextStore
from .errors import (
    GatewayError,
    InsufficientPointsError,
    PermissionDeniedError,
    QuotaExceededError,
    SessionClosedError,
    ValidationError,
)
from .media import MediaDevices, MediaStream
from .models import ContextKey, SessionState, Speaker, TranscriptEntry
from .points_ledger import PointsLedger
from ..config import get_prep_config
from ..utils import get_session_logger

if TYPE_CHECKING:
    from ..ai_processing.interview_gateway import ConversationHandle, InterviewAIGateway

logger = get_session_logger()

MOCK_INTERVIEW_VIEW = "mock_interview"
START_MESSAGE = "Start the interview."
DEFAULT_GREETING = "Hello, let's begin the interview. Please introduce yourself."
EMPTY_REPLY = "I didn't catch that."
TURN_FALLBACK = "Sorry, I had trouble processing that answer. Could you say it again?"

class MockSessionLifecycle:
    """Owns one mock interview session, its media and its transcript."""

    def __init__(
        self,
        gateway: "InterviewAIGateway",
        media_devices: MediaDevices,
        store: ContextStore,
        ledger: PointsLedger,
        max_free_attempts: Optional[int] = None,
        mock_cost: Optional[int] = None,
    ):
        if max_free_attempts is None or mock_cost is None:
            prep = get_prep_config()
            max_free_attempts = prep.max_free_mock_attempts if max_free_attempts is None else max_free_attempts
            mock_cost = prep.mock_session_cost if mock_cost is None else mock_cost

        self.gateway = gateway
        self.media_devices = media_devices
        self.store = store
        self.ledger = ledger
        self.max_free_attempts = max_free_attempts
        self.mock_cost = mock_cost

        self.state = SessionState.IDLE
        self.context: Optional[ContextKey] = None
        self.transcript: List[TranscriptEntry] = []
        self.is_busy = False
        self._handle: Optional["ConversationHandle"] = None
        self._media: Optional[MediaStream] = None
        self._generation: Optional[str] = None

    async def __aenter__(self) -> "MockSessionLifecycle":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()

    # Observable state
    @property
    def usage_count(self) -> int:
        return self.store.get_usage_count()

    @property
    def quota_exceeded(self) -> bool:
        return self.usage_count >= self.max_free_attempts

    @property
    def held_resources(self) -> int:
        return 1 if self._media is not None else 0

    @property
    def has_conversation(self) -> bool:
        return self._handle is not None

    def set_context(self, company: str, role: str) -> None:
        """Target context for the next session; ends any running session on change."""
        key = ContextKey(company, role)
        if key != self.context and self.state in (SessionState.AWAITING_PERMISSION, SessionState.ACTIVE):
            self.end_session()
        self.context = key

    def _is_current(self, generation: str) -> bool:
        return self._generation == generation

    # Transitions
    async def start_session(self) -> None:
        """
        Start a free mock interview.

        Raises:
            QuotaExceededError: free attempts exhausted; offer ``pay_to_unlock``
            PermissionDeniedError: camera or microphone refused
        """
        self._check_can_start()
        if self.quota_exceeded:
            used = self.usage_count
            logger.info(f"Mock interview refused, quota used {used}/{self.max_free_attempts}")
            raise QuotaExceededError(used, self.max_free_attempts)
        await self._start(paid=False)

    async def pay_to_unlock(self) -> None:
        """
        Spend points to unlock one more session and start it immediately.

        Raises:
            InsufficientPointsError: balance below the session cost
        """
        self._check_can_start()
        if not self.quota_exceeded:
            raise ValidationError("Free attempts remain; no unlock needed")

        if not self.ledger.debit(self.mock_cost):
            raise InsufficientPointsError(self.ledger.balance, self.mock_cost)

        self.store.set_usage_count(self.usage_count - 1)
        logger.info(f"Unlocked mock interview for {self.mock_cost} points", usage=self.usage_count)
        try:
            await self._start(paid=True)
        except PermissionDeniedError:
            # Nothing was delivered, so undo the unlock
            self.ledger.credit(self.mock_cost)
            self.store.set_usage_count(self.usage_count + 1)
            logger.info(f"Refunded {self.mock_cost} points after media permission failure")
            raise
        self.store.record_paid_unlock()

    def _check_can_start(self) -> None:
        if self.state is SessionState.ENDED:
            raise SessionClosedError("Mock session lifecycle has been closed")
        if self.state is not SessionState.IDLE:
            raise ValidationError(f"Cannot start a session while {self.state.value}")
        if self.context is None or not self.context.company.strip() or not self.context.role.strip():
            raise ValidationError("Set a target company and role first")

    async def _start(self, paid: bool) -> None:
        key = self.context
        generation = uuid.uuid4().hex
        self._generation = generation
        self.state = SessionState.AWAITING_PERMISSION

        try:
            media = await self.media_devices.acquire()
        except Exception as e:
            if self._is_current(generation):
                self.state = SessionState.IDLE
                self._generation = None
            logger.warning(f"Media permission denied: {e}")
            raise PermissionDeniedError(str(e)) from e

        if not self._is_current(generation):
            # Torn down while waiting for permission
            media.release()
            logger.info("Released media granted after session teardown")
            return

        self._media = media
        self.state = SessionState.ACTIVE
        self.transcript = []
        if not paid:
            self.store.set_usage_count(self.usage_count + 1)
        logger.session_started(generation, key.company, key.role, paid)

        await self._open_conversation(key, generation)

    async def _open_conversation(self, key: ContextKey, generation: str) -> None:
        """Open the interviewer conversation; failures leave the session usable."""
        self.is_busy = True
        try:
            handle = await self.gateway.open_conversation(key.company, key.role)
            if not self._is_current(generation):
                return
            self._handle = handle
            reply = await self.gateway.send_turn(handle, START_MESSAGE)
        except GatewayError as e:
            logger.warning(f"Interviewer did not open the conversation: {e}")
            return
        finally:
            if self._is_current(generation):
                self.is_busy = False

        if self._is_current(generation):
            self.transcript.append(TranscriptEntry(Speaker.INTERVIEWER, reply or DEFAULT_GREETING))

    async def send_turn(self, text: str) -> Optional[TranscriptEntry]:
        """
        Send a candidate answer and record the interviewer's reply.

        Returns:
            The interviewer entry, or None if the turn was rejected (not
            active, or another turn is outstanding) or the session ended
            before the reply arrived
        """
        if not text or not text.strip():
            raise ValidationError("Answer text is empty")
        if self.state is not SessionState.ACTIVE or self.is_busy:
            return None

        generation = self._generation
        key = self.context
        self.transcript.append(TranscriptEntry(Speaker.CANDIDATE, text))
        self.is_busy = True
        try:
            handle = self._handle
            if handle is None:
                # The opening call failed; the candidate's message starts the conversation
                handle = await self.gateway.open_conversation(key.company, key.role)
                if not self._is_current(generation):
                    logger.debug("Discarding conversation opened after session teardown")
                    return None
                self._handle = handle
            reply = await self.gateway.send_turn(handle, text) or EMPTY_REPLY
        except GatewayError as e:
            logger.warning(f"Interview turn failed: {e}")
            reply = TURN_FALLBACK
        finally:
            if self._is_current(generation):
                self.is_busy = False

        if not self._is_current(generation):
            logger.debug("Discarding reply that arrived after session teardown")
            return None

        entry = TranscriptEntry(Speaker.INTERVIEWER, reply)
        self.transcript.append(entry)
        return entry

    def end_session(self) -> None:
        """Tear down the current session; media is released unconditionally."""
        media = self._media
        turns = len(self.transcript)
        was_running = self.state in (SessionState.AWAITING_PERMISSION, SessionState.ACTIVE)
        try:
            self._generation = None
            self._handle = None
            self.transcript = []
            self.is_busy = False
            if self.state is not SessionState.ENDED:
                self.state = SessionState.IDLE
        finally:
            self._media = None
            if media is not None:
                media.release()
        if was_running:
            logger.session_ended(turns)

    def on_view_change(self, view: str) -> None:
        """Navigating away from the mock interview view ends the session."""
        if view != MOCK_INTERVIEW_VIEW:
            self.end_session()

    def close(self) -> None:
        """Component teardown: end any session and refuse further starts."""
        try:
            self.end_session()
        finally:
            self.state = SessionState.ENDED
