"""Shared fixtures and fakes for the interview prep tests."""

import asyncio
from typing import Dict, List, Optional, Sequence

import pytest

from offerflow.ai_processing.interview_gateway import ConversationHandle, InterviewAIGateway
from offerflow.ai_processing.llm_manager import LLMResponse
from offerflow.interview_prep import (
    ContextStore,
    GatewayError,
    InMemorySettingsStore,
    IntroResult,
    MediaDevices,
    MediaStream,
    MediaTrack,
    MockSessionLifecycle,
    PermissionDeniedError,
    PointsLedger,
    QuestionBank,
    SelfIntroPipeline,
)


class FakeGateway(InterviewAIGateway):
    """Scripted AI gateway; ``gates`` holds per-operation events to hold calls in flight."""

    def __init__(self):
        self.questions_response = "[]"
        self.feedback_response = "Lead with the outcome, then walk through the STAR steps."
        self.intro_result: Optional[IntroResult] = IntroResult(
            rationale="Highlight the platform migration.",
            script="Hi, I'm Sam, a frontend engineer who shipped a design system.",
        )
        self.refine_response = "Polished version: ...\nCritique: ..."
        self.greeting = "Welcome. Please introduce yourself."
        self.replies: List[str] = []
        self.fail_questions = False
        self.fail_feedback = False
        self.fail_open = False
        self.fail_turns = False
        self.gates: Dict[str, asyncio.Event] = {}
        self.calls: List[tuple] = []

    async def _enter(self, op: str, *args) -> None:
        self.calls.append((op,) + args)
        gate = self.gates.get(op)
        if gate is not None:
            await gate.wait()

    def count(self, op: str) -> int:
        return sum(1 for call in self.calls if call[0] == op)

    async def generate_questions(self, company: str, role: str, exclude_texts: Sequence[str]) -> str:
        await self._enter("generate_questions", company, role, list(exclude_texts))
        if self.fail_questions:
            raise GatewayError("service unavailable")
        return self.questions_response

    async def generate_answer_feedback(self, question: str, draft_answer: str) -> str:
        await self._enter("generate_answer_feedback", question, draft_answer)
        if self.fail_feedback:
            raise GatewayError("feedback unavailable")
        return self.feedback_response

    async def generate_self_intro(self, resume_context: str, role: str, company: str) -> Optional[IntroResult]:
        await self._enter("generate_self_intro", resume_context, role, company)
        return self.intro_result

    async def refine_self_intro(self, draft: str, role: str, company: str) -> str:
        await self._enter("refine_self_intro", draft, role, company)
        return self.refine_response

    async def open_conversation(self, company: str, role: str) -> ConversationHandle:
        await self._enter("open_conversation", company, role)
        if self.fail_open:
            raise GatewayError("no provider")
        return ConversationHandle(company, role, f"Interviewer for {role} at {company}")

    async def send_turn(self, handle: ConversationHandle, text: str) -> str:
        await self._enter("send_turn", text)
        if self.fail_turns:
            raise GatewayError("turn failed")
        if text == "Start the interview.":
            return self.greeting
        if self.replies:
            return self.replies.pop(0)
        return "Thanks. Next question: describe a hard bug you fixed."


class FakeMediaDevices(MediaDevices):
    """Counts acquisitions and the streams still holding devices."""

    def __init__(self, deny: bool = False):
        self.deny = deny
        self.gate: Optional[asyncio.Event] = None
        self.acquire_calls = 0
        self.streams: List[MediaStream] = []

    @property
    def outstanding(self) -> int:
        return sum(1 for stream in self.streams if stream.active)

    async def acquire(self) -> MediaStream:
        self.acquire_calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.deny:
            raise PermissionDeniedError("user dismissed the permission prompt")
        stream = MediaStream([MediaTrack("video", lambda: None), MediaTrack("audio", lambda: None)])
        self.streams.append(stream)
        return stream


class FakeLLMManager:
    """Stands in for LLMManager; replays queued responses and records requests."""

    def __init__(self, responses: Optional[List[LLMResponse]] = None, has_provider: bool = True):
        self.responses = list(responses or [])
        self.has_provider = has_provider
        self.prompts: List[str] = []
        self.conversations: List[List[Dict[str, str]]] = []

    def _next(self) -> LLMResponse:
        if not self.responses:
            return LLMResponse(success=False, error="no scripted response")
        return self.responses.pop(0)

    def get_primary_provider(self):
        return object() if self.has_provider else None

    async def chat(self, messages, **kwargs) -> LLMResponse:
        self.conversations.append([dict(message) for message in messages])
        return self._next()

    async def generate_text(self, prompt: str, system_prompt: str = "", **kwargs) -> LLMResponse:
        self.prompts.append(prompt)
        return self._next()

    async def generate_structured_response(self, prompt: str, system_prompt: str = "", **kwargs) -> LLMResponse:
        self.prompts.append(prompt)
        return self._next()


@pytest.fixture
def backend():
    return InMemorySettingsStore()


@pytest.fixture
def store(backend):
    return ContextStore(backend)


@pytest.fixture
def ledger(store):
    return PointsLedger(store, initial_balance=0)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def media():
    return FakeMediaDevices()


@pytest.fixture
def bank(gateway, store):
    return QuestionBank(gateway, store)


@pytest.fixture
def session(gateway, media, store, ledger):
    lifecycle = MockSessionLifecycle(gateway, media, store, ledger, max_free_attempts=2, mock_cost=200)
    lifecycle.set_context("Google", "Senior Frontend Engineer")
    return lifecycle


@pytest.fixture
def intro(gateway, store):
    return SelfIntroPipeline(gateway, store)


@pytest.fixture
def make_llm():
    return FakeLLMManager
