"""
AI Gateway for interview preparation.

Thin request/response facade over the LLM manager. Every one-shot operation
degrades to a safe default (empty list text, apology string, None) instead of
raising; only the conversational operations raise ``GatewayError`` so the
mock session can decide how to recover.
"""

import json
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence

from .llm_manager import LLMManager, get_llm_manager, parse_json_payload
from ..config import get_prep_config
from ..interview_prep.errors import GatewayError
from ..interview_prep.models import IntroResult
from ..utils import get_ai_logger

logger = get_ai_logger()

FEEDBACK_FALLBACK = "Error generating hints."
REFINE_FALLBACK = "Error processing request."
EMPTY_QUESTIONS = "[]"

QUESTION_COACH_PROMPT = """You are an expert Interview Coach.
Generate a curated list of 3-5 NEW highly relevant interview questions for the position of "{role}" at "{company}".

Existing questions (DO NOT REPEAT THESE):
{existing}

Sources to simulate/derive questions from:
1. [Community]: Questions commonly shared by other candidates online for this company/role.
2. [Resume Probe]: Deep-dive questions targeting a candidate's resume details (gaps, project specifics, impact).
3. [Role Requirement]: Core technical or hard-skill questions required for the job.

Output Format: a JSON array of objects and nothing else.
Schema:
{{
  "question": "The question text",
  "type": "Behavioral" | "Technical" | "System Design" | "Cultural Fit",
  "source": "Community" | "Resume Probe" | "Role Requirement",
  "hint": "Brief advice on how to answer."
}}

Ensure a mix of sources and offer new perspectives not covered in existing questions."""

ANSWER_FEEDBACK_PROMPT = """The user is preparing for an interview.
Question: "{question}"
User's Draft Answer: "{draft}"

Task:
If the draft is empty, provide a structured outline or bullet points on how to answer effectively.
If the draft is present, refine it to be more professional, using the STAR method if applicable, and correct any obvious weaknesses.

Keep the response concise and encouraging."""

SELF_INTRO_PROMPT = """You are a professional Interview Coach.
Based on the candidate's resume and the target role of "{role}" at "{company}", create a powerful Self-Introduction.

Resume Context:
{resume}

Respond with a JSON object:
{{
  "rationale": "2-3 sentences on the strategy used: which experiences to highlight and how they fit the company culture.",
  "script": "The spoken self-introduction. First person. Professional, engaging, and under 2 minutes."
}}"""

REFINE_INTRO_PROMPT = """Refine the following self-introduction for a {role} interview at {company}.
Make it professional, engaging, and concise (under 2 minutes spoken).

Draft: "{draft}"

Output:
1. Polished Version.
2. Critique (What was improved)."""

INTERVIEWER_FRAMING = """You are a strict but fair interviewer for {company}, interviewing a candidate for the {role} position.
Start by asking the candidate to introduce themselves.
Then, ask one question at a time based on their responses.
After the candidate answers, provide brief feedback (1-2 sentences) on their answer quality before asking the next question.
Keep the tone professional."""

class ConversationHandle:
    """
    Opaque capability for one interviewer conversation.

    Holds the hidden conversation state; callers only pass it back to
    ``InterviewAIGateway.send_turn``.
    """

    def __init__(self, company: str, role: str, system_prompt: str):
        self.company = company
        self.role = role
        self._messages: List[Dict[str, str]] = [{"role": "system", "content": system_prompt}]

    def __repr__(self) -> str:
        return f"ConversationHandle(company={self.company!r}, role={self.role!r})"

class InterviewAIGateway(ABC):
    """Operations the interview prep core consumes from the AI service."""

    @abstractmethod
    async def generate_questions(self, company: str, role: str, exclude_texts: Sequence[str]) -> str:
        """Return text expected to parse as a JSON array of question descriptors."""

    @abstractmethod
    async def generate_answer_feedback(self, question: str, draft_answer: str) -> str:
        """Return feedback (or an outline for an empty draft); never raises."""

    @abstractmethod
    async def generate_self_intro(self, resume_context: str, role: str, company: str) -> Optional[IntroResult]:
        """Return a rationale and script, or None if nothing usable came back."""

    @abstractmethod
    async def refine_self_intro(self, draft: str, role: str, company: str) -> str:
        """Return a polished version of the draft plus a critique; never raises."""

    @abstractmethod
    async def open_conversation(self, company: str, role: str) -> ConversationHandle:
        """Open an interviewer conversation scoped to (company, role)."""

    @abstractmethod
    async def send_turn(self, handle: ConversationHandle, text: str) -> str:
        """Send a candidate message and return the interviewer's reply."""

class LLMInterviewGateway(InterviewAIGateway):
    """AI gateway backed by the configured LLM providers."""

    def __init__(self, llm_manager: Optional[LLMManager] = None, resume_max_chars: Optional[int] = None):
        self.llm_manager = llm_manager or get_llm_manager()
        self.resume_max_chars = resume_max_chars or get_prep_config().resume_context_max_chars

    async def generate_questions(self, company: str, role: str, exclude_texts: Sequence[str]) -> str:
        prompt = QUESTION_COACH_PROMPT.format(
            company=company, role=role, existing=json.dumps(list(exclude_texts))
        )
        response = await self.llm_manager.generate_text(prompt)
        if not response.success:
            logger.warning(f"Question generation failed: {response.error}", company=company, role=role)
            return EMPTY_QUESTIONS
        return response.content or EMPTY_QUESTIONS

    async def generate_answer_feedback(self, question: str, draft_answer: str) -> str:
        prompt = ANSWER_FEEDBACK_PROMPT.format(question=question, draft=draft_answer)
        response = await self.llm_manager.generate_text(prompt)
        if not response.success:
            logger.warning(f"Answer feedback failed: {response.error}")
            return FEEDBACK_FALLBACK
        return response.content or "Could not generate hints."

    async def generate_self_intro(self, resume_context: str, role: str, company: str) -> Optional[IntroResult]:
        prompt = SELF_INTRO_PROMPT.format(
            role=role, company=company, resume=resume_context[:self.resume_max_chars]
        )
        response = await self.llm_manager.generate_structured_response(prompt)
        if not response.success:
            logger.warning(f"Self-intro generation failed: {response.error}")
            return None

        data = response.data
        if not isinstance(data, dict):
            logger.warning("Self-intro response was not a JSON object")
            return None
        rationale = data.get("rationale")
        script = data.get("script")
        if not isinstance(rationale, str) or not isinstance(script, str):
            logger.warning("Self-intro response missing rationale or script")
            return None
        return IntroResult(rationale=rationale, script=script)

    async def refine_self_intro(self, draft: str, role: str, company: str) -> str:
        prompt = REFINE_INTRO_PROMPT.format(draft=draft, role=role, company=company)
        response = await self.llm_manager.generate_text(prompt)
        if not response.success:
            logger.warning(f"Self-intro refinement failed: {response.error}")
            return REFINE_FALLBACK
        return response.content or "Could not refine text."

    async def open_conversation(self, company: str, role: str) -> ConversationHandle:
        if self.llm_manager.get_primary_provider() is None:
            raise GatewayError("No LLM providers available")
        return ConversationHandle(company, role, INTERVIEWER_FRAMING.format(company=company, role=role))

    async def send_turn(self, handle: ConversationHandle, text: str) -> str:
        messages = handle._messages + [{"role": "user", "content": text}]
        response = await self.llm_manager.chat(messages)
        if not response.success:
            raise GatewayError(response.error or "Conversation turn failed")

        # Only commit the exchange once the service has answered it
        handle._messages = messages + [{"role": "assistant", "content": response.content}]
        return response.content
