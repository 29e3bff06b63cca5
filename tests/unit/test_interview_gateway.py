"""Unit tests for the LLM-backed interview gateway."""

import asyncio

import pytest

from offerflow.ai_processing.interview_gateway import (
    EMPTY_QUESTIONS,
    FEEDBACK_FALLBACK,
    REFINE_FALLBACK,
    LLMInterviewGateway,
)
from offerflow.ai_processing.llm_manager import LLMResponse, parse_json_payload, strip_code_fences
from offerflow.interview_prep import GatewayError


def ok(content="", data=None):
    return LLMResponse(success=True, content=content, data=data)


def failed(error="HTTP 500"):
    return LLMResponse(success=False, error=error)


@pytest.mark.unit
def test_strip_code_fences():
    """Test markdown fences are removed from model output."""
    assert strip_code_fences('```json\n[{"a": 1}]\n```') == '[{"a": 1}]'
    assert strip_code_fences(None) == ""


@pytest.mark.unit
def test_parse_json_payload_rejects_prose():
    """Test non-JSON output raises ValueError."""
    assert parse_json_payload("```\n[1, 2]\n```") == [1, 2]
    with pytest.raises(ValueError):
        parse_json_payload("Here are some questions!")


@pytest.mark.unit
def test_questions_prompt_carries_exclusions(make_llm):
    """Test existing questions are listed in the prompt."""
    llm = make_llm([ok('[{"question": "Why us?"}]')])
    gateway = LLMInterviewGateway(llm, resume_max_chars=100)

    raw = asyncio.run(gateway.generate_questions("Google", "SRE", ["Tell me about yourself."]))

    assert raw == '[{"question": "Why us?"}]'
    assert '"Tell me about yourself."' in llm.prompts[0]
    assert "SRE" in llm.prompts[0] and "Google" in llm.prompts[0]


@pytest.mark.unit
def test_questions_failure_returns_empty_list_text(make_llm):
    """Test a failed request yields text that parses as an empty list."""
    gateway = LLMInterviewGateway(make_llm([failed()]), resume_max_chars=100)

    assert asyncio.run(gateway.generate_questions("Google", "SRE", [])) == EMPTY_QUESTIONS


@pytest.mark.unit
def test_feedback_fallback_on_failure(make_llm):
    """Test feedback degrades to an apology string."""
    gateway = LLMInterviewGateway(make_llm([failed()]), resume_max_chars=100)

    assert asyncio.run(gateway.generate_answer_feedback("Why us?", "")) == FEEDBACK_FALLBACK


@pytest.mark.unit
def test_refine_fallback_on_failure(make_llm):
    """Test refinement degrades to an apology string."""
    gateway = LLMInterviewGateway(make_llm([failed()]), resume_max_chars=100)

    assert asyncio.run(gateway.refine_self_intro("Hi", "SRE", "Google")) == REFINE_FALLBACK


@pytest.mark.unit
def test_self_intro_parsed_and_resume_truncated(make_llm):
    """Test a valid object becomes an IntroResult and the resume is capped."""
    llm = make_llm([ok(data={"rationale": "Lead with scale.", "script": "Hi, I'm Sam."})])
    gateway = LLMInterviewGateway(llm, resume_max_chars=10)

    result = asyncio.run(gateway.generate_self_intro("0123456789ABCDEF", "SRE", "Google"))

    assert result.rationale == "Lead with scale."
    assert result.script == "Hi, I'm Sam."
    assert "0123456789" in llm.prompts[0]
    assert "ABCDEF" not in llm.prompts[0]


@pytest.mark.unit
@pytest.mark.parametrize("response", [
    ok(data=None),
    ok(data=["not", "an", "object"]),
    ok(data={"rationale": "only half"}),
    failed(),
])
def test_self_intro_unusable_returns_none(make_llm, response):
    """Test malformed or failed output yields None."""
    gateway = LLMInterviewGateway(make_llm([response]), resume_max_chars=100)

    assert asyncio.run(gateway.generate_self_intro("Resume", "SRE", "Google")) is None


@pytest.mark.unit
def test_open_conversation_needs_provider(make_llm):
    """Test opening a conversation without providers raises."""
    gateway = LLMInterviewGateway(make_llm(has_provider=False), resume_max_chars=100)

    with pytest.raises(GatewayError):
        asyncio.run(gateway.open_conversation("Google", "SRE"))


@pytest.mark.unit
def test_conversation_history_accumulates(make_llm):
    """Test each turn sends the full history including the interviewer framing."""
    llm = make_llm([ok("Please introduce yourself."), ok("Why Google?")])
    gateway = LLMInterviewGateway(llm, resume_max_chars=100)

    async def scenario():
        handle = await gateway.open_conversation("Google", "SRE")
        first = await gateway.send_turn(handle, "Start the interview.")
        second = await gateway.send_turn(handle, "I'm Sam.")
        return first, second

    first, second = asyncio.run(scenario())

    assert (first, second) == ("Please introduce yourself.", "Why Google?")
    last = llm.conversations[-1]
    assert last[0]["role"] == "system"
    assert "Google" in last[0]["content"] and "SRE" in last[0]["content"]
    assert [m["role"] for m in last[1:]] == ["user", "assistant", "user"]
    assert last[-1]["content"] == "I'm Sam."


@pytest.mark.unit
def test_failed_turn_not_committed(make_llm):
    """Test a failed turn raises and leaves the history untouched."""
    llm = make_llm([failed("timeout"), ok("Welcome.")])
    gateway = LLMInterviewGateway(llm, resume_max_chars=100)

    async def scenario():
        handle = await gateway.open_conversation("Google", "SRE")
        with pytest.raises(GatewayError):
            await gateway.send_turn(handle, "Start the interview.")
        return await gateway.send_turn(handle, "Start the interview.")

    assert asyncio.run(scenario()) == "Welcome."
    assert [m["role"] for m in llm.conversations[-1]] == ["system", "user"]
