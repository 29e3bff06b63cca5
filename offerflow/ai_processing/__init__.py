"""
AI Processing module for the OfferFlow interview preparation assistant.

This module provides LLM integration and the interview AI gateway.
"""

from .llm_manager import (
    LLMManager,
    LLMProvider,
    LLMResponse,
    OpenRouterProvider,
    OllamaProvider,
    get_llm_manager,
    parse_json_payload,
    strip_code_fences
)

from .interview_gateway import (
    ConversationHandle,
    InterviewAIGateway,
    LLMInterviewGateway,
    FEEDBACK_FALLBACK,
    REFINE_FALLBACK
)

__all__ = [
    'LLMManager',
    'LLMProvider',
    'LLMResponse',
    'OpenRouterProvider',
    'OllamaProvider',
    'get_llm_manager',
    'parse_json_payload',
    'strip_code_fences',
    'ConversationHandle',
    'InterviewAIGateway',
    'LLMInterviewGateway',
    'FEEDBACK_FALLBACK',
    'REFINE_FALLBACK'
]
