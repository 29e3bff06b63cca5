"""
Interview preparation core for the OfferFlow assistant.

This module provides the question bank, mock interview session lifecycle,
points ledger, context persistence and self-introduction pipeline.
"""

from .errors import (
    PrepError,
    ValidationError,
    GatewayError,
    PermissionDeniedError,
    QuotaExceededError,
    InsufficientPointsError,
    SessionClosedError
)

from .models import (
    QuestionCategory,
    QuestionSource,
    SessionState,
    Speaker,
    ContextKey,
    QuestionItem,
    TranscriptEntry,
    IntroResult
)

from .context_store import ContextStore, InMemorySettingsStore
from .points_ledger import PointsLedger
from .question_bank import QuestionBank
from .media import MediaDevices, MediaStream, MediaTrack, LocalMediaDevices
from .mock_session import MockSessionLifecycle, MOCK_INTERVIEW_VIEW
from .self_intro import SelfIntroPipeline, IntroDraft

__all__ = [
    'PrepError',
    'ValidationError',
    'GatewayError',
    'PermissionDeniedError',
    'QuotaExceededError',
    'InsufficientPointsError',
    'SessionClosedError',
    'QuestionCategory',
    'QuestionSource',
    'SessionState',
    'Speaker',
    'ContextKey',
    'QuestionItem',
    'TranscriptEntry',
    'IntroResult',
    'ContextStore',
    'InMemorySettingsStore',
    'PointsLedger',
    'QuestionBank',
    'MediaDevices',
    'MediaStream',
    'MediaTrack',
    'LocalMediaDevices',
    'MockSessionLifecycle',
    'MOCK_INTERVIEW_VIEW',
    'SelfIntroPipeline',
    'IntroDraft'
]
