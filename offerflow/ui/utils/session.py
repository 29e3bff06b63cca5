"""
Session state management for the Streamlit application.

Builds the interview prep components once per browser session and wires the
view selector to the mock interview lifecycle so that leaving the view always
releases the camera and microphone.
"""

import asyncio
import atexit
import weakref
from typing import Any, Awaitable

import streamlit as st

from ...config import DatabaseManager, get_config
from ...ai_processing import LLMInterviewGateway
from ...interview_prep import (
    ContextStore,
    LocalMediaDevices,
    MockSessionLifecycle,
    PointsLedger,
    QuestionBank,
    SelfIntroPipeline
)
from ...utils import setup_logging, get_ui_logger

# Mock sessions still owned by browser sessions in this process
_open_sessions: "weakref.WeakSet[MockSessionLifecycle]" = weakref.WeakSet()

def track_session(lifecycle: MockSessionLifecycle) -> MockSessionLifecycle:
    """Register a lifecycle so its devices are released when the server stops."""
    _open_sessions.add(lifecycle)
    return lifecycle

def close_open_sessions() -> None:
    """Close every tracked mock session, releasing any camera and microphone."""
    for lifecycle in list(_open_sessions):
        lifecycle.close()

atexit.register(close_open_sessions)

def run_async(coro: Awaitable[Any]) -> Any:
    """Drive a coroutine to completion from a Streamlit callback."""
    return asyncio.run(coro)

def init_session_state():
    """Initialize all session state variables."""

    # Initialize logging first
    if 'logger_initialized' not in st.session_state:
        setup_logging()
        st.session_state.logger_initialized = True
        st.session_state.logger = get_ui_logger()

    if 'store' not in st.session_state:
        try:
            st.session_state.store = ContextStore(DatabaseManager(get_config().database_path))
            st.session_state.db_status = "connected"
        except Exception as e:
            st.session_state.logger.error(f"Database unavailable: {e}")
            st.session_state.store = None
            st.session_state.db_status = f"error: {str(e)}"
            return

    store = st.session_state.store
    if store is None:
        return

    if 'gateway' not in st.session_state:
        st.session_state.gateway = LLMInterviewGateway()

    if 'ledger' not in st.session_state:
        st.session_state.ledger = PointsLedger(store)

    if 'question_bank' not in st.session_state:
        st.session_state.question_bank = QuestionBank(st.session_state.gateway, store)

    if 'mock_session' not in st.session_state:
        st.session_state.mock_session = track_session(MockSessionLifecycle(
            st.session_state.gateway,
            LocalMediaDevices(),
            store,
            st.session_state.ledger
        ))

    if 'self_intro' not in st.session_state:
        st.session_state.self_intro = SelfIntroPipeline(st.session_state.gateway, store)

    # UI state variables
    if 'active_view' not in st.session_state:
        st.session_state.active_view = None

    if 'show_payment' not in st.session_state:
        st.session_state.show_payment = False

def switch_view(view: str):
    """Record the selected view and notify the mock session lifecycle."""
    if st.session_state.active_view != view:
        st.session_state.mock_session.on_view_change(view)
        st.session_state.active_view = view
