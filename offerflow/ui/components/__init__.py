"""
UI Components module for the OfferFlow interview preparation assistant.

This module contains the Streamlit components for the user interface.
"""

from .interview_prep import InterviewPrepTab, QUESTIONS_VIEW, SELF_INTRO_VIEW

__all__ = [
    'InterviewPrepTab',
    'QUESTIONS_VIEW',
    'SELF_INTRO_VIEW'
]
