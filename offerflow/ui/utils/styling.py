"""
Custom CSS styling for the Streamlit application.

This module provides consistent styling for the interview prep views.
"""

import html

import streamlit as st

def apply_custom_css():
    """Apply custom CSS styling to the Streamlit application."""

    st.markdown("""
    <style>
    .stDeployButton {
        display: none !important;
    }

    .main .block-container {
        padding-top: 1rem !important;
        padding-bottom: 2rem !important;
        max-width: 1200px;
    }

    .app-header {
        background: linear-gradient(135deg, #2563eb 0%, #7c3aed 100%);
        color: white;
        padding: 1.5rem 2rem;
        border-radius: 10px;
        margin-bottom: 1.5rem;
    }

    .app-header h1 {
        margin: 0;
        font-size: 2rem;
        font-weight: 700;
    }

    .app-header p {
        margin: 0.5rem 0 0 0;
        opacity: 0.9;
    }

    .metric-card {
        background: white;
        border: 1px solid #e5e7eb;
        border-radius: 10px;
        padding: 1rem;
        text-align: center;
    }

    .metric-value {
        font-size: 1.6rem;
        font-weight: 700;
        color: #111827;
    }

    .metric-label {
        font-size: 0.8rem;
        color: #6b7280;
        text-transform: uppercase;
        letter-spacing: 0.05em;
    }

    .status-warning { color: #d97706; }
    .status-healthy { color: #059669; }

    .question-tag {
        display: inline-block;
        background: #eef2ff;
        color: #4338ca;
        border-radius: 999px;
        padding: 0.1rem 0.6rem;
        font-size: 0.7rem;
        font-weight: 600;
        text-transform: uppercase;
        margin-right: 0.4rem;
    }

    .coach-feedback {
        background: #eef2ff;
        border: 1px solid #c7d2fe;
        border-radius: 8px;
        padding: 0.75rem;
        white-space: pre-wrap;
    }
    </style>
    """, unsafe_allow_html=True)

def create_metric_card(value, label, status=None):
    """Create a styled metric card."""
    status_class = ""
    if status:
        status_class = f"status-{status}"

    return f"""
    <div class="metric-card">
        <div class="metric-value {status_class}">{html.escape(str(value))}</div>
        <div class="metric-label">{html.escape(label)}</div>
    </div>
    """

def create_question_tags(*labels):
    """Render category and source tags for a question card."""
    return "".join(
        f'<span class="question-tag">{html.escape(label)}</span>' for label in labels if label
    )
