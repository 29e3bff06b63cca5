"""
User interface module for the OfferFlow interview preparation assistant.

This module provides the Streamlit-based interview prep station.
"""

# UI components are imported by app.py as needed

__all__ = []
