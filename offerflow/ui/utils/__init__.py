"""
Shared helpers for the Streamlit interface.
"""
