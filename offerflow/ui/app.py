"""
Main Streamlit Application for the OfferFlow interview preparation assistant.

Run with ``streamlit run offerflow/ui/app.py`` after installing the package.
"""

import streamlit as st

from offerflow.interview_prep import MOCK_INTERVIEW_VIEW
from offerflow.ui.components.interview_prep import InterviewPrepTab, QUESTIONS_VIEW, SELF_INTRO_VIEW
from offerflow.ui.utils.session import init_session_state, switch_view
from offerflow.ui.utils.styling import apply_custom_css

# Configure Streamlit page
st.set_page_config(
    page_title="OfferFlow Interview Prep",
    page_icon="🎯",
    layout="wide",
    initial_sidebar_state="collapsed"
)

VIEWS = {
    QUESTIONS_VIEW: "📚 Question Bank",
    SELF_INTRO_VIEW: "🙋 Self Intro",
    MOCK_INTERVIEW_VIEW: "🎥 AI Mock Interview",
}

def main():
    """Main application entry point."""
    init_session_state()
    apply_custom_css()

    if st.session_state.store is None:
        st.error(f"Storage unavailable ({st.session_state.db_status}). Check DATABASE_PATH.")
        return

    st.markdown("""
    <div class="app-header">
        <h1>🎯 Interview Prep Station</h1>
        <p>Simulate environments and get prepared for your target company.</p>
    </div>
    """, unsafe_allow_html=True)

    col1, col2 = st.columns(2)
    with col1:
        company = st.text_input("Target Company", placeholder="e.g. Google")
    with col2:
        role = st.text_input("Target Role", placeholder="e.g. Senior Frontend Engineer")

    view = st.radio(
        "View",
        options=list(VIEWS),
        format_func=VIEWS.get,
        horizontal=True,
        label_visibility="collapsed"
    )
    switch_view(view)

    tab = InterviewPrepTab(company, role)
    if view == QUESTIONS_VIEW:
        tab.render_questions()
    elif view == SELF_INTRO_VIEW:
        tab.render_self_intro()
    else:
        tab.render_mock_interview()

if __name__ == "__main__":
    main()
