"""
Interview Prep Station component.

Renders the question bank, self-introduction and mock interview views on top
of the interview prep core. All state lives in the core objects kept in
``st.session_state``; this module only calls their operations and displays
the result.
"""

import html

import streamlit as st

from ...interview_prep import (
    InsufficientPointsError,
    PermissionDeniedError,
    QuotaExceededError,
    SessionState,
    Speaker,
    ValidationError
)
from ..utils.session import run_async
from ..utils.styling import create_metric_card, create_question_tags

QUESTIONS_VIEW = "questions"
SELF_INTRO_VIEW = "self_intro"

class InterviewPrepTab:
    """Interview prep station with question bank, self intro and mock interview views."""

    def __init__(self, company: str, role: str):
        self.company = company
        self.role = role
        self.store = st.session_state.store
        self.ledger = st.session_state.ledger
        self.question_bank = st.session_state.question_bank
        self.mock_session = st.session_state.mock_session
        self.self_intro = st.session_state.self_intro

    @property
    def has_context(self) -> bool:
        return bool(self.company.strip() and self.role.strip())

    def render_questions(self):
        """Render the question bank view."""
        if not self.has_context:
            st.info("Enter a target company and role to build a question bank.")
            return

        self.question_bank.set_active_context(self.company, self.role)
        summary = self.question_bank.summary()

        col1, col2 = st.columns([3, 1])
        with col1:
            st.markdown("#### Predicted Questions")
            st.caption(
                f"{summary['total']} questions, {summary['bookmarked']} bookmarked, "
                f"{summary['answered']} answered. Auto-saved locally."
            )
        with col2:
            label = "Add More Angles" if summary['total'] else "Generate Questions"
            if st.button(label, disabled=self.question_bank.is_refreshing):
                with st.spinner("Hunting for fresh interview perspectives..."):
                    added = run_async(self.question_bank.request_more_questions())
                if added:
                    st.success(f"Added {added} new questions")
                else:
                    st.warning("No new questions this time. Try again.")

        for item in self.question_bank.ordered_view():
            self._render_question_card(item)

    def _render_question_card(self, item):
        with st.container(border=True):
            header, bookmark = st.columns([6, 1])
            with header:
                tags = create_question_tags(
                    item.source.value if item.source else "General",
                    item.category.value if item.category else None
                )
                st.markdown(tags, unsafe_allow_html=True)
                st.markdown(f"**{html.escape(item.question)}**")
                if item.hint:
                    st.caption(f"💡 Hint: {item.hint}")
            with bookmark:
                icon = "★" if item.is_bookmarked else "☆"
                if st.button(icon, key=f"bookmark_{item.id}"):
                    self.question_bank.toggle_bookmark(item.id)
                    st.rerun()

            answer = st.text_area(
                "Your Answer",
                value=item.user_answer or "",
                key=f"answer_{item.id}",
                placeholder="Draft your answer here..."
            )
            if answer != (item.user_answer or ""):
                self.question_bank.set_answer(item.id, answer)

            pending = self.question_bank.is_feedback_pending(item.id)
            if st.button("Get AI Feedback", key=f"feedback_{item.id}", disabled=pending):
                with st.spinner("Asking the AI coach..."):
                    run_async(self.question_bank.request_answer_feedback(item.id))

            if item.ai_feedback:
                st.markdown(
                    f'<div class="coach-feedback">🤖 {html.escape(item.ai_feedback)}</div>',
                    unsafe_allow_html=True
                )

    def render_self_intro(self):
        """Render the self-introduction generator and editor."""
        resume = self.store.get_resume_context()
        left, right = st.columns(2)

        with left:
            st.markdown("#### AI Architect")
            st.caption("Resume Loaded & Ready" if resume else "No Resume Context (optimize a resume first)")

            if st.button("Generate Strategy & Script", disabled=not resume or not self.has_context):
                try:
                    with st.spinner("Building your introduction..."):
                        result = run_async(self.self_intro.generate_intro(resume, self.role, self.company))
                    if result is None:
                        st.error("Could not generate an introduction. Please try again.")
                except ValidationError as e:
                    st.warning(str(e))

            latest = self.self_intro.latest
            if latest:
                st.markdown("**AI Rationale**")
                st.info(latest.rationale)
                st.markdown("**Draft Script**")
                st.write(latest.script)
                if st.button("Use this Script"):
                    self.self_intro.transfer_script()
                    st.session_state.intro_editor = self.self_intro.draft.text

        with right:
            st.markdown("#### Your Final Script")
            if 'intro_editor' not in st.session_state:
                if self.has_context:
                    self.self_intro.load_draft(self.company, self.role)
                st.session_state.intro_editor = self.self_intro.draft.text
            text = st.text_area("Draft", key="intro_editor", height=320,
                                placeholder="Transfer the script here or start writing...")
            self.self_intro.draft.update(text)

            col1, col2 = st.columns(2)
            with col1:
                if st.button("Refine with AI", disabled=not text.strip() or not self.has_context):
                    with st.spinner("Polishing..."):
                        st.session_state.intro_refinement = run_async(
                            self.self_intro.refine_draft(self.role, self.company)
                        )
            with col2:
                if st.button("Save Final Version", disabled=not self.has_context):
                    self.self_intro.save_draft(self.company, self.role)
                    st.success("Script saved!")

            refinement = st.session_state.get('intro_refinement')
            if refinement:
                st.markdown(refinement)

    def render_mock_interview(self):
        """Render the mock interview session."""
        if self.has_context:
            self.mock_session.set_context(self.company, self.role)

        if self.mock_session.state is SessionState.ACTIVE:
            self._render_active_session()
        else:
            self._render_session_lobby()

    def _render_session_lobby(self):
        prep_limit = self.mock_session.max_free_attempts
        used = self.mock_session.usage_count

        col1, col2 = st.columns(2)
        with col1:
            status = "warning" if used >= prep_limit else "healthy"
            st.markdown(create_metric_card(f"{used}/{prep_limit}", "Free sessions used", status),
                        unsafe_allow_html=True)
        with col2:
            st.markdown(create_metric_card(self.ledger.balance, "Points"), unsafe_allow_html=True)

        st.write("Experience a realistic interview simulation. "
                 "Your camera and microphone are used while the session runs.")

        if st.button("Start Video Session", disabled=not self.has_context):
            try:
                with st.spinner("Requesting camera and microphone..."):
                    run_async(self.mock_session.start_session())
                st.rerun()
            except QuotaExceededError:
                st.session_state.show_payment = True
            except PermissionDeniedError as e:
                st.error(f"Camera/Microphone access denied. {e}")

        if st.session_state.show_payment:
            self._render_payment_prompt()

    def _render_payment_prompt(self):
        cost = self.mock_session.mock_cost
        st.warning(
            f"You have used your {self.mock_session.max_free_attempts} free mock interview sessions. "
            f"Unlock another session for {cost} points."
        )
        col1, col2 = st.columns(2)
        with col1:
            if st.button("Cancel"):
                st.session_state.show_payment = False
                st.rerun()
        with col2:
            if st.button(f"Pay {cost} pts & Start"):
                try:
                    run_async(self.mock_session.pay_to_unlock())
                    st.session_state.show_payment = False
                    st.rerun()
                except InsufficientPointsError:
                    st.error("Insufficient points!")
                except PermissionDeniedError as e:
                    st.error(f"Camera/Microphone access denied. Points refunded. {e}")

    def _render_active_session(self):
        header, end = st.columns([5, 1])
        with header:
            st.markdown(f"#### 🔴 LIVE: {html.escape(self.role)} @ {html.escape(self.company)}")
        with end:
            if st.button("End Call"):
                self.mock_session.end_session()
                st.rerun()

        for entry in self.mock_session.transcript:
            speaker = "assistant" if entry.role is Speaker.INTERVIEWER else "user"
            with st.chat_message(speaker):
                st.write(entry.text)

        answer = st.chat_input("Type answer...", disabled=self.mock_session.is_busy)
        if answer and answer.strip():
            with st.spinner("Interviewer is thinking..."):
                run_async(self.mock_session.send_turn(answer))
            st.rerun()
