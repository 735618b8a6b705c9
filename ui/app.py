"""
Timed Assessment Engine - Streamlit UI
Hosts a single timed session: timer, question card, navigator and results
"""

import streamlit as st
from pathlib import Path
import argparse
import sys
import time

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.settings import SESSION_CONFIG
from engine.clock import ManualClock
from engine.errors import AssessmentError, EmptyAssessment, NotEntitled
from engine.session_controller import SessionController, SubmissionReason
from storage.json_storage import AssessmentStorage, ResultStorage
from ui.state import init_exam_state, reset_exam_state, take_error


# Page config
st.set_page_config(
    page_title="Timed Assessment",
    page_icon="📝",
    layout="wide",
)


def parse_ui_args():
    parser = argparse.ArgumentParser()
    parser.add_argument("--file", default=None)
    args, _ = parser.parse_known_args(sys.argv[1:])
    return args


def init_session_state():
    """Initialize session state variables"""
    if 'controller' not in st.session_state:
        st.session_state.controller = SessionController(clock_factory=ManualClock)

    init_exam_state(st.session_state)


def sync_clock():
    """Deliver the whole seconds elapsed since the previous rerun"""
    clock = st.session_state.clock
    if clock is None or st.session_state.last_sync is None:
        return

    now = time.monotonic()
    elapsed = int(now - st.session_state.last_sync)
    if elapsed > 0:
        clock.advance(elapsed)
        st.session_state.last_sync += elapsed


def load_assessment(file_arg):
    storage = AssessmentStorage()
    if file_arg:
        return storage.load_assessment(Path(file_arg))

    ids = storage.list_assessment_ids()
    if not ids:
        st.warning(f"No assessments found in {storage.directory}")
        st.stop()

    chosen = st.selectbox("Choose a test", ids)
    return storage.load_by_id(chosen)


def render_start(file_arg):
    st.markdown("## 📝 Start a Test")

    try:
        assessment = load_assessment(file_arg)
    except AssessmentError as e:
        st.error(f"❌ Test unavailable: {e}")
        st.stop()

    st.markdown(f"### {assessment.title}")
    st.caption(
        f"{assessment.question_count} questions · "
        f"{assessment.duration_seconds // 60} minutes"
    )

    candidate_id = st.text_input("Candidate ID")
    entitled = st.checkbox("Access granted for this test", value=True)

    if st.button("▶️ Start Test", type="primary", disabled=not candidate_id):
        controller = st.session_state.controller

        try:
            session = controller.start(assessment, entitlement_granted=entitled,
                                       candidate_id=candidate_id)
        except NotEntitled:
            st.error("🔒 You need to purchase this test before starting it.")
            return
        except EmptyAssessment:
            st.error("❌ Test unavailable: it has no questions.")
            return

        reset_exam_state(st.session_state)
        st.session_state.exam_session = session
        # Reruns advance this clock by the wall time elapsed in between
        st.session_state.clock = controller.clock_for(session)
        st.session_state.last_sync = time.monotonic()
        st.rerun()


def render_exam(session):
    controller = st.session_state.controller

    # ── Timer ──
    if session.is_low_on_time:
        st.error(f"⏰ Running out of time — {session.time_left_display}")
    elif session.remaining_seconds <= SESSION_CONFIG.caution_time:
        st.warning(f"⏱ Time Left: {session.time_left_display}")
    else:
        st.info(f"⏱ Time Left: {session.time_left_display}")

    col1, col2 = st.columns(2)
    with col1:
        st.markdown(f"### Question {session.current_index + 1}/{session.question_count}")
    with col2:
        st.markdown(f"### ✅ {session.answered_count}/{session.question_count}")

    st.progress(int(session.progress_percent))
    st.markdown("---")

    question = session.current_question
    st.markdown(f"**Q{session.current_index + 1}.** {question.text}")

    keys = question.option_keys
    current_answer = session.answer_for(question.id)

    def save_answer():
        sync_clock()
        picked = st.session_state[f"q_{question.id}"]
        if picked is None:
            return
        try:
            controller.select_answer(session, question.id, picked)
        except AssessmentError as e:
            st.session_state.last_error = str(e)

    st.radio(
        "Select your answer:",
        options=keys,
        format_func=lambda k: f"{k}. {question.options[k]}",
        index=keys.index(current_answer) if current_answer else None,
        key=f"q_{question.id}",
        on_change=save_answer,
    )

    error = take_error(st.session_state)
    if error:
        st.warning(f"⚠️ {error}")

    st.markdown("---")

    # ── Navigation buttons ──
    col1, col2, col3 = st.columns(3)

    with col1:
        if st.button("⬅️ Previous", disabled=session.current_index == 0):
            controller.previous(session)
            st.rerun()

    with col2:
        if st.button("➡️ Next", disabled=session.current_index >= session.question_count - 1):
            controller.next(session)
            st.rerun()

    with col3:
        if st.button("📤 Submit Test", type="primary"):
            if session.unanswered_count > 0:
                st.session_state.confirm_submit = True
            else:
                controller.submit(session)
                st.rerun()

    if st.session_state.confirm_submit:
        st.markdown("---")
        st.error(
            f"You have {session.unanswered_count} unanswered questions. "
            f"Submit anyway? You won't be able to change your answers."
        )
        c1, c2 = st.columns(2)
        with c1:
            if st.button("✅ Yes, Submit Now", type="primary"):
                st.session_state.confirm_submit = False
                if session.is_active:
                    controller.submit(session)
                st.rerun()
        with c2:
            if st.button("❌ No, Continue Test"):
                st.session_state.confirm_submit = False
                st.rerun()

    # ── Question navigator ──
    st.markdown("---")
    st.markdown("### 📋 Question Navigator")
    st.caption(f"✅ Answered: {session.answered_count}  |  ⬜ Unanswered: {session.unanswered_count}")

    buttons_per_row = 10
    status = session.navigation_status()

    for row_start in range(0, len(status), buttons_per_row):
        row = status[row_start:row_start + buttons_per_row]
        cols = st.columns(len(row))

        for col, item in zip(cols, row):
            number = item["index"] + 1
            if item["current"]:
                label = f"👉 {number}"
            elif item["answered"]:
                label = f"✅ {number}"
            else:
                label = f"⬜ {number}"

            with col:
                if st.button(label, key=f"nav_{item['index']}"):
                    controller.go_to(session, item["index"])
                    st.rerun()


def render_results(session):
    result = session.result

    # An answer rejected because time ran out is superseded by this page
    take_error(st.session_state)

    if session.submission_reason is SubmissionReason.TIMEOUT:
        st.warning("⏰ Time is up — your test was submitted automatically.")
    else:
        st.success("✅ Test Submitted Successfully!")

    st.markdown(f"## {session.assessment.title}")
    st.metric("Score", f"{result.correct_count}/{result.total_questions}", f"{result.percentage}%")
    st.progress(result.percentage)

    for i, outcome in enumerate(result.outcomes, start=1):
        question = outcome.question
        chosen = question.options[outcome.chosen_option] if outcome.is_answered else "Not answered"
        box = st.success if outcome.correct else st.error

        box(
            f"**Question {i}** — {'Correct' if outcome.correct else 'Incorrect'}\n\n"
            f"{question.text}\n\n"
            f"Your answer: {chosen}\n\n"
            f"Correct answer: {question.options[question.correct_answer]}"
        )
        if outcome.explanation:
            st.info(f"**Explanation:** {outcome.explanation}")

    st.markdown("### 📚 By Subject")
    for subject, data in result.subject_breakdown().items():
        st.text(f"{subject}: {data['correct']}/{data['total']}")

    col1, col2 = st.columns(2)
    with col1:
        if st.session_state.saved_path:
            st.caption(f"💾 Saved to {st.session_state.saved_path}")
        elif st.button("💾 Save Result"):
            st.session_state.saved_path = str(ResultStorage().save_result(session))
            st.rerun()
    with col2:
        if st.button("🏠 New Test"):
            reset_exam_state(st.session_state)
            st.rerun()


def main():
    init_session_state()
    args = parse_ui_args()

    sync_clock()
    session = st.session_state.exam_session

    if session is None:
        render_start(args.file)
    elif session.is_active:
        render_exam(session)
    else:
        render_results(session)


if __name__ == "__main__":
    main()
