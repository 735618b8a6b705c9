"""
Tests for the exam state the Streamlit host keeps between reruns.
"""

from ui.state import EXAM_STATE_DEFAULTS, init_exam_state, reset_exam_state, take_error


class TestExamState:
    """Starting, finishing and restarting a test in one browser session."""

    def test_init_fills_only_missing_keys(self):
        state = {"saved_path": "kept.json"}
        init_exam_state(state)

        assert state["saved_path"] == "kept.json"
        assert state["exam_session"] is None
        assert state["last_error"] is None

    def test_error_is_shown_once(self):
        state = dict(EXAM_STATE_DEFAULTS, last_error="Session is not active")

        assert take_error(state) == "Session is not active"
        assert take_error(state) is None

    def test_new_test_starts_without_stale_error(self):
        """An answer rejected at expiry must not reappear on the next test."""
        state = dict(EXAM_STATE_DEFAULTS)
        state.update(exam_session=object(), clock=object(), last_sync=12.0,
                     saved_path="r.json", last_error="Session is not active")

        reset_exam_state(state)

        assert state == EXAM_STATE_DEFAULTS
        assert take_error(state) is None
