"""
Per-browser state kept by the Streamlit host between reruns
Works on st.session_state or any plain mapping
"""

EXAM_STATE_DEFAULTS = {
    "exam_session": None,
    "clock": None,
    "last_sync": None,
    "confirm_submit": False,
    "saved_path": None,
    "last_error": None,
}


def init_exam_state(state):
    """Fill in any exam keys missing from state"""
    for key, value in EXAM_STATE_DEFAULTS.items():
        if key not in state:
            state[key] = value


def reset_exam_state(state):
    """Forget the finished session, its clock and any pending message"""
    for key, value in EXAM_STATE_DEFAULTS.items():
        state[key] = value


def take_error(state):
    """Return the pending inline error once, clearing it"""
    message = state.get("last_error")
    state["last_error"] = None
    return message
