"""
Pytest configuration and shared fixtures for the assessment engine tests.
"""

import pytest

from core.question import AssessmentDefinition, Question
from engine.clock import ManualClock
from engine.session_controller import SessionController


class ClockRecorder:
    """Clock factory that keeps every ManualClock it hands out."""

    def __init__(self):
        self.clocks = []

    def __call__(self):
        clock = ManualClock()
        self.clocks.append(clock)
        return clock

    @property
    def last(self) -> ManualClock:
        return self.clocks[-1]


def make_question(qid: str, correct: str = "a", explanation=None, subject="General") -> Question:
    return Question(
        id=qid,
        text=f"Question {qid}?",
        options={"a": "Alpha", "b": "Bravo", "c": "Charlie", "d": "Delta"},
        correct_answer=correct,
        explanation=explanation,
        subject=subject,
    )


def make_assessment(count: int = 5, duration: int = 60, **kwargs) -> AssessmentDefinition:
    return AssessmentDefinition(
        id=kwargs.get("id", "test-assessment"),
        title=kwargs.get("title", "Test Assessment"),
        questions=tuple(make_question(f"Q{i}") for i in range(1, count + 1)),
        duration_seconds=duration,
    )


@pytest.fixture
def clocks():
    """Fixture providing a recording ManualClock factory."""
    return ClockRecorder()


@pytest.fixture
def controller(clocks):
    """Fixture providing a controller driven by manual clocks."""
    ctrl = SessionController(clock_factory=clocks)
    yield ctrl
    ctrl.stop_all()


@pytest.fixture
def two_question_assessment():
    """Q1 correct answer b, Q2 correct answer a."""
    return AssessmentDefinition(
        id="two",
        title="Two Questions",
        questions=(
            make_question("Q1", correct="b", explanation="B is right", subject="Maths"),
            make_question("Q2", correct="a", subject="Science"),
        ),
        duration_seconds=120,
    )


@pytest.fixture
def five_question_assessment():
    return make_assessment(count=5, duration=60)
