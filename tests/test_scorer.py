"""
Tests for the pure scoring function and the Result record.
"""

import json

import pytest

from engine.errors import InvalidAssessment
from engine.scorer import Result, score

from conftest import make_question


@pytest.fixture
def questions():
    return (
        make_question("Q1", correct="b", explanation="B is right", subject="Maths"),
        make_question("Q2", correct="a", subject="Science"),
    )


class TestScore:
    """Scoring rules."""

    def test_one_of_two_correct_with_unanswered(self, questions):
        result = score(questions, {"Q1": "b"})

        assert result.total_questions == 2
        assert result.correct_count == 1

        q2 = result.outcomes[1]
        assert q2.question_id == "Q2"
        assert q2.correct is False
        assert q2.chosen_option is None
        assert q2.status == "unanswered"

    def test_outcomes_follow_canonical_order(self, questions):
        result = score(questions, {"Q2": "a", "Q1": "c"})
        assert [o.question_id for o in result.outcomes] == ["Q1", "Q2"]

    def test_match_is_case_sensitive(self, questions):
        result = score(questions, {"Q1": "B"})
        assert result.correct_count == 0
        assert result.outcomes[0].status == "incorrect"

    def test_answers_for_unknown_questions_are_ignored(self, questions):
        result = score(questions, {"Q1": "b", "Q99": "a"})
        assert result.correct_count == 1
        assert len(result.outcomes) == 2

    def test_explanation_carried_over(self, questions):
        result = score(questions, {})
        assert result.outcomes[0].explanation == "B is right"
        assert result.outcomes[1].explanation is None

    def test_rescoring_is_structurally_equal(self, questions):
        answers = {"Q1": "b", "Q2": "d"}
        assert score(questions, answers) == score(questions, answers)

    def test_scoring_does_not_touch_answers(self, questions):
        answers = {"Q1": "b"}
        score(questions, answers)
        assert answers == {"Q1": "b"}

    def test_no_questions(self):
        result = score((), {})
        assert result.total_questions == 0
        assert result.correct_count == 0
        assert result.percentage == 0


class TestResult:
    """Derived figures and the serialized shape."""

    def test_percentage_and_counts(self, questions):
        result = score(questions, {"Q1": "b", "Q2": "c"})
        assert result.percentage == 50
        assert result.answered_count == 2
        assert result.incorrect_count == 1

    def test_subject_breakdown(self, questions):
        result = score(questions, {"Q1": "b"})
        assert result.subject_breakdown() == {
            "Maths": {"total": 1, "answered": 1, "correct": 1},
            "Science": {"total": 1, "answered": 0, "correct": 0},
        }

    def test_to_dict_shape(self, questions):
        data = score(questions, {"Q1": "b"}).to_dict()

        assert data == {
            "totalQuestions": 2,
            "correctCount": 1,
            "outcomes": [
                {"questionId": "Q1", "chosenOption": "b", "correct": True, "explanation": "B is right"},
                {"questionId": "Q2", "chosenOption": None, "correct": False, "explanation": None},
            ],
        }
        assert '"chosenOption": null' in json.dumps(data)

    def test_from_dict_rebuilds_equal_result(self, questions):
        result = score(questions, {"Q2": "a"})
        assert Result.from_dict(result.to_dict(), questions) == result

    def test_from_dict_unknown_question(self, questions):
        data = score(questions, {}).to_dict()
        with pytest.raises(InvalidAssessment):
            Result.from_dict(data, questions[:1])

    def test_percentage_half_rounds_up(self):
        questions = tuple(make_question(f"Q{i}") for i in range(8))
        result = score(questions, {"Q0": "a"})
        assert result.percentage == 13
