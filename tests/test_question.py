"""
Tests for the Question and AssessmentDefinition data model.
"""

import pytest

from core.question import AssessmentDefinition, Question
from engine.errors import InvalidAssessment, InvalidQuestion

from conftest import make_question


class TestQuestion:
    """Validation and serialization of single questions."""

    def test_correct_answer_must_be_an_option(self):
        with pytest.raises(InvalidQuestion):
            Question(id="Q1", text="?", options={"a": "x", "b": "y"}, correct_answer="c")

    def test_empty_options_rejected(self):
        with pytest.raises(InvalidQuestion):
            Question(id="Q1", text="?", options={}, correct_answer="a")

    def test_empty_id_rejected(self):
        with pytest.raises(InvalidQuestion):
            Question(id="", text="?", options={"a": "x"}, correct_answer="a")

    def test_options_cannot_be_mutated(self):
        source = {"a": "x", "b": "y"}
        question = Question(id="Q1", text="?", options=source, correct_answer="a")

        source["c"] = "z"
        assert question.option_keys == ["a", "b"]
        with pytest.raises(TypeError):
            question.options["c"] = "z"

    def test_default_subject(self):
        question = Question(id="Q1", text="?", options={"a": "x"}, correct_answer="a")
        assert question.subject == "General"

    def test_from_dict_uses_camel_case_fields(self):
        question = Question.from_dict({
            "id": "Q9",
            "text": "Pick b",
            "options": {"a": "no", "b": "yes"},
            "correctAnswer": "b",
            "explanation": "",
        })
        assert question.correct_answer == "b"
        assert question.explanation is None
        assert question.to_dict()["correctAnswer"] == "b"

    def test_from_dict_missing_field(self):
        with pytest.raises(InvalidQuestion, match="correctAnswer"):
            Question.from_dict({"id": "Q1", "text": "?", "options": {"a": "x"}})


class TestAssessmentDefinition:
    """Validation and lookups on assessment definitions."""

    def test_duration_must_be_positive(self):
        with pytest.raises(InvalidAssessment):
            AssessmentDefinition(id="a", title="A", questions=(), duration_seconds=0)

    def test_duration_must_be_int(self):
        with pytest.raises(InvalidAssessment):
            AssessmentDefinition(id="a", title="A", questions=(), duration_seconds="60")

    def test_duplicate_question_ids_rejected(self):
        with pytest.raises(InvalidAssessment, match="duplicate"):
            AssessmentDefinition(
                id="a", title="A",
                questions=(make_question("Q1"), make_question("Q1")),
                duration_seconds=60,
            )

    def test_list_of_questions_is_frozen_to_tuple(self):
        assessment = AssessmentDefinition(
            id="a", title="A", questions=[make_question("Q1")], duration_seconds=60
        )
        assert isinstance(assessment.questions, tuple)

    def test_lookups(self):
        assessment = AssessmentDefinition(
            id="a", title="A",
            questions=(make_question("Q1"), make_question("Q2")),
            duration_seconds=60,
        )
        assert assessment.question_count == 2
        assert assessment.index_of("Q2") == 1
        assert assessment.get_question("Q1").id == "Q1"
        assert assessment.get_question("missing") is None
        assert not assessment.has_question("missing")

    def test_from_dict_falls_back_to_default_duration(self):
        data = {"id": "a", "title": "A", "questions": []}
        assessment = AssessmentDefinition.from_dict(data, default_duration=90)
        assert assessment.duration_seconds == 90

    def test_from_dict_without_any_duration(self):
        with pytest.raises(InvalidAssessment):
            AssessmentDefinition.from_dict({"id": "a", "questions": []})

    def test_dict_round_trip_preserves_order(self):
        assessment = AssessmentDefinition(
            id="a", title="A",
            questions=(make_question("Q2"), make_question("Q1")),
            duration_seconds=60,
        )
        rebuilt = AssessmentDefinition.from_dict(assessment.to_dict())
        assert [q.id for q in rebuilt.questions] == ["Q2", "Q1"]
        assert rebuilt == assessment
