"""
Scorer Module
Pure scoring of a finished session: one outcome per question in canonical order
"""

from collections import OrderedDict
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from core.question import Question
from engine.errors import InvalidAssessment


@dataclass(frozen=True)
class QuestionOutcome:
    """Verdict for a single question"""
    question: Question
    chosen_option: Optional[str]  # None means unanswered
    correct: bool
    explanation: Optional[str]

    @property
    def question_id(self) -> str:
        return self.question.id

    @property
    def is_answered(self) -> bool:
        return self.chosen_option is not None

    @property
    def status(self) -> str:
        if not self.is_answered:
            return "unanswered"
        return "correct" if self.correct else "incorrect"

    def to_dict(self) -> Dict:
        return {
            "questionId": self.question.id,
            "chosenOption": self.chosen_option,
            "correct": self.correct,
            "explanation": self.explanation,
        }


@dataclass(frozen=True)
class Result:
    """Terminal record of a session"""
    total_questions: int
    correct_count: int
    outcomes: Tuple[QuestionOutcome, ...]

    @property
    def answered_count(self) -> int:
        return sum(1 for o in self.outcomes if o.is_answered)

    @property
    def incorrect_count(self) -> int:
        return self.total_questions - self.correct_count

    @property
    def percentage(self) -> int:
        if self.total_questions == 0:
            return 0
        # Half rounds up
        return (200 * self.correct_count + self.total_questions) // (2 * self.total_questions)

    def subject_breakdown(self) -> Dict[str, Dict]:
        """Per-subject totals, in order of first appearance"""
        breakdown = OrderedDict()

        for o in self.outcomes:
            data = breakdown.setdefault(o.question.subject, {
                "total": 0,
                "answered": 0,
                "correct": 0,
            })
            data["total"] += 1
            if o.is_answered:
                data["answered"] += 1
            if o.correct:
                data["correct"] += 1

        return dict(breakdown)

    def to_dict(self) -> Dict:
        return {
            "totalQuestions": self.total_questions,
            "correctCount": self.correct_count,
            "outcomes": [o.to_dict() for o in self.outcomes],
        }

    @classmethod
    def from_dict(cls, data: Dict, questions: Sequence[Question]) -> "Result":
        """Rebuild a serialized result against the questions it was scored on"""
        lookup = {q.id: q for q in questions}
        outcomes = []

        for item in data["outcomes"]:
            question = lookup.get(item["questionId"])
            if question is None:
                raise InvalidAssessment(
                    f"Result references unknown question {item['questionId']!r}"
                )
            outcomes.append(QuestionOutcome(
                question=question,
                chosen_option=item.get("chosenOption"),
                correct=bool(item["correct"]),
                explanation=item.get("explanation"),
            ))

        return cls(
            total_questions=data["totalQuestions"],
            correct_count=data["correctCount"],
            outcomes=tuple(outcomes),
        )


def score(questions: Sequence[Question], answers: Mapping[str, str]) -> Result:
    """
    Score answers against questions
    Correct iff the chosen option key equals the correct key exactly;
    unanswered questions are incorrect and answers for unknown ids are ignored
    """
    outcomes: List[QuestionOutcome] = []

    for q in questions:
        chosen = answers.get(q.id)
        outcomes.append(QuestionOutcome(
            question=q,
            chosen_option=chosen,
            correct=chosen is not None and chosen == q.correct_answer,
            explanation=q.explanation,
        ))

    return Result(
        total_questions=len(questions),
        correct_count=sum(1 for o in outcomes if o.correct),
        outcomes=tuple(outcomes),
    )
