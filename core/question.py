"""
Question Model
Immutable questions and assessment definitions as handed over by the question bank
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from config.settings import QUESTION_CONFIG
from engine.errors import InvalidAssessment, InvalidQuestion


@dataclass(frozen=True)
class Question:
    """Single multiple-choice question, keyed options in display order"""
    id: str
    text: str
    options: Mapping[str, str]
    correct_answer: str
    explanation: Optional[str] = None
    subject: str = QUESTION_CONFIG.default_subject

    def __post_init__(self):
        if not self.id:
            raise InvalidQuestion("Question id must not be empty")
        if not self.options:
            raise InvalidQuestion(f"Question {self.id!r} has no options")
        if self.correct_answer not in self.options:
            raise InvalidQuestion(
                f"Question {self.id!r}: correct answer {self.correct_answer!r} "
                f"is not one of {list(self.options)}"
            )
        # Freeze the option mapping so a loaded question cannot drift mid-session
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))

    @property
    def option_keys(self) -> List[str]:
        return list(self.options)

    def has_option(self, option_key: str) -> bool:
        return option_key in self.options

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "text": self.text,
            "options": dict(self.options),
            "correctAnswer": self.correct_answer,
            "explanation": self.explanation,
            "subject": self.subject,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "Question":
        try:
            return cls(
                id=str(data["id"]),
                text=data["text"],
                options=data["options"],
                correct_answer=data["correctAnswer"],
                explanation=data.get("explanation") or None,
                subject=data.get("subject") or QUESTION_CONFIG.default_subject,
            )
        except KeyError as e:
            raise InvalidQuestion(f"Question is missing field {e.args[0]!r}") from e


@dataclass(frozen=True)
class AssessmentDefinition:
    """An assessment: canonical question order plus a fixed time budget"""
    id: str
    title: str
    questions: Tuple[Question, ...]
    duration_seconds: int
    _index: Dict[str, int] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        questions = tuple(self.questions)
        object.__setattr__(self, "questions", questions)

        if isinstance(self.duration_seconds, bool) or not isinstance(self.duration_seconds, int):
            raise InvalidAssessment(
                f"Assessment {self.id!r}: duration must be an integer number of seconds"
            )
        if self.duration_seconds <= 0:
            raise InvalidAssessment(
                f"Assessment {self.id!r}: duration must be positive, got {self.duration_seconds}"
            )

        index = {}
        for position, question in enumerate(questions):
            if question.id in index:
                raise InvalidAssessment(
                    f"Assessment {self.id!r}: duplicate question id {question.id!r}"
                )
            index[question.id] = position
        object.__setattr__(self, "_index", index)

    @property
    def question_count(self) -> int:
        return len(self.questions)

    def has_question(self, question_id: str) -> bool:
        return question_id in self._index

    def get_question(self, question_id: str) -> Optional[Question]:
        position = self._index.get(question_id)
        if position is None:
            return None
        return self.questions[position]

    def index_of(self, question_id: str) -> Optional[int]:
        return self._index.get(question_id)

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "title": self.title,
            "durationSeconds": self.duration_seconds,
            "questions": [q.to_dict() for q in self.questions],
        }

    @classmethod
    def from_dict(cls, data: Dict, default_duration: Optional[int] = None) -> "AssessmentDefinition":
        try:
            questions = [Question.from_dict(q) for q in data.get("questions", [])]
            duration = data.get("durationSeconds", default_duration)
            if duration is None:
                raise InvalidAssessment(f"Assessment {data.get('id')!r} has no duration")
            return cls(
                id=str(data["id"]),
                title=data.get("title", ""),
                questions=tuple(questions),
                duration_seconds=duration,
            )
        except KeyError as e:
            raise InvalidAssessment(f"Assessment is missing field {e.args[0]!r}") from e
