"""
Error taxonomy for the assessment engine
All errors are precondition violations raised synchronously by the failing command
"""


class AssessmentError(Exception):
    """Base class for every error raised by the engine"""


class InvalidQuestion(AssessmentError, ValueError):
    """A question failed validation while being built"""


class InvalidAssessment(AssessmentError, ValueError):
    """An assessment definition failed validation while being built or loaded"""


class NotEntitled(AssessmentError):
    """Start attempted without a granted entitlement"""

    def __init__(self, assessment_id: str, candidate_id=None):
        self.assessment_id = assessment_id
        self.candidate_id = candidate_id
        super().__init__(f"Candidate {candidate_id!r} is not entitled to start assessment {assessment_id!r}")


class EmptyAssessment(AssessmentError):
    """Start attempted on an assessment with zero questions"""

    def __init__(self, assessment_id: str):
        self.assessment_id = assessment_id
        super().__init__(f"Assessment {assessment_id!r} has no questions")


class SessionNotActive(AssessmentError):
    """A command was issued against a submitted session"""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session {session_id} is not active")


class UnknownQuestion(AssessmentError, KeyError):
    """A command referenced a question id outside the assessment"""

    def __init__(self, question_id: str):
        self.question_id = question_id
        super().__init__(f"Unknown question: {question_id!r}")

    def __str__(self):
        return self.args[0]


class UnknownOption(AssessmentError, KeyError):
    """A command referenced an option key the question does not offer"""

    def __init__(self, question_id: str, option_key: str):
        self.question_id = question_id
        self.option_key = option_key
        super().__init__(f"Unknown option {option_key!r} for question {question_id!r}")

    def __str__(self):
        return self.args[0]


class IndexOutOfRange(AssessmentError, IndexError):
    """Navigation outside [0, question_count)"""

    def __init__(self, index, question_count: int):
        self.index = index
        self.question_count = question_count
        super().__init__(f"Question index {index!r} outside [0, {question_count})")


class ClockError(AssessmentError, RuntimeError):
    """A clock source was used out of order"""
