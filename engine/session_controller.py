"""
Session Controller Module
Owns the lifecycle of a timed assessment session: start, navigation,
answer capture, countdown, and the single transition into the submitted state
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, List, Optional
from uuid import uuid4

from config.settings import SESSION_CONFIG, SessionConfig
from core.question import AssessmentDefinition, Question
from engine.clock import ClockSource, ThreadingClock
from engine.errors import (
    EmptyAssessment,
    IndexOutOfRange,
    NotEntitled,
    SessionNotActive,
    UnknownOption,
    UnknownQuestion,
)
from engine.scorer import Result, score

logger = logging.getLogger(__name__)


class SessionStatus(Enum):
    ACTIVE = "active"
    SUBMITTED = "submitted"


class SubmissionReason(Enum):
    MANUAL = "manual"
    TIMEOUT = "timeout"


@dataclass
class Session:
    """One candidate's continuous attempt at one assessment"""
    session_id: str
    assessment: AssessmentDefinition
    remaining_seconds: int
    candidate_id: Optional[str] = None

    # State
    current_index: int = 0
    answers: Dict[str, str] = field(default_factory=dict)
    status: SessionStatus = SessionStatus.ACTIVE
    result: Optional[Result] = None

    # Timing
    started_at: datetime = field(default_factory=datetime.now)
    submitted_at: Optional[datetime] = None
    submission_reason: Optional[SubmissionReason] = None

    low_time_warning: int = SESSION_CONFIG.low_time_warning

    @property
    def question_count(self) -> int:
        return self.assessment.question_count

    @property
    def is_active(self) -> bool:
        return self.status is SessionStatus.ACTIVE

    @property
    def current_question(self) -> Question:
        return self.assessment.questions[self.current_index]

    @property
    def answered_count(self) -> int:
        return len(self.answers)

    @property
    def unanswered_count(self) -> int:
        return self.question_count - self.answered_count

    @property
    def is_low_on_time(self) -> bool:
        return self.remaining_seconds < self.low_time_warning

    @property
    def time_left_display(self) -> str:
        """Remaining time as MM:SS"""
        mins, secs = divmod(self.remaining_seconds, 60)
        return f"{mins:02d}:{secs:02d}"

    @property
    def progress_percent(self) -> float:
        if self.question_count <= 1:
            return 100.0
        return self.current_index / (self.question_count - 1) * 100

    def answer_for(self, question_id: str) -> Optional[str]:
        return self.answers.get(question_id)

    def navigation_status(self) -> List[Dict]:
        """Status of all questions for a navigator panel"""
        return [
            {
                "index": i,
                "question_id": q.id,
                "answered": q.id in self.answers,
                "current": i == self.current_index,
            }
            for i, q in enumerate(self.assessment.questions)
        ]


class SessionController:
    """
    Mediates every command against a session
    Sessions move ACTIVE -> SUBMITTED exactly once, by submit() or by the
    countdown reaching zero; a submitted session is read-only
    """

    def __init__(
        self,
        clock_factory: Callable[[], ClockSource] = None,
        config: SessionConfig = None,
        on_submitted: Optional[Callable[[Session], None]] = None,
    ):
        self.config = config or SESSION_CONFIG
        self.clock_factory = clock_factory or (lambda: ThreadingClock(self.config.tick_interval))
        self.on_submitted = on_submitted

        # Serializes session mutation against ticks arriving from a clock thread
        self._lock = threading.Lock()
        self._clocks: Dict[str, ClockSource] = {}

    def start(
        self,
        assessment: AssessmentDefinition,
        entitlement_granted: bool,
        candidate_id: Optional[str] = None,
    ) -> Session:
        """Create an active session and start its countdown"""
        if not entitlement_granted:
            raise NotEntitled(assessment.id, candidate_id)

        if assessment.question_count == 0:
            raise EmptyAssessment(assessment.id)

        session = Session(
            session_id=self._generate_session_id(),
            assessment=assessment,
            remaining_seconds=assessment.duration_seconds,
            candidate_id=candidate_id,
            low_time_warning=self.config.low_time_warning,
        )

        clock = self.clock_factory()
        self._clocks[session.session_id] = clock
        clock.start(lambda: self.tick(session))

        logger.info(
            f"Started session {session.session_id} for assessment {assessment.id} "
            f"({assessment.question_count} questions, {assessment.duration_seconds}s)"
        )
        return session

    def _generate_session_id(self) -> str:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        random_suffix = uuid4().hex[:8]
        return f"session_{timestamp}_{random_suffix}"

    def select_answer(self, session: Session, question_id: str, option_key: str) -> Session:
        """Record or overwrite the answer for a question"""
        with self._lock:
            self._require_active(session)

            question = session.assessment.get_question(question_id)
            if question is None:
                raise UnknownQuestion(question_id)
            if not question.has_option(option_key):
                raise UnknownOption(question_id, option_key)

            session.answers[question_id] = option_key

        logger.debug(f"Session {session.session_id}: {question_id} -> {option_key}")
        return session

    def go_to(self, session: Session, index: int) -> Session:
        """Navigate to a question by 0-based index"""
        with self._lock:
            self._require_active(session)

            if (
                isinstance(index, bool)
                or not isinstance(index, int)
                or not 0 <= index < session.question_count
            ):
                raise IndexOutOfRange(index, session.question_count)

            session.current_index = index

        return session

    def next(self, session: Session) -> Session:
        """Move forward one question; no-op on the last one"""
        with self._lock:
            self._require_active(session)
            if session.current_index < session.question_count - 1:
                session.current_index += 1
        return session

    def previous(self, session: Session) -> Session:
        """Move back one question; no-op on the first one"""
        with self._lock:
            self._require_active(session)
            if session.current_index > 0:
                session.current_index -= 1
        return session

    def tick(self, session: Session) -> Session:
        """
        Advance the countdown by one second
        Reaching zero forces submission; ticks on a submitted session are ignored
        """
        with self._lock:
            if not session.is_active:
                return session

            session.remaining_seconds = max(0, session.remaining_seconds - 1)
            if session.remaining_seconds > 0:
                return session

            # Expiry and submission share one critical section
            self._transition_locked(session, SubmissionReason.TIMEOUT)

        logger.info(f"Session {session.session_id} ran out of time")
        self._after_submission(session)
        return session

    def submit(self, session: Session) -> Session:
        """Candidate-initiated submission; a second submission is an error"""
        with self._lock:
            self._require_active(session)
            self._transition_locked(session, SubmissionReason.MANUAL)

        self._after_submission(session)
        return session

    def clock_for(self, session: Session) -> Optional[ClockSource]:
        """The clock driving an active session, None once it is submitted"""
        return self._clocks.get(session.session_id)

    def stop_all(self):
        """Stop every clock still owned by this controller"""
        for session_id in list(self._clocks):
            clock = self._clocks.pop(session_id, None)
            if clock is not None:
                clock.stop()

    def _transition_locked(self, session: Session, reason: SubmissionReason):
        """ACTIVE -> SUBMITTED; caller holds self._lock and has checked the session is active"""
        session.result = score(session.assessment.questions, session.answers)
        session.submitted_at = datetime.now()
        session.submission_reason = reason
        session.status = SessionStatus.SUBMITTED

    def _after_submission(self, session: Session):
        """Stop the clock and hand off the result, outside the lock"""
        # A clock thread may be waiting on the lock inside tick()
        clock = self._clocks.pop(session.session_id, None)
        if clock is not None:
            clock.stop()

        result = session.result
        logger.info(
            f"Session {session.session_id} submitted ({session.submission_reason.value}): "
            f"{result.correct_count}/{result.total_questions} correct"
        )

        if self.on_submitted is None:
            return
        try:
            self.on_submitted(session)
        except Exception as e:
            logger.error(f"Submission hook failed for session {session.session_id}: {e}")

    def _require_active(self, session: Session):
        if not session.is_active:
            raise SessionNotActive(session.session_id)
