"""JSON Storage Module for assessment definitions and terminal result records"""

import json
from pathlib import Path
from typing import Dict, List, Optional
import logging

from core.question import AssessmentDefinition
from config.settings import ASSESSMENTS_DIR, RESULTS_DIR, SESSION_CONFIG
from engine.errors import AssessmentError, InvalidAssessment
from engine.session_controller import Session

logger = logging.getLogger(__name__)


class AssessmentStorage:
    """Reads already-validated assessment definitions from JSON files"""

    def __init__(self, directory: Path = ASSESSMENTS_DIR):
        self.directory = Path(directory)

    def load_assessment(self, filepath: Path) -> AssessmentDefinition:
        filepath = Path(filepath)

        if not filepath.exists():
            raise InvalidAssessment(f"Assessment file not found: {filepath}")

        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidAssessment(f"{filepath}: not valid JSON ({e})") from e

        if not isinstance(data, dict):
            raise InvalidAssessment(f"{filepath}: expected a JSON object at top level")

        try:
            assessment = AssessmentDefinition.from_dict(
                data, default_duration=SESSION_CONFIG.default_duration_seconds
            )
        except (AssessmentError, TypeError, AttributeError, ValueError) as e:
            raise InvalidAssessment(f"{filepath}: {e}") from e

        logger.info(f"Loaded assessment {assessment.id} with {assessment.question_count} questions")
        return assessment

    def load_by_id(self, assessment_id: str) -> AssessmentDefinition:
        return self.load_assessment(self.directory / f"{assessment_id}.json")

    def save_assessment(self, assessment: AssessmentDefinition) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        filepath = self.directory / f"{assessment.id}.json"

        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(assessment.to_dict(), f, indent=2, ensure_ascii=False)

        logger.info(f"Saved assessment {assessment.id} to {filepath}")
        return filepath

    def list_assessment_ids(self) -> List[str]:
        if not self.directory.exists():
            return []
        return sorted(p.stem for p in self.directory.glob("*.json"))


class ResultStorage:
    """
    Writes the terminal record of a submitted session.
    One file per session, grouped by candidate.
    """

    def __init__(self, directory: Path = RESULTS_DIR):
        self.directory = Path(directory)

    @staticmethod
    def build_record(session: Session) -> Dict:
        if session.result is None:
            raise ValueError(f"Session {session.session_id} has no result yet")

        return {
            "sessionId": session.session_id,
            "candidateId": session.candidate_id,
            "assessmentId": session.assessment.id,
            "submittedAt": session.submitted_at.isoformat() if session.submitted_at else None,
            "reason": session.submission_reason.value if session.submission_reason else None,
            "result": session.result.to_dict(),
        }

    def save_result(self, session: Session) -> Path:
        record = self.build_record(session)

        candidate_dir = self.directory / (session.candidate_id or "anonymous")
        candidate_dir.mkdir(parents=True, exist_ok=True)

        path = candidate_dir / f"{session.session_id}.json"
        with open(path, "w", encoding="utf-8") as f:
            json.dump(record, f, indent=2, ensure_ascii=False)

        logger.info(
            f"Saved result for session={session.session_id} assessment={session.assessment.id}"
        )
        return path

    def load_record(self, path: Path) -> Optional[Dict]:
        path = Path(path)
        if not path.exists():
            return None

        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
