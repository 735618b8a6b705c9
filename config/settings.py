"""
Configuration settings for the Timed Assessment Engine
All constants and configurable parameters in one place
"""

from pathlib import Path
from dataclasses import dataclass
import os

# Base paths
BASE_DIR = Path(__file__).parent.parent
DATA_DIR = Path(os.environ.get("ASSESSMENT_DATA_DIR", BASE_DIR / "data"))
ASSESSMENTS_DIR = DATA_DIR / "assessments"
RESULTS_DIR = DATA_DIR / "results"


@dataclass
class SessionConfig:
    """Configuration for timed sessions"""

    # Clock resolution in seconds
    tick_interval: float = 1.0

    # Timer display thresholds (seconds left)
    low_time_warning: int = 300
    caution_time: int = 900

    # Used when an assessment file does not carry its own duration
    default_duration_seconds: int = 3600


@dataclass
class QuestionConfig:
    """Configuration for question validation"""

    default_subject: str = "General"


# Global config instances
SESSION_CONFIG = SessionConfig()
QUESTION_CONFIG = QuestionConfig()
