"""Tunable constants and data file location."""
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

APP_NAME = "study_planner"
CONFIG_DIR = Path.home() / f".{APP_NAME}"
DEFAULT_DATA_PATH = str(CONFIG_DIR / "backup.json")
LOG_LEVEL = os.environ.get("STUDY_PLANNER_LOG_LEVEL", "WARNING").upper()

# Knowledge score: difficulty 1 (easy) -> 100, 5 (hard) -> 0
MAX_DIFFICULTY = 5
SCORE_DIFFICULTY_WEIGHT = 0.35
SCORE_ACCURACY_WEIGHT = 0.65

# Tier cutoffs. Scores in (79, 80) land in no tier.
WEAK_MAX = 40
AVERAGE_MAX = 79
STRONG_MIN = 80

# Prediction
DEFAULT_INCORRECT_RATIO = 0.75
MARKS_CORRECT = 4
MARKS_INCORRECT = 1
MAX_TEST_MARKS = 720
DEFAULT_SUBJECT_QUESTIONS = 45

# Readiness (0-1000)
READINESS_WEIGHTS = {"completion": 35, "knowledge": 40, "consistency": 15, "test": 10}
RANK_TIERS = [
    (900, "Top 1,000"),
    (800, "Top 10,000"),
    (650, "Top 50,000"),
    (500, "Qualifying Range"),
]
LOWEST_RANK_TIER = "Needs Significant Improvement"
CONSISTENCY_WINDOW_DAYS = 30

# Momentum (0-100)
MOMENTUM_WINDOW_DAYS = 14
MOMENTUM_RATIO_CAP = 2
MOMENTUM_ACCURACY_WEIGHT = 0.5
MOMENTUM_TIME_WEIGHT = 0.5

# Mentor / insights
MENTOR_WEAK_SCORE = 60
MENTOR_RECENT_DAYS = 7
INSIGHTS_MIN_COMPLETED = 10
INSIGHTS_RECENT_DAYS = 14
BREAKTHROUGH_MIN_CHANGE = 5
CRITICAL_TOPIC_SCORE = 50
CRITICAL_IMPROVEMENT_SHARE = 0.15
ACCURACY_STREAK_MIN = 85


def get_data_path() -> str:
    """Return the export file to read, honouring STUDY_PLANNER_DATA."""
    return os.environ.get("STUDY_PLANNER_DATA", DEFAULT_DATA_PATH)
