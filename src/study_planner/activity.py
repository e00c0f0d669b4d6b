"""Study time rollups, active days and streaks."""
import logging
from collections import defaultdict
from datetime import date, timedelta
from typing import Iterable, Optional

from study_planner.config import ACCURACY_STREAK_MIN
from study_planner.models import PENDING, PRACTICE, SPACED_REVISION, Task
from study_planner.scoring import task_accuracy

logger = logging.getLogger(__name__)


def format_duration(seconds: float) -> str:
    if seconds < 1:
        return "0s"
    h = int(seconds // 3600)
    m = int(seconds % 3600 // 60)
    s = int(seconds % 60)
    parts = []
    if h > 0:
        parts.append(f"{h}h")
    if m > 0:
        parts.append(f"{m}m")
    if s > 0 or not parts:
        parts.append(f"{s}s")
    return " ".join(parts)


def format_duration_for_input(seconds: float) -> str:
    seconds = max(0, int(seconds))
    return f"{seconds // 3600:02d}:{seconds % 3600 // 60:02d}:{seconds % 60:02d}"


def parse_duration_from_input(text: str) -> int:
    """Parse HH:MM:SS into seconds; anything else is 0."""
    parts = text.split(":")
    if len(parts) != 3:
        return 0
    try:
        h, m, s = (int(p) for p in parts)
    except ValueError:
        return 0
    return h * 3600 + m * 60 + s


def _day(value: str) -> Optional[date]:
    try:
        return date.fromisoformat(value[:10])
    except (TypeError, ValueError):
        logger.debug("Ignoring unparseable date %r", value)
        return None


def days_ago(value: str, today: date) -> Optional[int]:
    """Whole days from `value` to `today`, None when `value` is not an ISO date."""
    day = _day(value)
    return None if day is None else (today - day).days


def get_daily_study_time(tasks: Iterable[Task]) -> dict[str, int]:
    totals = defaultdict(int)
    for task in tasks:
        for session in task.sessions:
            day = _day(session.date)
            if day is not None:
                totals[day.isoformat()] += session.duration
    return dict(totals)


def calculate_study_time_stats(tasks: Iterable[Task]) -> dict:
    """Session time per day, per week (Monday start) and per month, oldest first."""
    daily = sorted(get_daily_study_time(tasks).items())
    weekly = defaultdict(int)
    monthly = defaultdict(int)
    for day, total in daily:
        d = date.fromisoformat(day)
        weekly[(d - timedelta(days=d.weekday())).isoformat()] += total
        monthly[day[:7] + "-01"] += total
    return {
        "daily": [{"date": d, "total_time": t} for d, t in daily],
        "weekly": [{"week": w, "total_time": t} for w, t in sorted(weekly.items())],
        "monthly": [{"month": m, "total_time": t} for m, t in sorted(monthly.items())],
    }


def active_days(tasks: Iterable[Task], today: date, window: int) -> int:
    """Distinct days with logged study time within the last `window` days."""
    ages = (days_ago(day, today) for day in get_daily_study_time(tasks))
    return sum(1 for age in ages if age is not None and 0 <= age < window)


def _streak(days: Iterable[str], today: date) -> int:
    """Length of the run of consecutive days ending today or yesterday."""
    unique = sorted({d for d in map(_day, days) if d is not None})
    if not unique or (today - unique[-1]).days not in (0, 1):
        return 0
    streak = 1
    for current, previous in zip(reversed(unique), reversed(unique[:-1])):
        if (current - previous).days != 1:
            break
        streak += 1
    return streak


def consistency_streak(tasks: Iterable[Task], today: date) -> int:
    """Consecutive days with study sessions on completed tasks."""
    return _streak(
        (s.date for t in tasks if t.is_completed for s in t.sessions), today
    )


def _fully_completed_days(tasks: Iterable[Task]) -> list[str]:
    by_date = defaultdict(list)
    for task in tasks:
        if task.date:
            by_date[task.date].append(task)
    return [d for d, day_tasks in by_date.items() if all(t.is_completed for t in day_tasks)]


def completion_streak(tasks: Iterable[Task], today: date) -> int:
    """Consecutive days on which every planned task was completed."""
    return _streak(_fully_completed_days(tasks), today)


def revision_streak(tasks: Iterable[Task], today: date) -> int:
    """Consecutive days on which every spaced revision was completed."""
    return _streak(_fully_completed_days(t for t in tasks if t.task_type == SPACED_REVISION), today)


def accuracy_streak(tasks: Iterable[Task], threshold: float = ACCURACY_STREAK_MIN) -> int:
    """Most recent run of completed practice tasks at or above the accuracy threshold."""
    practice = sorted(
        (t for t in tasks if t.is_completed and t.task_type == PRACTICE and t.total_questions),
        key=lambda t: t.date,
    )
    streak = 0
    for task in reversed(practice):
        accuracy = task_accuracy(task.total_questions, task.correct_answers)
        if accuracy is None or accuracy < threshold:
            break
        streak += 1
    return streak


def get_streaks(tasks: list[Task], today: Optional[date] = None) -> dict[str, int]:
    today = today or date.today()
    return {
        "consistency": consistency_streak(tasks, today),
        "completion": completion_streak(tasks, today),
        "revision": revision_streak(tasks, today),
        "accuracy": accuracy_streak(tasks),
    }


def overdue_revisions(tasks: Iterable[Task], today: Optional[date] = None) -> list[Task]:
    """Pending spaced revisions dated before today, oldest first."""
    today = today or date.today()
    overdue = [
        t for t in tasks
        if t.task_type == SPACED_REVISION and t.status == PENDING and (days_ago(t.date, today) or 0) > 0
    ]
    return sorted(overdue, key=lambda t: t.date)
