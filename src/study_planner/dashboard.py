"""Readiness and momentum scoring."""
from datetime import date
from typing import Optional

from study_planner.activity import active_days, days_ago
from study_planner.config import (
    CONSISTENCY_WINDOW_DAYS, LOWEST_RANK_TIER, MARKS_CORRECT, MOMENTUM_ACCURACY_WEIGHT,
    MOMENTUM_RATIO_CAP, MOMENTUM_TIME_WEIGHT, MOMENTUM_WINDOW_DAYS, RANK_TIERS, READINESS_WEIGHTS,
)
from study_planner.models import PRACTICE, Task, TestPlan
from study_planner.progress import ProgressStats
from study_planner.review import get_scored_topics
from study_planner.scoring import calc_overall_score, round_half_up


def get_rank_tier(score: int) -> str:
    for threshold, tier in RANK_TIERS:
        if score > threshold:
            return tier
    return LOWEST_RANK_TIER


def get_readiness_color(score: int) -> str:
    if score > 800:
        return "green"
    elif score > 650:
        return "yellow"
    elif score > 500:
        return "dark_orange"
    return "red"


def _knowledge_depth(stats: ProgressStats) -> float:
    topics = get_scored_topics(stats)
    if not topics:
        return 0.0
    return sum(t.overall_score for t in topics) / len(topics)


def _test_performance(test_plans: list[TestPlan]) -> Optional[float]:
    """Mean percentage over analyzed tests, a test without marks counting as 0."""
    analyzed = [t for t in test_plans if t.is_analyzed]
    if not analyzed:
        return None
    return sum(t.analysis.percentage or 0.0 for t in analyzed) / len(analyzed)


def calc_readiness_score(
    stats: ProgressStats, tasks: list[Task], test_plans: list[TestPlan], today: Optional[date] = None
) -> dict:
    """Composite 0-1000 readiness score and its components.

    Without analyzed tests the test weight is dropped and the remaining
    weights are renormalised.
    """
    today = today or date.today()
    completion = stats.completion_rate
    knowledge = _knowledge_depth(stats)
    consistency = min(100.0, active_days(tasks, today, CONSISTENCY_WINDOW_DAYS) / CONSISTENCY_WINDOW_DAYS * 100)
    test = _test_performance(test_plans)

    w = READINESS_WEIGHTS
    blend = (completion / 100 * w["completion"]
             + knowledge / 100 * w["knowledge"]
             + consistency / 100 * w["consistency"])
    if test is not None:
        blend += test / 100 * w["test"]
    else:
        blend = blend / (w["completion"] + w["knowledge"] + w["consistency"]) * 100

    score = round_half_up(blend * 10)
    return {
        "score": score,
        "tier": get_rank_tier(score),
        "syllabus_completion": completion,
        "knowledge_depth": knowledge,
        "consistency": consistency,
        "test_performance": test,
    }


def _capped_ratio(recent: float, past: float) -> float:
    if past > 0:
        return min(MOMENTUM_RATIO_CAP, recent / past)
    elif recent > 0:
        return MOMENTUM_RATIO_CAP
    return 1.0


def _split_windows(tasks: list[Task], today: date) -> tuple[list[Task], list[Task]]:
    recent, past = [], []
    for task in tasks:
        age = days_ago(task.date, today)
        if age is None:
            continue
        if 0 <= age <= MOMENTUM_WINDOW_DAYS:
            recent.append(task)
        elif MOMENTUM_WINDOW_DAYS < age <= 2 * MOMENTUM_WINDOW_DAYS:
            past.append(task)
    return recent, past


def _mean_practice_accuracy(tasks: list[Task]) -> float:
    practice = [
        t for t in tasks
        if t.task_type == PRACTICE and t.is_completed and t.total_questions and t.correct_answers is not None
    ]
    if not practice:
        return 0.0
    return sum(t.correct_answers / t.total_questions for t in practice) / len(practice)


def calc_momentum_score(tasks: list[Task], today: Optional[date] = None) -> float:
    """0-100 rate of improvement of the last 14 days over the 14 days before."""
    today = today or date.today()
    recent, past = _split_windows(tasks, today)
    accuracy_ratio = _capped_ratio(_mean_practice_accuracy(recent), _mean_practice_accuracy(past))
    time_ratio = _capped_ratio(
        sum(t.total_duration for t in recent), sum(t.total_duration for t in past)
    )
    score = ((accuracy_ratio - 1) * MOMENTUM_ACCURACY_WEIGHT + (time_ratio - 1) * MOMENTUM_TIME_WEIGHT) * 100
    return max(0.0, min(100.0, score))


def get_subject_metrics(stats: ProgressStats, test_plans: list[TestPlan]) -> dict[str, dict]:
    """Per-subject radar metrics, each on a 0-100 scale."""
    max_time = max([s.total_time for s in stats.subjects.values()] + [1])
    analyzed = [t for t in test_plans if t.is_analyzed]
    metrics = {}
    for name, subject in stats.subjects.items():
        percentages = []
        for test in analyzed:
            perf = test.analysis.subject_wise_performance.get(name)
            if perf and perf.total_questions > 0:
                percentages.append(perf.score / (perf.total_questions * MARKS_CORRECT) * 100)
        metrics[name] = {
            "completion": subject.completion_rate,
            "knowledge": calc_overall_score(subject.avg_difficulty, subject.avg_accuracy),
            "time_invested": subject.total_time / max_time * 100,
            "practice_accuracy": subject.avg_accuracy if subject.avg_accuracy is not None else 0.0,
            "test_performance": sum(percentages) / len(percentages) if percentages else 0.0,
        }
    return metrics


def get_study_stats(stats: ProgressStats, test_plans: list[TestPlan]) -> dict:
    accuracy = stats.total_correct / stats.total_questions * 100 if stats.total_questions else 0.0
    return {
        "tasks_total": stats.total,
        "tasks_completed": stats.completed,
        "time_studied": stats.total_time_studied,
        "questions_attempted": int(stats.total_questions),
        "practice_accuracy": round(accuracy, 1),
        "tests_completed": sum(1 for t in test_plans if t.is_analyzed),
    }
