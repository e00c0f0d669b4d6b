"""Mentor daily report and past / present / future insights."""
import math
from collections import defaultdict
from datetime import date
from typing import Iterable, Optional

from study_planner.activity import active_days, days_ago, get_daily_study_time
from study_planner.config import (
    BREAKTHROUGH_MIN_CHANGE, CRITICAL_IMPROVEMENT_SHARE, CRITICAL_TOPIC_SCORE, DEFAULT_SUBJECT_QUESTIONS,
    INSIGHTS_MIN_COMPLETED, INSIGHTS_RECENT_DAYS, MARKS_CORRECT, MARKS_INCORRECT, MAX_TEST_MARKS,
    MENTOR_RECENT_DAYS,
)
from study_planner.models import PRACTICE, Task, TestPlan
from study_planner.progress import ProgressStats, iter_microtopic_stats
from study_planner.review import get_topic_score, get_weak_topics, get_weakest_subject
from study_planner.scoring import calc_overall_score, task_accuracy
from study_planner.syllabus import SYLLABUS


def _recent_completed(tasks: list[Task], today: date, window: int) -> list[Task]:
    recent = []
    for task in tasks:
        if not task.is_completed:
            continue
        age = days_ago(task.date, today)
        if age is not None and 0 <= age <= window:
            recent.append(task)
    return recent


def get_last_test(test_plans: list[TestPlan]) -> Optional[TestPlan]:
    analyzed = [t for t in test_plans if t.is_analyzed]
    return max(analyzed, key=lambda t: t.date) if analyzed else None


def get_strongest_recent_topic(stats: ProgressStats, tasks: list[Task], today: date) -> Optional[dict]:
    best = None
    for task in _recent_completed(tasks, today, MENTOR_RECENT_DAYS):
        for name in task.microtopics:
            score = get_topic_score(stats, task.subject, task.chapter, name)
            if score is not None and score > 0 and (best is None or score > best["score"]):
                best = {"name": name, "score": score}
    return best


def get_mentor_report(
    stats: ProgressStats, tasks: list[Task], test_plans: list[TestPlan], today: Optional[date] = None
) -> dict:
    today = today or date.today()
    weakest = get_weakest_subject(stats)
    return {
        "weakest_subject": weakest,
        "weak_topics": get_weak_topics(stats, weakest) if weakest else [],
        "strongest_topic": get_strongest_recent_topic(stats, tasks, today),
        "active_days_last_7": active_days(tasks, today, MENTOR_RECENT_DAYS),
        "last_test": get_last_test(test_plans),
    }


def _task_score(task: Task) -> float:
    return calc_overall_score(task.difficulty or 0, task_accuracy(task.total_questions, task.correct_answers))


def _mean_task_score(tasks: list[Task]) -> Optional[float]:
    scores = [s for s in (_task_score(t) for t in tasks if t.is_completed) if s > 0]
    return sum(scores) / len(scores) if scores else None


def _group_by_chapter(tasks: list[Task]) -> dict[tuple[str, str], list[Task]]:
    groups = defaultdict(list)
    for task in tasks:
        groups[(task.subject, task.chapter)].append(task)
    return groups


def get_peak_days(tasks: list[Task], limit: int = 5) -> list[dict]:
    daily = get_daily_study_time(t for t in tasks if t.is_completed)
    ranked = sorted(daily.items(), key=lambda item: item[1], reverse=True)
    return [{"date": d, "duration": total} for d, total in ranked[:limit]]


def get_breakthroughs(tasks: list[Task], limit: int = 3) -> dict[str, list[dict]]:
    """Chapters whose mean task score rose between the older and newer half of completed tasks."""
    completed = sorted((t for t in tasks if t.is_completed), key=lambda t: t.date)
    middle = len(completed) // 2
    first, second = _group_by_chapter(completed[:middle]), _group_by_chapter(completed[middle:])

    improvements = defaultdict(list)
    for key in first:
        if key not in second:
            continue
        before, after = _mean_task_score(first[key]), _mean_task_score(second[key])
        if before is None or after is None:
            continue
        change = after - before
        if change > BREAKTHROUGH_MIN_CHANGE:
            improvements[key[0]].append({"chapter": key[1], "change": change})
    return {
        subject: sorted(items, key=lambda i: i["change"], reverse=True)[:limit]
        for subject, items in improvements.items()
    }


def get_most_practiced(tasks: list[Task], limit: int = 3) -> dict[str, list[dict]]:
    counts = defaultdict(lambda: defaultdict(int))
    for task in tasks:
        if task.is_completed and task.task_type == PRACTICE and task.total_questions:
            counts[task.subject][task.chapter] += task.total_questions
    return {
        subject: [
            {"chapter": c, "count": n}
            for c, n in sorted(chapters.items(), key=lambda i: i[1], reverse=True)[:limit]
        ]
        for subject, chapters in counts.items()
    }


def get_past_insights(tasks: list[Task]) -> Optional[dict]:
    if sum(1 for t in tasks if t.is_completed) < INSIGHTS_MIN_COMPLETED:
        return None
    return {
        "peak_days": get_peak_days(tasks),
        "breakthroughs": get_breakthroughs(tasks),
        "most_practiced": get_most_practiced(tasks),
    }


def get_critical_topic(stats: ProgressStats) -> Optional[dict]:
    """Lowest scoring completed microtopic under 50, preferring larger chapters on ties."""
    critical = None
    for subject, chapter, name, microtopic in iter_microtopic_stats(stats):
        if microtopic.completed == 0:
            continue
        score = calc_overall_score(microtopic.avg_difficulty, microtopic.avg_accuracy)
        if score >= CRITICAL_TOPIC_SCORE:
            continue
        size = len(stats.subjects[subject].chapters[chapter].microtopics)
        if critical is None or score < critical["score"] or (
            score == critical["score"] and size > critical["chapter_size"]
        ):
            critical = {"name": name, "chapter": chapter, "subject": subject, "score": score, "chapter_size": size}
    return critical


def get_present_insights(stats: ProgressStats, tasks: list[Task], today: Optional[date] = None) -> Optional[dict]:
    today = today or date.today()
    recent = _recent_completed(tasks, today, INSIGHTS_RECENT_DAYS)
    if not recent:
        return None

    subject_scores = defaultdict(list)
    for task in recent:
        if not task.microtopics:
            continue
        score = get_topic_score(stats, task.subject, task.chapter, task.microtopics[0])
        if score is not None:
            subject_scores[task.subject].append(score)
    strongest = None
    if subject_scores:
        name, scores = max(subject_scores.items(), key=lambda i: sum(i[1]) / len(i[1]))
        strongest = {"name": name, "score": sum(scores) / len(scores)}

    return {"strongest_subject": strongest, "critical_topic": get_critical_topic(stats)}


def get_future_insights(
    test_plans: list[TestPlan],
    critical_topic: Optional[dict],
    target_score: float,
    subjects: Iterable[str] = SYLLABUS,
) -> Optional[dict]:
    """Projected score after fixing the critical topic and a roadmap to the target."""
    last_test = get_last_test(test_plans)
    if last_test is None or critical_topic is None:
        return None

    analysis = last_test.analysis
    current = analysis.marks_obtained or 0
    projected = current
    perf = analysis.subject_wise_performance.get(critical_topic["subject"])
    if perf and perf.total_questions > 0:
        improved = math.ceil(perf.incorrect * CRITICAL_IMPROVEMENT_SHARE)
        projected = min(MAX_TEST_MARKS, current + improved * (MARKS_CORRECT + MARKS_INCORRECT))

    roadmap = []
    if target_score > current:
        gaps = []
        for subject in subjects:
            perf = analysis.subject_wise_performance.get(subject)
            max_marks = ((perf.total_questions if perf else 0) or DEFAULT_SUBJECT_QUESTIONS) * MARKS_CORRECT
            current_marks = perf.score if perf else 0
            gaps.append({
                "subject": subject,
                "potential_gain": max_marks - current_marks,
                "current_marks": current_marks,
                "max_marks": max_marks,
            })
        roadmap = sorted(gaps, key=lambda g: g["potential_gain"], reverse=True)[:3]

    return {"last_test_score": current, "projected_score": projected, "roadmap": roadmap}
