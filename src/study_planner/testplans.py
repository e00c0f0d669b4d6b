"""Test preparation workflow: topic status, prep logging and completion."""
import uuid
from dataclasses import replace
from datetime import date
from typing import Mapping, Optional

from study_planner.models import (
    COMPLETED, PRACTICE, REVISION, StudySession, Task, TestPlan, TestPlanAnalysis, TopicPracticeAttempt, TopicStatus,
)
from study_planner.predictor import predict_test_score
from study_planner.progress import calculate_progress
from study_planner.scoring import format_performance_summary
from study_planner.syllabus import SYLLABUS, Syllabus, iter_microtopics


def build_topic_status(coverage: Mapping[str, list[str]], syllabus: Syllabus = SYLLABUS) -> list[TopicStatus]:
    """One empty TopicStatus per microtopic under the covered chapters."""
    return [TopicStatus(subject=s, chapter=c, microtopic=m) for s, c, m in iter_microtopics(syllabus, coverage)]


def create_test_plan(
    name: str,
    test_date: str,
    coverage: Mapping[str, list[str]],
    total_questions: Optional[int] = None,
    syllabus: Syllabus = SYLLABUS,
) -> TestPlan:
    return TestPlan(
        id=str(uuid.uuid4()),
        name=name,
        date=test_date,
        syllabus={subject: list(chapters) for subject, chapters in coverage.items()},
        topic_status=build_topic_status(coverage, syllabus),
        total_questions=total_questions,
    )


def _topic_index(test: TestPlan, subject: str, chapter: str, microtopic: str) -> int:
    for i, topic in enumerate(test.topic_status):
        if (topic.subject, topic.chapter, topic.microtopic) == (subject, chapter, microtopic):
            return i
    raise KeyError(f"{subject} > {chapter} > {microtopic} is not covered by test {test.name!r}")


def _with_topic(test: TestPlan, index: int, topic: TopicStatus) -> TestPlan:
    topics = list(test.topic_status)
    topics[index] = topic
    return replace(test, topic_status=topics)


def _prep_task(
    test: TestPlan, topic: TopicStatus, task_type: str, on: date, duration: int, summary: str, **scores
) -> Task:
    label = "Revise" if task_type == REVISION else "Practice"
    return Task(
        id=str(uuid.uuid4()),
        name=f"{label}: {topic.microtopic}",
        subject=topic.subject,
        chapter=topic.chapter,
        microtopics=[topic.microtopic],
        task_type=task_type,
        date=on.isoformat(),
        status=COMPLETED,
        priority="High",
        notes=f'Auto-generated from test preparation for "{test.name}".' + summary,
        sessions=[StudySession(date=on.isoformat(), duration=duration)] if duration else [],
        **scores,
    )


def log_topic_revision(
    test: TestPlan,
    subject: str,
    chapter: str,
    microtopic: str,
    difficulty: int,
    duration: int = 0,
    on: Optional[date] = None,
) -> tuple[TestPlan, Task]:
    """Record a revision difficulty for a test topic.

    Returns the updated test and a completed Revision task to add to the task list.
    """
    if not 1 <= difficulty <= 5:
        raise ValueError(f"difficulty must be between 1 and 5, got {difficulty}")
    if duration < 0:
        raise ValueError(f"duration must not be negative, got {duration}")
    index = _topic_index(test, subject, chapter, microtopic)
    current = test.topic_status[index]
    topic = replace(
        current, revision_difficulty=difficulty, revision_duration=current.revision_duration + duration
    )
    task = _prep_task(
        test, topic, REVISION, on or date.today(), duration,
        format_performance_summary(difficulty, None, None, duration),
        difficulty=difficulty,
    )
    return _with_topic(test, index, topic), task


def log_topic_practice(
    test: TestPlan,
    subject: str,
    chapter: str,
    microtopic: str,
    total: int,
    correct: int,
    incorrect: int = 0,
    duration: int = 0,
    on: Optional[date] = None,
) -> tuple[TestPlan, Task]:
    """Record a practice attempt for a test topic.

    Returns the updated test and a completed Practice task to add to the task list.
    """
    if total < 0 or correct < 0 or incorrect < 0 or duration < 0 or correct + incorrect > total:
        raise ValueError(f"invalid practice: total={total} correct={correct} incorrect={incorrect} duration={duration}")
    index = _topic_index(test, subject, chapter, microtopic)
    current = test.topic_status[index]
    attempt = TopicPracticeAttempt(
        id=str(uuid.uuid4()),
        total_questions=total,
        correct_answers=correct,
        incorrect_answers=incorrect,
        duration=duration,
    )
    topic = replace(current, practice_attempts=current.practice_attempts + [attempt])
    task = _prep_task(
        test, topic, PRACTICE, on or date.today(), duration,
        format_performance_summary(None, total, correct, duration, incorrect),
        total_questions=total,
        correct_answers=correct,
        incorrect_answers=incorrect,
    )
    return _with_topic(test, index, topic), task


def get_prep_time(test: TestPlan) -> dict[str, int]:
    """Seconds of logged revision and practice across the test's topics."""
    revision = sum(t.revision_duration for t in test.topic_status)
    practice = sum(a.duration for t in test.topic_status for a in t.practice_attempts)
    return {REVISION: revision, PRACTICE: practice}


def complete_test(
    test: TestPlan, analysis: TestPlanAnalysis, tasks: list[Task], syllabus: Syllabus = SYLLABUS
) -> TestPlan:
    """Mark a test completed, freezing the current progress and prediction into its analysis."""
    snapshot = calculate_progress(tasks, syllabus)
    prep_time = get_prep_time(test)
    frozen = replace(
        analysis,
        progress_snapshot=snapshot,
        predicted_score=predict_test_score(test, snapshot),
        total_prep_time=sum(prep_time.values()),
        prep_time_by_category=prep_time,
    )
    return replace(test, status=COMPLETED, analysis=frozen)


def get_prediction_error(test: TestPlan) -> Optional[float]:
    """Actual minus predicted marks for a completed test, None when either is missing."""
    if not test.is_analyzed:
        return None
    if test.analysis.marks_obtained is None or test.analysis.predicted_score is None:
        return None
    return test.analysis.marks_obtained - test.analysis.predicted_score
