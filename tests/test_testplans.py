# tests/test_testplans.py
from datetime import date

import pytest

from study_planner.models import COMPLETED, PRACTICE, REVISION, UPCOMING, TestPlanAnalysis
from study_planner.progress import calculate_progress
from study_planner.testplans import (
    build_topic_status, complete_test, create_test_plan, get_prediction_error, get_prep_time, log_topic_practice,
    log_topic_revision,
)


@pytest.fixture
def test_plan(small_syllabus):
    return create_test_plan(
        "Mock 1", "2025-04-10", {"Physics": ["Kinematics"], "Chemistry": ["Atomic Structure"]},
        total_questions=100, syllabus=small_syllabus,
    )


def test_topic_status_covers_every_microtopic(small_syllabus):
    topics = build_topic_status({"Physics": ["Optics"], "Biology": ["Cells"]}, small_syllabus)
    assert [(t.subject, t.chapter, t.microtopic) for t in topics] == [
        ("Physics", "Optics", "Reflection"),
        ("Physics", "Optics", "Refraction"),
    ]
    assert all(t.revision_difficulty is None and t.practice_attempts == [] for t in topics)


def test_create_test_plan(test_plan):
    assert test_plan.status == UPCOMING
    assert test_plan.analysis is None
    assert len(test_plan.topic_status) == 5
    assert test_plan.syllabus == {"Physics": ["Kinematics"], "Chemistry": ["Atomic Structure"]}


def test_log_revision_updates_topic_and_creates_task(test_plan):
    updated, task = log_topic_revision(test_plan, "Physics", "Kinematics", "M2", 2, on=date(2025, 4, 1))

    topic = updated.topic_status[1]
    assert topic.microtopic == "M2"
    assert topic.revision_difficulty == 2
    # original plan is left untouched
    assert test_plan.topic_status[1].revision_difficulty is None

    assert task.task_type == REVISION
    assert task.status == COMPLETED
    assert task.priority == "High"
    assert task.name == "Revise: M2"
    assert task.microtopics == ["M2"]
    assert task.date == "2025-04-01"
    assert task.difficulty == 2
    assert task.notes.startswith('Auto-generated from test preparation for "Mock 1".')
    assert "Difficulty: 2/5" in task.notes


@pytest.mark.parametrize("difficulty", [0, 6])
def test_log_revision_rejects_bad_difficulty(test_plan, difficulty):
    with pytest.raises(ValueError):
        log_topic_revision(test_plan, "Physics", "Kinematics", "M1", difficulty)


def test_log_revision_unknown_topic(test_plan):
    with pytest.raises(KeyError):
        log_topic_revision(test_plan, "Physics", "Optics", "Reflection", 3)


def test_log_practice_appends_attempt(test_plan):
    updated, first = log_topic_practice(test_plan, "Chemistry", "Atomic Structure", "Bohr Model", 20, 15, 3, 600)
    updated, second = log_topic_practice(updated, "Chemistry", "Atomic Structure", "Bohr Model", 10, 9, 1, 300)

    topic = next(t for t in updated.topic_status if t.microtopic == "Bohr Model")
    assert [a.total_questions for a in topic.practice_attempts] == [20, 10]
    assert first.task_type == PRACTICE
    assert (first.total_questions, first.correct_answers, first.incorrect_answers) == (20, 15, 3)
    assert "Accuracy: 75.0% (15/20)" in first.notes
    assert first.id != second.id
    assert get_prep_time(updated) == {REVISION: 0, PRACTICE: 900}


@pytest.mark.parametrize("total, correct, incorrect", [(10, 11, 0), (10, 6, 5), (-1, 0, 0), (10, -1, 0)])
def test_log_practice_rejects_bad_counts(test_plan, total, correct, incorrect):
    with pytest.raises(ValueError):
        log_topic_practice(test_plan, "Physics", "Kinematics", "M1", total, correct, incorrect)


def test_prep_tasks_feed_progress(test_plan, small_syllabus):
    test_plan, revision = log_topic_revision(test_plan, "Physics", "Kinematics", "M1", 1)
    test_plan, practice = log_topic_practice(test_plan, "Physics", "Kinematics", "M1", 10, 8, 2)
    stats = calculate_progress([revision, practice], small_syllabus)
    m1 = stats.subjects["Physics"].chapters["Kinematics"].microtopics["M1"]
    assert m1.completed == 2
    assert m1.avg_difficulty == 1
    assert m1.avg_accuracy == 80


def test_complete_test_freezes_snapshot_and_prediction(test_plan, small_syllabus):
    test_plan, revision = log_topic_revision(test_plan, "Physics", "Kinematics", "M1", 1)
    test_plan, practice = log_topic_practice(test_plan, "Physics", "Kinematics", "M2", 10, 6, 2, 1200)
    tasks = [revision, practice]

    done = complete_test(test_plan, TestPlanAnalysis(marks_obtained=250, total_marks=400), tasks, small_syllabus)

    assert done.status == COMPLETED
    assert done.is_analyzed
    assert done.analysis.progress_snapshot.completed == 2
    assert done.analysis.total_prep_time == 1200
    assert done.analysis.prep_time_by_category == {REVISION: 0, PRACTICE: 1200}
    # topics M1 (100) and M2 (60) average 80; half of the unresolved questions are wrong
    assert done.analysis.predicted_score == 310
    assert get_prediction_error(done) == -60
    # later tasks do not move the frozen snapshot
    tasks.append(practice)
    assert done.analysis.progress_snapshot.completed == 2


def test_prediction_error_needs_both_values(test_plan):
    assert get_prediction_error(test_plan) is None
    done = complete_test(test_plan, TestPlanAnalysis(), [])
    assert get_prediction_error(done) is None


def test_revision_time_counts_as_prep(test_plan, small_syllabus):
    test_plan, first = log_topic_revision(test_plan, "Physics", "Kinematics", "M1", 3, duration=600,
                                          on=date(2025, 4, 1))
    test_plan, _ = log_topic_revision(test_plan, "Physics", "Kinematics", "M1", 2, duration=300)
    test_plan, _ = log_topic_practice(test_plan, "Physics", "Kinematics", "M2", 10, 5, 0, 900)

    topic = test_plan.topic_status[0]
    assert topic.revision_difficulty == 2
    assert topic.revision_duration == 900
    assert get_prep_time(test_plan) == {REVISION: 900, PRACTICE: 900}
    assert first.total_duration == 600
    assert first.sessions[0].date == "2025-04-01"
    assert "Total Time Spent: 10m" in first.notes

    done = complete_test(test_plan, TestPlanAnalysis(), [first], small_syllabus)
    assert done.analysis.total_prep_time == 1800
    assert done.analysis.prep_time_by_category == {REVISION: 900, PRACTICE: 900}


def test_negative_prep_duration_rejected(test_plan):
    with pytest.raises(ValueError):
        log_topic_revision(test_plan, "Physics", "Kinematics", "M1", 3, duration=-1)
    with pytest.raises(ValueError):
        log_topic_practice(test_plan, "Physics", "Kinematics", "M1", 10, 5, 0, -60)
