# tests/test_predictor.py
import pytest

from study_planner.models import PENDING, REVISION, TestPlan
from study_planner.predictor import calc_incorrect_ratio, predict_test_score
from study_planner.progress import calculate_progress
from study_planner.testplans import build_topic_status


def _test_plan(syllabus, coverage, total_questions):
    return TestPlan(
        id="test-1",
        name="Unit Test",
        date="2025-04-10",
        syllabus=coverage,
        topic_status=build_topic_status(coverage, syllabus),
        total_questions=total_questions,
    )


def test_default_ratio_without_practice_history(small_syllabus, task_factory):
    tasks = [
        task_factory(microtopics=["M1"], task_type=REVISION, difficulty=1),
        task_factory(microtopics=["M2"], task_type=REVISION, difficulty=3),
    ]
    stats = calculate_progress(tasks, small_syllabus)
    assert stats.total_incorrect == 0 and stats.total_skipped == 0
    assert calc_incorrect_ratio(stats) == 0.75

    test = _test_plan(small_syllabus, {"Physics": ["Kinematics"]}, 180)
    # mean score 75 -> 135 correct, 45 unresolved of which 75% wrong
    correct = 180 * 0.75
    incorrect = (180 - correct) * 0.75
    assert predict_test_score(test, stats) == round(correct * 4 - incorrect) == 506


def test_ratio_from_practice_history(small_syllabus, task_factory):
    task = task_factory(microtopics=["M1"], total_questions=10, correct_answers=6, incorrect_answers=2)
    stats = calculate_progress([task], small_syllabus)
    assert calc_incorrect_ratio(stats) == pytest.approx(0.5)

    test = _test_plan(small_syllabus, {"Physics": ["Kinematics"]}, 100)
    # score 60 -> 60 correct, 40 unresolved, half of them wrong
    assert predict_test_score(test, stats) == 220


def test_prediction_never_negative(small_syllabus, task_factory):
    task = task_factory(microtopics=["M1"], total_questions=20, correct_answers=1, incorrect_answers=19)
    stats = calculate_progress([task], small_syllabus)
    test = _test_plan(small_syllabus, {"Physics": ["Kinematics"]}, 100)
    assert predict_test_score(test, stats) == 0


def test_zero_without_question_count(small_syllabus, task_factory):
    stats = calculate_progress([task_factory(difficulty=1)], small_syllabus)
    assert predict_test_score(_test_plan(small_syllabus, {"Physics": ["Kinematics"]}, None), stats) == 0
    assert predict_test_score(_test_plan(small_syllabus, {"Physics": ["Kinematics"]}, 0), stats) == 0


def test_zero_without_completed_topics(small_syllabus, task_factory):
    tasks = [
        task_factory(microtopics=["M1"], status=PENDING, difficulty=1),
        task_factory(chapter="Optics", microtopics=["Reflection"], difficulty=1),
    ]
    stats = calculate_progress(tasks, small_syllabus)
    assert predict_test_score(_test_plan(small_syllabus, {"Physics": ["Kinematics"]}, 90), stats) == 0


def test_zero_score_topics_are_not_averaged(small_syllabus, task_factory):
    tasks = [
        task_factory(microtopics=["M1"], task_type=REVISION, difficulty=1),
        task_factory(microtopics=["M2"], task_type=REVISION),
    ]
    stats = calculate_progress(tasks, small_syllabus)
    test = _test_plan(small_syllabus, {"Physics": ["Kinematics"]}, 50)
    # only M1 (score 100) counts, so every question is predicted correct
    assert predict_test_score(test, stats) == 200


def test_prediction_tracks_current_stats(small_syllabus, task_factory):
    test = _test_plan(small_syllabus, {"Physics": ["Kinematics"]}, 100)
    before = calculate_progress([task_factory(task_type=REVISION, difficulty=3)], small_syllabus)
    after = calculate_progress([task_factory(task_type=REVISION, difficulty=1)], small_syllabus)
    assert predict_test_score(test, after) > predict_test_score(test, before)
