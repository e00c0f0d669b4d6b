"""Predicted marks for a test from current topic mastery."""
import logging

from study_planner.config import DEFAULT_INCORRECT_RATIO, MARKS_CORRECT, MARKS_INCORRECT
from study_planner.models import TestPlan
from study_planner.progress import ProgressStats, get_microtopic_stats
from study_planner.scoring import calc_overall_score, round_half_up

logger = logging.getLogger(__name__)


def calc_incorrect_ratio(stats: ProgressStats) -> float:
    """Share of unresolved questions that were answered wrong rather than skipped."""
    unresolved = stats.total_incorrect + stats.total_skipped
    if unresolved == 0:
        return DEFAULT_INCORRECT_RATIO
    return stats.total_incorrect / unresolved


def predict_test_score(test: TestPlan, stats: ProgressStats) -> int:
    """Estimate marks under +4/-1 marking from the scores of the test's topics.

    Returns 0 when the test has no question count or none of its topics has a
    completed, scored task.
    """
    if not test.total_questions:
        return 0

    incorrect_ratio = calc_incorrect_ratio(stats)
    total_score = 0.0
    scored = 0
    for topic in test.topic_status:
        microtopic = get_microtopic_stats(stats, topic.subject, topic.chapter, topic.microtopic)
        if microtopic is None or microtopic.completed == 0:
            continue
        score = calc_overall_score(microtopic.avg_difficulty, microtopic.avg_accuracy)
        if score > 0:
            total_score += score
            scored += 1

    if scored == 0:
        logger.debug("No scored topics for test %s; predicting 0", test.id)
        return 0

    correct_probability = total_score / scored / 100
    predicted_correct = test.total_questions * correct_probability
    predicted_incorrect = (test.total_questions - predicted_correct) * incorrect_ratio
    marks = predicted_correct * MARKS_CORRECT - predicted_incorrect * MARKS_INCORRECT
    return round_half_up(max(0.0, marks))
