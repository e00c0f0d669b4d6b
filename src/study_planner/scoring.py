"""Knowledge score function and score presentation helpers."""
import math
from typing import Optional

from study_planner.config import (
    AVERAGE_MAX, MAX_DIFFICULTY, SCORE_ACCURACY_WEIGHT, SCORE_DIFFICULTY_WEIGHT, WEAK_MAX,
)


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives, matching the browser app's Math.round."""
    return int(math.floor(value + 0.5))


def normalize_difficulty(avg_difficulty: float) -> float:
    """Map difficulty 1 (easiest) -> 100 and 5 (hardest) -> 0."""
    return (MAX_DIFFICULTY - avg_difficulty) / (MAX_DIFFICULTY - 1) * 100


def calc_overall_score(avg_difficulty: float, avg_accuracy: Optional[float]) -> float:
    """Blend average difficulty and accuracy into a 0-100 knowledge score.

    Args:
        avg_difficulty: Mean difficulty in [1, 5], or 0 when there is no data.
        avg_accuracy: Mean accuracy percentage, or None when there is no data.

    Returns:
        The blended score. 0 means "no data" when neither signal is present;
        callers must exclude those from rankings.
    """
    has_difficulty = avg_difficulty > 0
    has_accuracy = avg_accuracy is not None

    if has_difficulty and has_accuracy:
        return (normalize_difficulty(avg_difficulty) * SCORE_DIFFICULTY_WEIGHT
                + avg_accuracy * SCORE_ACCURACY_WEIGHT)
    elif has_difficulty:
        return normalize_difficulty(avg_difficulty)
    elif has_accuracy:
        return avg_accuracy
    return 0.0


def task_accuracy(total_questions: Optional[int], correct_answers: Optional[int]) -> Optional[float]:
    """Accuracy percentage of a practice record, None when it can't be computed."""
    if total_questions is None or correct_answers is None or total_questions <= 0:
        return None
    return correct_answers / total_questions * 100


def get_score_label(score: float) -> str:
    if score <= WEAK_MAX:
        return "Weak"
    elif score <= AVERAGE_MAX:
        return "Average"
    return "Strong"


def get_score_color(score: float) -> str:
    if score <= WEAK_MAX:
        return "red"
    elif score <= AVERAGE_MAX:
        return "yellow"
    return "green"


def format_performance_summary(
    difficulty: Optional[int],
    total_questions: Optional[int],
    correct_answers: Optional[int],
    duration: Optional[int] = None,
    incorrect_answers: Optional[int] = None,
) -> str:
    """Text block appended to the notes of auto-generated tasks."""
    from study_planner.activity import format_duration

    accuracy = task_accuracy(total_questions, correct_answers)
    score = calc_overall_score(difficulty or 0, accuracy)

    lines = ["", "", "--- Performance Metrics ---"]
    if duration:
        lines.append(f"Total Time Spent: {format_duration(duration)}")
    lines.append(f"Difficulty: {f'{difficulty}/5' if difficulty else 'N/A'}")
    if accuracy is not None:
        lines.append(f"Accuracy: {accuracy:.1f}% ({correct_answers}/{total_questions})")
    else:
        lines.append("Accuracy: N/A")

    incorrect = incorrect_answers or 0
    skipped = 0
    if total_questions is not None and correct_answers is not None:
        skipped = total_questions - (correct_answers + incorrect)
    if incorrect > 0:
        lines.append(f"Incorrect Answers: {incorrect}")
    if skipped > 0:
        lines.append(f"Skipped Answers: {skipped}")
    lines.append(f"Weighted Score: {round_half_up(score)}/100")
    return "\n".join(lines)
