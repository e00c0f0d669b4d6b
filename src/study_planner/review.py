"""Weak area identification: weak / average / strong topic tiers."""
from typing import Iterable, Mapping, NamedTuple, Optional

from study_planner.config import AVERAGE_MAX, MENTOR_WEAK_SCORE, STRONG_MIN, WEAK_MAX
from study_planner.models import AnalyzedTopic
from study_planner.progress import MicrotopicStats, ProgressStats, get_microtopic_stats, iter_microtopic_stats
from study_planner.scoring import calc_overall_score


class TopicTiers(NamedTuple):
    weak: list[AnalyzedTopic]
    average: list[AnalyzedTopic]
    strong: list[AnalyzedTopic]


def is_scorable(stats: MicrotopicStats) -> bool:
    """A microtopic has at least one completed task and one usable signal."""
    return stats.completed > 0 and (stats.avg_difficulty > 0 or stats.avg_accuracy is not None)


def analyze_topic(subject: str, chapter: str, microtopic: str, stats: MicrotopicStats) -> AnalyzedTopic:
    return AnalyzedTopic(
        subject=subject,
        chapter=chapter,
        microtopic=microtopic,
        avg_difficulty=stats.avg_difficulty,
        avg_accuracy=stats.avg_accuracy,
        tasks_completed=stats.completed,
        overall_score=calc_overall_score(stats.avg_difficulty, stats.avg_accuracy),
    )


def partition_topics(topics: Iterable[AnalyzedTopic]) -> TopicTiers:
    """Split topics by score: weak <= 40 < average <= 79, strong >= 80.

    Weak and average are sorted worst first, strong best first. Scores between
    79 and 80 fall in no tier.
    """
    topics = list(topics)
    weak = sorted((t for t in topics if t.overall_score <= WEAK_MAX), key=lambda t: t.overall_score)
    average = sorted(
        (t for t in topics if WEAK_MAX < t.overall_score <= AVERAGE_MAX), key=lambda t: t.overall_score
    )
    strong = sorted(
        (t for t in topics if t.overall_score >= STRONG_MIN), key=lambda t: t.overall_score, reverse=True
    )
    return TopicTiers(weak, average, strong)


def classify_topics(coverage: Mapping[str, list[str]], stats: ProgressStats) -> TopicTiers:
    """Classify every scorable microtopic under the covered chapters."""
    topics = []
    for subject, chapters in coverage.items():
        subject_stats = stats.subjects.get(subject)
        if subject_stats is None:
            continue
        for chapter in chapters or []:
            chapter_stats = subject_stats.chapters.get(chapter)
            if chapter_stats is None:
                continue
            for microtopic, microtopic_stats in chapter_stats.microtopics.items():
                if is_scorable(microtopic_stats):
                    topics.append(analyze_topic(subject, chapter, microtopic, microtopic_stats))
    return partition_topics(topics)


def classify_subject_topics(stats: ProgressStats, subject: str) -> TopicTiers:
    """Classify every scorable microtopic of one subject."""
    return partition_topics(
        analyze_topic(s, c, m, ms)
        for s, c, m, ms in iter_microtopic_stats(stats, subject)
        if is_scorable(ms)
    )


def get_scored_topics(stats: ProgressStats, subject: Optional[str] = None) -> list[AnalyzedTopic]:
    """Analyzed microtopics with a completed task and a non-zero score."""
    topics = []
    for s, c, m, ms in iter_microtopic_stats(stats, subject):
        if ms.completed > 0:
            topic = analyze_topic(s, c, m, ms)
            if topic.overall_score > 0:
                topics.append(topic)
    return topics


def get_subject_scores(stats: ProgressStats) -> dict[str, Optional[float]]:
    """Mean knowledge score per subject, None where nothing is scored yet."""
    scores = {}
    for subject in stats.subjects:
        topics = get_scored_topics(stats, subject)
        scores[subject] = sum(t.overall_score for t in topics) / len(topics) if topics else None
    return scores


def get_weakest_subject(stats: ProgressStats) -> Optional[str]:
    scored = {s: v for s, v in get_subject_scores(stats).items() if v is not None}
    if not scored:
        return None
    return min(scored, key=scored.get)


def get_weak_topics(stats: ProgressStats, subject: str, limit: int = 3) -> list[dict]:
    """Weakest topics of a subject below the mentor threshold, with the reason."""
    results = []
    for topic in get_scored_topics(stats, subject):
        if topic.overall_score >= MENTOR_WEAK_SCORE:
            continue
        low_accuracy = topic.avg_accuracy is not None and topic.avg_accuracy < MENTOR_WEAK_SCORE
        results.append({
            "name": topic.microtopic,
            "chapter": topic.chapter,
            "score": topic.overall_score,
            "reason": "Low Accuracy" if low_accuracy else "High Difficulty",
        })
    results.sort(key=lambda r: r["score"])
    return results[:limit]


def get_topic_score(stats: ProgressStats, subject: str, chapter: str, microtopic: str) -> Optional[float]:
    microtopic_stats = get_microtopic_stats(stats, subject, chapter, microtopic)
    if microtopic_stats is None:
        return None
    return calc_overall_score(microtopic_stats.avg_difficulty, microtopic_stats.avg_accuracy)
