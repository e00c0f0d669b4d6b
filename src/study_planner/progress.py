"""Progress aggregation: fold tasks into a subject > chapter > microtopic stats tree."""
import logging
from dataclasses import dataclass, field
from functools import reduce
from typing import Iterator, Optional

from study_planner.models import PRACTICE, TASK_TYPES, Task
from study_planner.scoring import task_accuracy
from study_planner.syllabus import SYLLABUS, Syllabus

logger = logging.getLogger(__name__)


def _empty_time_by_category() -> dict[str, float]:
    return {task_type: 0 for task_type in TASK_TYPES}


@dataclass
class StatsNode:
    """Counters and samples shared by every level of the tree."""
    total: int = 0
    completed: int = 0
    completion_rate: float = 0.0
    avg_difficulty: float = 0.0
    avg_accuracy: Optional[float] = None
    difficulties: list[float] = field(default_factory=list)
    accuracies: list[float] = field(default_factory=list)
    total_time: float = 0
    total_questions: float = 0
    total_correct: float = 0
    total_incorrect: float = 0
    total_skipped: float = 0

    def add_samples(self, difficulty: Optional[int], accuracy: Optional[float]) -> None:
        if difficulty:
            self.difficulties.append(difficulty)
        if accuracy is not None:
            self.accuracies.append(accuracy)

    def add_questions(self, total: int, correct: int, incorrect: int, skipped: int, share: float = 1) -> None:
        self.total_questions += total * share
        self.total_correct += correct * share
        if incorrect > 0:
            self.total_incorrect += incorrect * share
        if skipped > 0:
            self.total_skipped += skipped * share

    def finalize(self) -> None:
        """Derive rates and means from the accumulated counts and samples."""
        self.completion_rate = self.completed / self.total * 100 if self.total > 0 else 0.0
        self.avg_difficulty = (
            sum(self.difficulties) / len(self.difficulties) if self.difficulties else 0.0
        )
        self.avg_accuracy = (
            sum(self.accuracies) / len(self.accuracies) if self.accuracies else None
        )


@dataclass
class MicrotopicStats(StatsNode):
    pass


@dataclass
class ChapterStats(StatsNode):
    microtopics: dict[str, MicrotopicStats] = field(default_factory=dict)


@dataclass
class SubjectStats(StatsNode):
    chapters: dict[str, ChapterStats] = field(default_factory=dict)
    time_by_category: dict[str, float] = field(default_factory=_empty_time_by_category)


@dataclass
class ProgressStats(StatsNode):
    subjects: dict[str, SubjectStats] = field(default_factory=dict)
    time_by_category: dict[str, float] = field(default_factory=_empty_time_by_category)
    total_time_studied: float = 0

    @property
    def total_tasks(self) -> int:
        return self.total

    @property
    def completed_tasks(self) -> int:
        return self.completed


def empty_progress(syllabus: Syllabus = SYLLABUS) -> ProgressStats:
    """Stats tree with a zeroed node for every subject, chapter and microtopic."""
    return ProgressStats(subjects={
        subject: SubjectStats(chapters={
            chapter: ChapterStats(microtopics={m: MicrotopicStats() for m in microtopics})
            for chapter, microtopics in chapters.items()
        })
        for subject, chapters in syllabus.items()
    })


def _practice_counts(task: Task) -> Optional[tuple[int, int, int, int]]:
    if task.task_type != PRACTICE or task.total_questions is None or task.correct_answers is None:
        return None
    incorrect = task.incorrect_answers or 0
    skipped = task.total_questions - (task.correct_answers + incorrect)
    return task.total_questions, task.correct_answers, incorrect, skipped


def _fold_task(stats: ProgressStats, task: Task) -> ProgressStats:
    # Legacy tasks without microtopics are not counted anywhere
    if not task.microtopics:
        return stats
    subject = stats.subjects.get(task.subject)
    chapter = subject.chapters.get(task.chapter) if subject else None
    if chapter is None:
        logger.debug("Dropping task %s: unknown %s > %s", task.id, task.subject, task.chapter)
        return stats

    # Subject, chapter and global count the task once
    for node in (stats, subject, chapter):
        node.total += 1

    completed = task.is_completed
    duration = task.total_duration
    accuracy = task_accuracy(task.total_questions, task.correct_answers)
    counts = _practice_counts(task)

    if completed:
        stats.time_by_category[task.task_type] = stats.time_by_category.get(task.task_type, 0) + duration
        subject.time_by_category[task.task_type] = subject.time_by_category.get(task.task_type, 0) + duration
        for node in (stats, subject, chapter):
            node.completed += 1
            node.add_samples(task.difficulty, accuracy)
            if counts:
                node.add_questions(*counts)
        subject.total_time += duration
        chapter.total_time += duration

    # Each microtopic counts the task once more; time and questions are shared out
    share = 1 / len(task.microtopics)
    for name in task.microtopics:
        microtopic = chapter.microtopics.get(name)
        if microtopic is None:
            logger.debug("Task %s names unknown microtopic %r", task.id, name)
            continue
        microtopic.total += 1
        if completed:
            microtopic.completed += 1
            microtopic.total_time += duration * share
            microtopic.add_samples(task.difficulty, accuracy)
            if counts:
                microtopic.add_questions(*counts, share=share)
    return stats


def _finalize(stats: ProgressStats) -> ProgressStats:
    for subject in stats.subjects.values():
        for chapter in subject.chapters.values():
            for microtopic in chapter.microtopics.values():
                microtopic.finalize()
            chapter.finalize()
        subject.finalize()
    stats.finalize()
    stats.total_time = stats.total_time_studied = sum(s.total_time for s in stats.subjects.values())
    return stats


def calculate_progress(tasks: list[Task], syllabus: Syllabus = SYLLABUS) -> ProgressStats:
    """Aggregate tasks into a fresh ProgressStats tree seeded from the syllabus.

    The result is recomputed from scratch on every call; inputs are not modified.
    """
    return _finalize(reduce(_fold_task, tasks, empty_progress(syllabus)))


def get_microtopic_stats(
    stats: ProgressStats, subject: str, chapter: str, microtopic: str
) -> Optional[MicrotopicStats]:
    subject_stats = stats.subjects.get(subject)
    chapter_stats = subject_stats.chapters.get(chapter) if subject_stats else None
    if chapter_stats is None:
        return None
    return chapter_stats.microtopics.get(microtopic)


def iter_microtopic_stats(
    stats: ProgressStats, subject: Optional[str] = None
) -> Iterator[tuple[str, str, str, MicrotopicStats]]:
    """Yield (subject, chapter, microtopic, stats) for every microtopic in the tree."""
    for subject_name, subject_stats in stats.subjects.items():
        if subject is not None and subject_name != subject:
            continue
        for chapter_name, chapter_stats in subject_stats.chapters.items():
            for microtopic_name, microtopic_stats in chapter_stats.microtopics.items():
                yield subject_name, chapter_name, microtopic_name, microtopic_stats
