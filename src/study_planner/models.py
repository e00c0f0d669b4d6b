"""Data classes for the study planner domain model."""
from dataclasses import dataclass, field
from typing import Optional

SUBJECTS = ("Physics", "Chemistry", "Botany", "Zoology")

LECTURE = "Lecture"
REVISION = "Revision"
PRACTICE = "Practice"
SPACED_REVISION = "SpacedRevision"
TASK_TYPES = (LECTURE, REVISION, PRACTICE, SPACED_REVISION)

PENDING = "Pending"
COMPLETED = "Completed"

UPCOMING = "Upcoming"


@dataclass
class StudySession:
    date: str  # ISO timestamp
    duration: int  # seconds


@dataclass
class Task:
    id: str
    name: str
    subject: str
    chapter: str
    microtopics: list[str] = field(default_factory=list)
    task_type: str = LECTURE
    date: str = ""  # YYYY-MM-DD
    status: str = PENDING
    priority: str = "Medium"
    difficulty: Optional[int] = None  # 1-5
    total_questions: Optional[int] = None
    correct_answers: Optional[int] = None
    incorrect_answers: Optional[int] = None
    notes: str = ""
    sessions: list[StudySession] = field(default_factory=list)
    original_date: Optional[str] = None
    source_lecture_task_id: Optional[str] = None
    revision_day: Optional[int] = None

    @property
    def is_completed(self) -> bool:
        return self.status == COMPLETED

    @property
    def total_duration(self) -> int:
        return sum(s.duration for s in self.sessions)


@dataclass
class TopicPracticeAttempt:
    id: str
    total_questions: int
    correct_answers: int
    incorrect_answers: int = 0
    duration: int = 0


@dataclass
class TopicStatus:
    subject: str
    chapter: str
    microtopic: str
    revision_difficulty: Optional[int] = None
    revision_duration: int = 0  # seconds
    practice_attempts: list[TopicPracticeAttempt] = field(default_factory=list)


@dataclass
class SubjectTestPerformance:
    total_questions: int
    correct: int
    incorrect: int
    skipped: int
    score: float


@dataclass
class TestPlanAnalysis:
    notes: str = ""
    marks_obtained: Optional[float] = None
    total_marks: Optional[float] = None
    rank: Optional[int] = None
    percentile: Optional[float] = None
    total_prep_time: Optional[int] = None
    prep_time_by_category: Optional[dict] = None
    test_duration: Optional[int] = None
    subject_wise_performance: dict[str, SubjectTestPerformance] = field(default_factory=dict)
    progress_snapshot: Optional[object] = None  # ProgressStats
    predicted_score: Optional[int] = None

    __test__ = False

    @property
    def percentage(self) -> Optional[float]:
        if self.marks_obtained is None or not self.total_marks:
            return None
        return self.marks_obtained / self.total_marks * 100


@dataclass
class TestPlan:
    id: str
    name: str
    date: str  # YYYY-MM-DD
    syllabus: dict[str, list[str]] = field(default_factory=dict)  # subject -> chapters
    topic_status: list[TopicStatus] = field(default_factory=list)
    status: str = UPCOMING
    analysis: Optional[TestPlanAnalysis] = None
    total_questions: Optional[int] = None

    __test__ = False

    @property
    def is_analyzed(self) -> bool:
        return self.status == COMPLETED and self.analysis is not None


@dataclass
class AnalyzedTopic:
    subject: str
    chapter: str
    microtopic: str
    avg_difficulty: float
    avg_accuracy: Optional[float]
    tasks_completed: int
    overall_score: float


@dataclass
class ExportData:
    tasks: list[Task] = field(default_factory=list)
    test_plans: list[TestPlan] = field(default_factory=list)
    version: str = ""
