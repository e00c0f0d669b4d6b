"""Read exported planner data (JSON or YAML) into model objects."""
import json
import logging
from pathlib import Path
from typing import Any, Optional

import yaml

from study_planner.models import (
    PENDING, UPCOMING, ExportData, StudySession, SubjectTestPerformance, Task, TestPlan, TestPlanAnalysis,
    TopicPracticeAttempt, TopicStatus,
)

logger = logging.getLogger(__name__)


class ExportFormatError(ValueError):
    """The export file could not be understood."""


def read_file_content(file_path: str) -> Any:
    path = Path(file_path)
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    try:
        if suffix in (".yaml", ".yml"):
            return yaml.safe_load(text)
        return json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ExportFormatError(f"Could not parse {path.name}: {e}") from e


def _optional_int(value: Any) -> Optional[int]:
    return None if value is None else int(value)


def _optional_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


def parse_task(data: dict) -> Task:
    return Task(
        id=str(data["id"]),
        name=data.get("name", ""),
        subject=data["subject"],
        chapter=data["chapter"],
        microtopics=list(data.get("microtopics") or []),
        task_type=data.get("taskType", "Lecture"),
        date=data.get("date", ""),
        status=data.get("status", PENDING),
        priority=data.get("priority", "Medium"),
        difficulty=_optional_int(data.get("difficulty")),
        total_questions=_optional_int(data.get("totalQuestions")),
        correct_answers=_optional_int(data.get("correctAnswers")),
        incorrect_answers=_optional_int(data.get("incorrectAnswers")),
        notes=data.get("notes") or "",
        sessions=[
            StudySession(date=s["date"], duration=int(s.get("duration", 0)))
            for s in data.get("sessions") or []
        ],
        original_date=data.get("originalDate"),
        source_lecture_task_id=data.get("sourceLectureTaskId"),
        revision_day=_optional_int(data.get("revisionDay")),
    )


def parse_topic_status(data: dict) -> TopicStatus:
    return TopicStatus(
        subject=data["subject"],
        chapter=data["chapter"],
        microtopic=data["microtopic"],
        revision_difficulty=_optional_int(data.get("revisionDifficulty")),
        revision_duration=int(data.get("revisionDuration") or 0),
        practice_attempts=[
            TopicPracticeAttempt(
                id=str(a.get("id", "")),
                total_questions=int(a.get("totalQuestions", 0)),
                correct_answers=int(a.get("correctAnswers", 0)),
                incorrect_answers=int(a.get("incorrectAnswers") or 0),
                duration=int(a.get("duration") or 0),
            )
            for a in data.get("practiceAttempts") or []
        ],
    )


def parse_analysis(data: dict) -> TestPlanAnalysis:
    # Older exports only carry "score"
    marks = data.get("marksObtained", data.get("score"))
    return TestPlanAnalysis(
        notes=data.get("notes") or "",
        marks_obtained=_optional_float(marks),
        total_marks=_optional_float(data.get("totalMarks")),
        rank=_optional_int(data.get("rank")),
        percentile=_optional_float(data.get("percentile")),
        total_prep_time=_optional_int(data.get("totalPrepTime")),
        prep_time_by_category=data.get("prepTimeByCategory"),
        test_duration=_optional_int(data.get("testDuration")),
        subject_wise_performance={
            subject: SubjectTestPerformance(
                total_questions=int(p.get("totalQuestions", 0)),
                correct=int(p.get("correct", 0)),
                incorrect=int(p.get("incorrect", 0)),
                skipped=int(p.get("skipped", 0)),
                score=float(p.get("score", 0)),
            )
            for subject, p in (data.get("subjectWisePerformance") or {}).items()
        },
        predicted_score=_optional_int(data.get("predictedScore")),
    )


def parse_test_plan(data: dict) -> TestPlan:
    analysis = data.get("analysis")
    return TestPlan(
        id=str(data["id"]),
        name=data.get("name", ""),
        date=data.get("date", ""),
        syllabus={s: list(chapters or []) for s, chapters in (data.get("syllabus") or {}).items()},
        topic_status=[parse_topic_status(t) for t in data.get("topicStatus") or []],
        status=data.get("status", UPCOMING),
        analysis=parse_analysis(analysis) if analysis else None,
        total_questions=_optional_int(data.get("totalQuestions")),
    )


def _parse_records(records: list, parser, kind: str) -> list:
    parsed = []
    for record in records:
        try:
            parsed.append(parser(record))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.debug("Skipping malformed %s record: %r", kind, e)
    return parsed


def load_export(file_path: str) -> ExportData:
    """Load a {tasks, testPlans, version} export. Malformed records are skipped."""
    data = read_file_content(file_path)
    if not isinstance(data, dict) or not isinstance(data.get("tasks"), list):
        raise ExportFormatError(f"{Path(file_path).name} is not a planner export (missing 'tasks' list)")
    result = ExportData(
        tasks=_parse_records(data["tasks"], parse_task, "task"),
        test_plans=_parse_records(data.get("testPlans") or [], parse_test_plan, "test plan"),
        version=str(data.get("version", "")),
    )
    logger.debug("Loaded %d tasks and %d test plans from %s", len(result.tasks), len(result.test_plans), file_path)
    return result
