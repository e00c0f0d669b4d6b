import itertools
from datetime import date

import pytest

from study_planner.models import COMPLETED, PRACTICE, StudySession, Task
from study_planner.syllabus import build_syllabus

_ids = itertools.count(1)


@pytest.fixture
def small_syllabus():
    """A two-subject registry small enough to reason about by hand."""
    return build_syllabus({
        "Physics": {
            "Kinematics": ["M1", "M2", "M3"],
            "Optics": ["Reflection", "Refraction"],
        },
        "Chemistry": {
            "Atomic Structure": ["Bohr Model", "Quantum Numbers"],
        },
    })


def make_task(
    subject="Physics",
    chapter="Kinematics",
    microtopics=("M1",),
    status=COMPLETED,
    task_type=PRACTICE,
    day="2025-03-30",
    sessions=(),
    **kwargs,
):
    """Build a Task with sensible defaults; sessions are (iso_date, seconds) pairs."""
    return Task(
        id=f"t{next(_ids)}",
        name=kwargs.pop("name", "task"),
        subject=subject,
        chapter=chapter,
        microtopics=list(microtopics),
        task_type=task_type,
        date=day,
        status=status,
        sessions=[StudySession(date=d, duration=s) for d, s in sessions],
        **kwargs,
    )


@pytest.fixture
def task_factory():
    return make_task


@pytest.fixture
def today():
    return date(2025, 3, 31)
