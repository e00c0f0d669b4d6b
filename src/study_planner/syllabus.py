"""Static syllabus registry: subjects, chapters and microtopics."""
import json
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping, Optional

CONTENT_DIR = Path(__file__).parent / "content"

Syllabus = Mapping[str, Mapping[str, tuple[str, ...]]]


def build_syllabus(data: Mapping[str, Mapping[str, list[str]]]) -> Syllabus:
    """Freeze a subject -> chapter -> microtopics mapping into a read-only registry."""
    return MappingProxyType({
        subject: MappingProxyType({
            chapter: tuple(microtopics) for chapter, microtopics in chapters.items()
        })
        for subject, chapters in data.items()
    })


def load_syllabus(path: Optional[Path] = None) -> Syllabus:
    """Load the syllabus from syllabus.json (bundled content by default)."""
    path = path or CONTENT_DIR / "syllabus.json"
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return build_syllabus({
        subject["name"]: {
            chapter["name"]: chapter["microtopics"] for chapter in subject["chapters"]
        }
        for subject in data["subjects"]
    })


SYLLABUS = load_syllabus()


def iter_microtopics(
    syllabus: Syllabus, coverage: Optional[Mapping[str, list[str]]] = None
) -> Iterator[tuple[str, str, str]]:
    """Yield (subject, chapter, microtopic) for the whole syllabus or a coverage subset.

    Coverage entries that are not in the syllabus are ignored.
    """
    if coverage is None:
        coverage = {subject: list(chapters) for subject, chapters in syllabus.items()}
    for subject, chapters in coverage.items():
        subject_chapters = syllabus.get(subject)
        if subject_chapters is None:
            continue
        for chapter in chapters or []:
            for microtopic in subject_chapters.get(chapter, ()):
                yield subject, chapter, microtopic


def is_known_topic(syllabus: Syllabus, subject: str, chapter: str, microtopic: Optional[str] = None) -> bool:
    chapters = syllabus.get(subject)
    if chapters is None or chapter not in chapters:
        return False
    return microtopic is None or microtopic in chapters[chapter]


def count_microtopics(syllabus: Syllabus) -> int:
    return sum(len(m) for chapters in syllabus.values() for m in chapters.values())
