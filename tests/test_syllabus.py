# tests/test_syllabus.py
import pytest

from study_planner.syllabus import SYLLABUS, count_microtopics, is_known_topic, iter_microtopics, load_syllabus


def test_bundled_syllabus_subjects():
    assert list(SYLLABUS) == ["Physics", "Chemistry", "Botany", "Zoology"]


def test_bundled_syllabus_sizes():
    assert len(SYLLABUS["Physics"]) == 29
    assert len(SYLLABUS["Chemistry"]) == 30
    assert count_microtopics(SYLLABUS) == 148 + 156 + 75 + 102


def test_microtopics_keep_their_order():
    assert SYLLABUS["Physics"]["Physical World"][0] == "What is Physics?"


def test_syllabus_is_read_only():
    with pytest.raises(TypeError):
        SYLLABUS["Physics"] = {}
    with pytest.raises(TypeError):
        SYLLABUS["Physics"]["Physical World"] = ()


def test_load_syllabus_from_file(tmp_path):
    f = tmp_path / "syllabus.json"
    f.write_text('{"subjects": [{"name": "Physics", "chapters": [{"name": "Kinematics", "microtopics": ["M1"]}]}]}')
    syllabus = load_syllabus(f)
    assert syllabus["Physics"]["Kinematics"] == ("M1",)


def test_iter_microtopics_whole_syllabus(small_syllabus):
    assert len(list(iter_microtopics(small_syllabus))) == 7


def test_iter_microtopics_coverage(small_syllabus):
    topics = list(iter_microtopics(small_syllabus, {"Physics": ["Optics"]}))
    assert topics == [("Physics", "Optics", "Reflection"), ("Physics", "Optics", "Refraction")]


def test_iter_microtopics_ignores_unknown_coverage(small_syllabus):
    coverage = {"Physics": ["Thermodynamics", "Optics"], "Biology": ["Cells"]}
    assert len(list(iter_microtopics(small_syllabus, coverage))) == 2


def test_is_known_topic(small_syllabus):
    assert is_known_topic(small_syllabus, "Physics", "Kinematics")
    assert is_known_topic(small_syllabus, "Physics", "Kinematics", "M2")
    assert not is_known_topic(small_syllabus, "Physics", "Kinematics", "M9")
    assert not is_known_topic(small_syllabus, "Physics", "Waves")
    assert not is_known_topic(small_syllabus, "Zoology", "Kinematics")
