from scripts.import_students import (
    normalize_shift,
    rows_to_students,
    short_pin_for,
    upsert_students,
    year_from_semester,
)
from models.students import Student as StudentModel


def _row(pin, name="Some One", sem="4th semester", branch="CME", shift="1"):
    return {"PIN NUMBER": pin, "NAME": name, "SEM": sem, "BRANCH": branch, "SHIFT": shift}


def test_normalize_shift():
    assert normalize_shift("2") == "2nd shift"
    assert normalize_shift("2nd Shift") == "2nd shift"
    assert normalize_shift(1) == "1st shift"
    assert normalize_shift(None) == "1st shift"


def test_year_from_semester():
    assert year_from_semester("1st semester") == "1st year"
    assert year_from_semester("4th semester") == "2nd year"
    assert year_from_semester("6th semester") == "3rd year"


def test_short_pin_collisions_get_t_prefix_within_a_semester():
    seen = {}

    assert short_pin_for("23001-CM-015", "4th semester", seen) == "015"
    assert short_pin_for("22001-CM-015", "4th semester", seen) == "T015"
    assert short_pin_for("24001-CM-015", "2nd semester", seen) == "015"


def test_rows_to_students_cleans_fields_and_skips_blank_pins():
    students = rows_to_students([
        _row(" 23001-CM-001 ", name="  Asha   Rani ", shift="2"),
        _row(None),
        _row("23001-CM-002", branch=None),
    ])

    assert [s["pin"] for s in students] == ["23001-CM-001", "23001-CM-002"]
    assert students[0]["name"] == "Asha Rani"
    assert students[0]["department"] == "cme"
    assert students[0]["shift"] == "2nd shift"
    assert students[0]["year"] == "2nd year"
    assert students[1]["short_pin"] == "002"


def test_upsert_creates_then_updates(db):
    students = rows_to_students([_row("23001-CM-001", name="Asha"), _row("23001-CM-002")])
    assert upsert_students(db, students) == (2, 0)

    renamed = rows_to_students([_row("23001-CM-001", name="Asha Rani")])
    assert upsert_students(db, renamed) == (0, 1)

    student = db.query(StudentModel).filter(StudentModel.pin == "23001-CM-001").one()
    assert student.name == "Asha Rani"
    assert db.query(StudentModel).count() == 2
