"""
Bulk student import from an Excel sheet.

Expected header row: PIN NUMBER | NAME | SEM | BRANCH | SHIFT
Rows are upserted by PIN.

    python -m scripts.import_students data/students.xlsx
"""

import logging
import sys

from openpyxl import load_workbook
from sqlalchemy.orm import Session

from database.db import SessionLocal, init_db
from models.students import Student as StudentModel  # ✅ model import

logger = logging.getLogger(__name__)

XLSX_PATH = "data/students.xlsx"  # ✅ default file path


def normalize_shift(value) -> str:
    return "2nd shift" if "2" in str(value or "") else "1st shift"


def year_from_semester(semester: str) -> str:
    if "3rd" in semester or "4th" in semester:
        return "2nd year"
    if "5th" in semester or "6th" in semester:
        return "3rd year"
    return "1st year"


def short_pin_for(pin: str, semester: str, seen: dict) -> str:
    """Last three digits of the PIN; later duplicates inside a semester get a T prefix."""
    base = pin[-3:].rjust(3, "0")
    key = (semester, base)
    seen[key] = seen.get(key, 0) + 1
    return base if seen[key] == 1 else f"T{base}"


def rows_to_students(rows):
    """rows: iterable of dicts keyed by header -> list of field dicts"""
    seen = {}
    students = []
    for row in rows:
        pin = str(row.get("PIN NUMBER") or "").strip()
        if not pin:
            continue
        semester = str(row.get("SEM") or "").strip()
        students.append({
            "pin": pin,
            "short_pin": short_pin_for(pin, semester, seen),
            "name": " ".join(str(row.get("NAME") or "").split()),
            "department": str(row.get("BRANCH") or "cme").strip().lower(),
            "year": year_from_semester(semester),
            "semester": semester,
            "shift": normalize_shift(row.get("SHIFT")),
            "status": "active",
        })
    return students


def read_rows(path: str):
    wb = load_workbook(path, read_only=True, data_only=True)
    try:
        rows = wb.worksheets[0].iter_rows(values_only=True)
        header = [str(h).strip() if h is not None else "" for h in next(rows, ())]
        for values in rows:
            yield dict(zip(header, values))
    finally:
        wb.close()


def upsert_students(db: Session, students) -> tuple:
    created = updated = 0
    for fields in students:
        existing = db.query(StudentModel).filter(StudentModel.pin == fields["pin"]).first()
        if existing:
            for key, value in fields.items():
                setattr(existing, key, value)
            updated += 1
        else:
            db.add(StudentModel(**fields))
            created += 1
    db.commit()
    return created, updated


def import_students(path: str = XLSX_PATH):
    init_db()
    db: Session = SessionLocal()
    try:
        students = rows_to_students(read_rows(path))
        created, updated = upsert_students(db, students)
    finally:
        db.close()
    logger.info("students imported from %s: %s created, %s updated", path, created, updated)
    return created, updated


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    import_students(sys.argv[1] if len(sys.argv) > 1 else XLSX_PATH)
