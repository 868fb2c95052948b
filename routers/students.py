import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import require_staff_token
from models.students import Student as StudentModel
from schemas.common import Shift, StudentStatus
from schemas.students import Student as StudentSchema
from schemas.students import StudentCreate, StudentStatusUpdate, StudentUpdate
from services.exceptions import DuplicateRecordError, NotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/students", tags=["students"], dependencies=[Depends(require_staff_token)])


def _student_out(s: StudentModel) -> dict:
    return StudentSchema.model_validate(s).model_dump()


def _get_or_404(db: Session, pin: str) -> StudentModel:
    student = db.query(StudentModel).filter(StudentModel.pin == pin.strip()).first()
    if student is None:
        raise NotFoundError(f"Student {pin} not found")
    return student


# ==========================================================
# [1] list / create
# ==========================================================

# ✅ [READ] students of a class (all filters optional)
@router.get("/")
def read_students(
    department: Optional[str] = None,
    semester: Optional[str] = None,
    shift: Optional[Shift] = None,
    status: Optional[StudentStatus] = None,
    db: Session = Depends(get_db),
):
    query = db.query(StudentModel)
    if department:
        query = query.filter(func.lower(StudentModel.department) == department.strip().lower())
    if semester:
        query = query.filter(StudentModel.semester == semester)
    if shift:
        query = query.filter(StudentModel.shift == shift)
    if status:
        query = query.filter(StudentModel.status == status)

    students = query.order_by(StudentModel.pin).all()
    return {
        "success": True,
        "data": [_student_out(s) for s in students],
        "message": f"{len(students)} students",
    }


# ✅ [CREATE] add a student
@router.post("/", status_code=201)
def create_student(student: StudentCreate, db: Session = Depends(get_db)):
    if db.query(StudentModel).filter(StudentModel.pin == student.pin).first():
        raise DuplicateRecordError("PIN already exists")

    db_student = StudentModel(**student.model_dump())
    db.add(db_student)
    db.commit()
    db.refresh(db_student)
    logger.info("student %s created", db_student.pin)
    return {
        "success": True,
        "data": _student_out(db_student),
        "message": "Student created",
    }


# ==========================================================
# [2] single student
# ==========================================================

# ✅ [READ]
@router.get("/{pin}")
def read_student(pin: str, db: Session = Depends(get_db)):
    return {"success": True, "data": _student_out(_get_or_404(db, pin))}


# ✅ [UPDATE] partial update, PIN is immutable
@router.put("/{pin}")
def update_student(pin: str, updated: StudentUpdate, db: Session = Depends(get_db)):
    student = _get_or_404(db, pin)
    for key, value in updated.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(student, key, value)
    db.commit()
    db.refresh(student)
    return {
        "success": True,
        "data": _student_out(student),
        "message": "Student updated",
    }


# ✅ [UPDATE] soft enable / disable
@router.patch("/{pin}/status")
def update_student_status(pin: str, body: StudentStatusUpdate, db: Session = Depends(get_db)):
    student = _get_or_404(db, pin)
    student.status = body.status
    db.commit()
    db.refresh(student)
    logger.info("student %s set %s", student.pin, student.status)
    return {
        "success": True,
        "data": _student_out(student),
        "message": f"Student marked {student.status}",
    }


# ✅ [DELETE] explicit hard delete; attendance lists keep the PIN
@router.delete("/{pin}")
def delete_student(pin: str, db: Session = Depends(get_db)):
    student = _get_or_404(db, pin)
    db.delete(student)
    db.commit()
    logger.info("student %s deleted", pin)
    return {
        "success": True,
        "data": {"pin": pin},
        "message": "Student deleted",
    }
