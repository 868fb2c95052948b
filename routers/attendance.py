from datetime import timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from config.settings import settings
from database.db import get_db
from dependencies.scope import class_scope
from dependencies.security import require_staff_token
from schemas.attendance import MarkAttendanceRequest, ModifyAttendanceRequest
from schemas.attendance import PeriodAttendance as PeriodAttendanceSchema
from schemas.common import ClassScope
from services.exceptions import AttendanceValidationError, NotFoundError
from services.marking import mark_attendance, modify_attendance
from services.record_store import AttendanceStore
from utils.dates import parse_iso_date_only

router = APIRouter(prefix="/attendance", tags=["attendance"], dependencies=[Depends(require_staff_token)])


def _record_out(record) -> dict:
    return PeriodAttendanceSchema.model_validate(record).model_dump(mode="json")


def _optional_date(value: Optional[str], name: str):
    if value is None:
        return None
    parsed = parse_iso_date_only(value)
    if parsed is None:
        raise AttendanceValidationError(f"Invalid {name}. Use YYYY-MM-DD.")
    return parsed


# ==========================================================
# [1] marking
# ==========================================================

# ✅ [CREATE] mark one period for a class
@router.post("/mark", status_code=201)
def mark(payload: MarkAttendanceRequest, db: Session = Depends(get_db)):
    record, marking = mark_attendance(AttendanceStore(db), payload)
    return {
        "success": True,
        "data": {
            "record": _record_out(record),
            "summary": {
                "total": len(marking.presents) + len(marking.absentees),
                "present": len(marking.presents),
                "absent": len(marking.absentees),
            },
        },
        "message": "Attendance marked",
    }


# ==========================================================
# [2] class listing
# ==========================================================

# ✅ [READ] records of a class, ordered by date then period
@router.get("/class")
def class_records(
    scope: ClassScope = Depends(class_scope),
    subject: Optional[str] = None,
    date: Optional[str] = Query(None, description="YYYY-MM-DD"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate", description="inclusive"),
    db: Session = Depends(get_db),
):
    day = _optional_date(date, "date")
    start = _optional_date(start_date, "startDate")
    end = _optional_date(end_date, "endDate")

    store = AttendanceStore(db)
    records = store.find_records(
        scope.department, scope.semester, scope.shift,
        subject=subject,
        day=day,
        start_date=start,
        end_date=end + timedelta(days=1) if end else None,
        limit=settings.CLASS_RECORDS_LIMIT,
    )
    return {
        "success": True,
        "data": [_record_out(r) for r in records],
        "message": f"{len(records)} records",
    }


# ==========================================================
# [3] single record
# ==========================================================

# ✅ [READ]
@router.get("/{record_id}")
def read_record(record_id: int, db: Session = Depends(get_db)):
    record = AttendanceStore(db).get_record(record_id)
    if record is None:
        raise NotFoundError("Attendance record not found")
    return {"success": True, "data": _record_out(record)}


# ✅ [UPDATE] re-mark the lists of an existing period
@router.put("/{record_id}")
def modify(record_id: int, payload: ModifyAttendanceRequest, db: Session = Depends(get_db)):
    record, marking = modify_attendance(AttendanceStore(db), record_id, payload)
    return {
        "success": True,
        "data": {
            "record": _record_out(record),
            "summary": {
                "total": len(marking.presents) + len(marking.absentees),
                "present": len(marking.presents),
                "absent": len(marking.absentees),
            },
        },
        "message": "Attendance updated",
    }


# ✅ [DELETE]
@router.delete("/{record_id}")
def delete_record(record_id: int, db: Session = Depends(get_db)):
    store = AttendanceStore(db)
    record = store.get_record(record_id)
    if record is None:
        raise NotFoundError("Attendance record not found")
    store.delete_record(record)
    return {
        "success": True,
        "data": {"id": record_id},
        "message": "Attendance record deleted",
    }
