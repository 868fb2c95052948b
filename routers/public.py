import logging
from datetime import timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from config.settings import settings
from database.db import get_db
from services import aggregator
from services.excel_service import XLSX_MEDIA_TYPE, ExcelService
from services.exceptions import AttendanceValidationError, NotFoundError
from services.record_store import AttendanceStore
from utils.dates import parse_iso_date_only

logger = logging.getLogger(__name__)

# no auth: students look up their own attendance by PIN
router = APIRouter(prefix="/public", tags=["public"])

excel_service = ExcelService()


def _student_view(db: Session, pin: str, start_date: Optional[str], end_date: Optional[str]):
    start = parse_iso_date_only(start_date) if start_date else None
    end = parse_iso_date_only(end_date) if end_date else None
    if (start_date and start is None) or (end_date and end is None):
        raise AttendanceValidationError("Invalid date range. Use YYYY-MM-DD.")

    store = AttendanceStore(db)
    student = store.get_student(pin)
    if student is None:
        raise NotFoundError(f"Student {pin} not found")

    records = store.find_records(
        student.department, student.semester, student.shift,
        start_date=start,
        end_date=end + timedelta(days=1) if end else None,
        pin=student.pin,
    )
    summary = aggregator.summarize_student(records, student.pin, settings.PRESENCE_THRESHOLD)
    logger.debug("student view %s: %s records", student.pin, len(records))
    return student, summary


# ✅ [READ] student's own attendance (zeros when nothing recorded)
@router.get("/student/{pin}")
def get_student_attendance(
    pin: str,
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
):
    student, summary = _student_view(db, pin, start_date, end_date)
    return {
        "success": True,
        "data": {
            "student": {
                "pin": student.pin,
                "shortPin": student.short_pin,
                "name": student.name,
                "department": student.department,
                "semester": student.semester,
                "shift": student.shift,
            },
            "presenceThreshold": settings.PRESENCE_THRESHOLD,
            **summary.to_json(),
        },
    }


# ✅ [EXPORT] same view as .xlsx
@router.get("/student/{pin}/excel")
def export_student_attendance(
    pin: str,
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
):
    student, summary = _student_view(db, pin, start_date, end_date)
    content = excel_service.student_attendance(student, summary)
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{student.pin}_attendance.xlsx"'},
    )
