from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from config.settings import settings
from database.db import get_db
from dependencies.scope import class_scope
from dependencies.security import require_staff_token
from schemas.common import ClassScope
from services import aggregator
from services.excel_service import XLSX_MEDIA_TYPE, ExcelService
from services.exceptions import AttendanceValidationError, NotFoundError
from services.record_store import AttendanceStore
from utils.dates import month_range

router = APIRouter(prefix="/reports", tags=["reports"], dependencies=[Depends(require_staff_token)])

excel_service = ExcelService()


def build_monthly_report(store: AttendanceStore, scope: ClassScope, month: str, subject: Optional[str]):
    bounds = month_range(month)
    if bounds is None:
        raise AttendanceValidationError("Invalid month format. Use YYYY-MM.")

    roster = store.find_active_roster(scope.department, scope.semester, scope.shift)
    if not roster:
        raise NotFoundError("No students found for selected class")

    start, end = bounds
    records = store.find_records(
        scope.department, scope.semester, scope.shift,
        subject=subject, start_date=start, end_date=end,
    )
    return aggregator.monthly_class_report(
        records, roster,
        month=month,
        subject=subject,
        min_periods=settings.REPORT_DAY_MIN_PERIODS,
    )


# ✅ [MONTHLY] per-student day counts for one month
@router.get("/monthly")
def get_monthly_report(
    scope: ClassScope = Depends(class_scope),
    month: str = Query(..., description="YYYY-MM"),
    subject: Optional[str] = None,
    db: Session = Depends(get_db),
):
    report = build_monthly_report(AttendanceStore(db), scope, month, subject)
    return {"success": True, "data": report.to_json()}


# ✅ [EXPORT] same report as .xlsx
@router.get("/monthly/export")
def export_monthly_report(
    scope: ClassScope = Depends(class_scope),
    month: str = Query(..., description="YYYY-MM"),
    subject: Optional[str] = None,
    db: Session = Depends(get_db),
):
    report = build_monthly_report(AttendanceStore(db), scope, month, subject)
    content = excel_service.monthly_class_report(report)
    filename = f"{subject or 'all'}_{month}_attendance_report.xlsx".replace(" ", "_")
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
