from datetime import date, datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from config.settings import settings
from database.db import get_db
from dependencies.scope import class_scope
from dependencies.security import require_staff_token
from schemas.common import ClassScope
from services import aggregator
from services.aggregator import ClassAggregation
from services.exceptions import AttendanceValidationError, NotFoundError
from services.record_store import AttendanceStore
from utils.dates import month_range, parse_iso_date_only

router = APIRouter(prefix="/dashboard", tags=["dashboard"], dependencies=[Depends(require_staff_token)])


def _today() -> date:
    return datetime.now(timezone.utc).date()


def _date_or_today(value: Optional[str], name: str = "date") -> date:
    if not value:
        return _today()
    parsed = parse_iso_date_only(value)
    if parsed is None:
        raise AttendanceValidationError(f"Invalid {name}. Use YYYY-MM-DD.")
    return parsed


def _month_bounds(month: Optional[str]):
    month = month or _today().strftime("%Y-%m")
    bounds = month_range(month)
    if bounds is None:
        raise AttendanceValidationError("Invalid month format. Use YYYY-MM.")
    return month, bounds


# ==========================================================
# [1] dashboard card
# ==========================================================

# ✅ [SUMMARY] total students + today's latest period + monthly average
# no records -> zero values (not 404)
@router.get("/summary")
def get_summary(
    scope: ClassScope = Depends(class_scope),
    subject: Optional[str] = None,
    date: Optional[str] = Query(None, description="YYYY-MM-DD, defaults to today"),
    db: Session = Depends(get_db),
):
    day = _date_or_today(date)
    store = AttendanceStore(db)
    roster_pins = [s.pin for s in store.find_active_roster(scope.department, scope.semester, scope.shift)]

    todays = store.find_records(scope.department, scope.semester, scope.shift, subject=subject, day=day)
    _, (start, end) = _month_bounds(day.strftime("%Y-%m"))
    monthly = store.find_records(
        scope.department, scope.semester, scope.shift,
        subject=subject, start_date=start, end_date=end,
    )

    summary = aggregator.dashboard_summary(roster_pins, todays, monthly)
    return {"success": True, "data": summary.to_json()}


# ✅ [TODAY] latest marked period for one subject
# no record for date + subject -> 404
@router.get("/today-summary")
def get_today_summary(
    scope: ClassScope = Depends(class_scope),
    subject: str = Query(..., min_length=1),
    date: Optional[str] = Query(None, description="YYYY-MM-DD, defaults to today"),
    db: Session = Depends(get_db),
):
    day = _date_or_today(date)
    store = AttendanceStore(db)
    roster_pins = [s.pin for s in store.find_active_roster(scope.department, scope.semester, scope.shift)]
    records = store.find_records(scope.department, scope.semester, scope.shift, subject=subject, day=day)

    snapshot = aggregator.aggregate_class(ClassAggregation.LATEST_PERIOD, records, roster_pins)
    if snapshot is None:
        raise NotFoundError(f"No attendance marked for {subject} on {day.isoformat()}")

    data = snapshot.to_json()
    data["totalStudents"] = len(roster_pins)
    return {"success": True, "data": data}


# ==========================================================
# [2] charts
# ==========================================================

# ✅ [WEEKLY] per-day attendance over a range (default: last 7 days)
@router.get("/weekly-summary")
def get_weekly_summary(
    scope: ClassScope = Depends(class_scope),
    subject: Optional[str] = None,
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
):
    end = _date_or_today(end_date, "endDate")
    start = _date_or_today(start_date, "startDate") if start_date else end - timedelta(days=6)
    if start > end:
        raise AttendanceValidationError("startDate must not be after endDate")

    store = AttendanceStore(db)
    roster_pins = [s.pin for s in store.find_active_roster(scope.department, scope.semester, scope.shift)]
    records = store.find_records(
        scope.department, scope.semester, scope.shift,
        subject=subject, start_date=start, end_date=end + timedelta(days=1),
    )
    return {
        "success": True,
        "data": {
            "startDate": start.isoformat(),
            "endDate": end.isoformat(),
            "days": [d.to_json() for d in aggregator.weekly_trend(records, roster_pins)],
        },
    }


# ✅ [SUBJECTS] any-period monthly average per subject
@router.get("/subject-wise")
def get_subject_wise(
    scope: ClassScope = Depends(class_scope),
    month: Optional[str] = Query(None, description="YYYY-MM, defaults to current month"),
    db: Session = Depends(get_db),
):
    month, (start, end) = _month_bounds(month)
    store = AttendanceStore(db)
    roster_pins = [s.pin for s in store.find_active_roster(scope.department, scope.semester, scope.shift)]
    records = store.find_records(scope.department, scope.semester, scope.shift, start_date=start, end_date=end)
    return {
        "success": True,
        "data": {
            "month": month,
            "subjects": [s.to_json() for s in aggregator.subject_wise(records, roster_pins)],
        },
    }


# ✅ [LOW] students under the cutoff for the month
@router.get("/low-attendance")
def get_low_attendance(
    scope: ClassScope = Depends(class_scope),
    month: Optional[str] = Query(None, description="YYYY-MM, defaults to current month"),
    cutoff: Optional[float] = Query(None, ge=0, le=100),
    db: Session = Depends(get_db),
):
    month, (start, end) = _month_bounds(month)
    cutoff = settings.LOW_ATTENDANCE_CUTOFF if cutoff is None else cutoff

    store = AttendanceStore(db)
    roster = store.find_active_roster(scope.department, scope.semester, scope.shift)
    records = store.find_records(scope.department, scope.semester, scope.shift, start_date=start, end_date=end)
    flagged = aggregator.low_attendance(
        records, roster,
        threshold=settings.PRESENCE_THRESHOLD,
        cutoff=cutoff,
    )
    return {
        "success": True,
        "data": {
            "month": month,
            "cutoff": cutoff,
            "students": [s.to_json() for s in flagged],
        },
    }
