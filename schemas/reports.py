"""
schemas/reports.py

Shapes produced by services/aggregator.py. Field names are snake_case in Python
and rendered camelCase in JSON (CamelModel.to_json).
"""

from datetime import date
from typing import List, Optional

from pydantic import Field

from schemas.common import CamelModel


# =========================================================
# Student view
# =========================================================

class DayStatus(CamelModel):
    day: date = Field(..., serialization_alias="date")
    total_periods: int
    present_periods: int
    status: str                     # "present" / "absent"


class MonthBreakdown(CamelModel):
    month: str                      # e.g. "January 2024"
    percentage: int
    total_days: int
    present_days: int


class WeekBreakdown(CamelModel):
    week_start: date
    percentage: int
    total_days: int
    present_days: int


class StudentAttendanceSummary(CamelModel):
    overall_percentage: int = 0
    total_classes: int = 0          # distinct working days
    present: int = 0
    absent: int = 0
    monthly_breakdown: List[MonthBreakdown] = []
    weekly_breakdown: List[WeekBreakdown] = []
    daily_records: List[DayStatus] = []


# =========================================================
# Class dashboard
# =========================================================

class TodaysAttendance(CamelModel):
    total_marked: int = 0
    present: int = 0


class ClassDashboardSummary(CamelModel):
    total_students: int = 0
    todays_attendance: TodaysAttendance = Field(default_factory=TodaysAttendance)
    monthly_average: float = 0.0


class PeriodSnapshot(CamelModel):
    subject: str
    day: date = Field(..., serialization_alias="date")
    period: int
    total_marked: int
    present: int
    absent: int


class DayTrend(CamelModel):
    day: date = Field(..., serialization_alias="date")
    weekday: str                    # Mon, Tue, ...
    attendance: float               # % of roster present in any period


class SubjectAverage(CamelModel):
    subject: str
    attendance: float
    working_days: int


class LowAttendanceStudent(CamelModel):
    pin: str
    name: str
    percentage: int
    present_days: int
    total_days: int


# =========================================================
# Monthly class report
# =========================================================

class StudentMonthRow(CamelModel):
    pin: str
    name: str
    present_days: int
    absent_days: int
    percentage: float


class MonthlyClassReport(CamelModel):
    subject: Optional[str] = None
    month: str
    working_days: int
    students: List[StudentMonthRow]
