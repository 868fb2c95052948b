"""
services/aggregator.py

Turns period-level attendance records into day, week and month figures.

- Pure functions: no DB access, no settings lookups. Callers pass the
  presence threshold explicitly.
- Records are anything exposing .date .period .subject .presents .absentees
  (ORM rows from models/attendance.py in practice).
- Two class-level policies exist and are selected by name (ClassAggregation):
    LATEST_PERIOD  "today's snapshot": only the highest period of the day counts
    ANY_PERIOD     "monthly average": present in any period -> present for the day
"""

from __future__ import annotations

import math
from collections import defaultdict
from datetime import date, datetime
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Set

from schemas.reports import (
    ClassDashboardSummary,
    DayStatus,
    DayTrend,
    LowAttendanceStudent,
    MonthBreakdown,
    MonthlyClassReport,
    PeriodSnapshot,
    StudentAttendanceSummary,
    StudentMonthRow,
    SubjectAverage,
    TodaysAttendance,
    WeekBreakdown,
)
from utils.dates import month_label, week_start

PRESENT = "present"
ABSENT = "absent"


class ClassAggregation(str, Enum):
    LATEST_PERIOD = "latest_period"
    ANY_PERIOD = "any_period"


# ==========================================================
# helpers
# ==========================================================

def percent(part: int, whole: int) -> int:
    """round(100 * part / whole), halves rounded up; 0 when whole is 0."""
    if not whole:
        return 0
    return int(math.floor(100 * part / whole + 0.5))


def _day(value) -> date:
    return value.date() if isinstance(value, datetime) else value


def _ordered(records: Iterable) -> list:
    return sorted(records, key=lambda r: (_day(r.date), r.period))


def _group_by_day(records: Iterable) -> Dict[date, list]:
    days: Dict[date, list] = {}
    for r in _ordered(records):
        days.setdefault(_day(r.date), []).append(r)
    return days


def _present_any_period(records: Iterable) -> Dict[date, Set[str]]:
    """day -> PINs present in at least one period that day (days with no presents included)."""
    by_day: Dict[date, Set[str]] = {}
    for r in _ordered(records):
        by_day.setdefault(_day(r.date), set()).update(r.presents or [])
    return by_day


# ==========================================================
# student view
# ==========================================================

def day_statuses(records: Iterable, pin: str, threshold: int) -> List[DayStatus]:
    """Per-day status for one student; present iff present_periods >= threshold."""
    result = []
    for day, day_records in _group_by_day(records).items():
        present_periods = sum(1 for r in day_records if pin in (r.presents or []))
        result.append(DayStatus(
            day=day,
            total_periods=len(day_records),
            present_periods=present_periods,
            status=PRESENT if present_periods >= threshold else ABSENT,
        ))
    return result


def _rollup(days: Sequence[DayStatus], key) -> Dict:
    buckets: Dict = {}
    for d in days:
        total, present = buckets.get(key(d.day), (0, 0))
        buckets[key(d.day)] = (total + 1, present + (1 if d.status == PRESENT else 0))
    return dict(sorted(buckets.items()))


def monthly_breakdown(days: Sequence[DayStatus]) -> List[MonthBreakdown]:
    buckets = _rollup(days, lambda d: date(d.year, d.month, 1))
    return [
        MonthBreakdown(
            month=month_label(first),
            percentage=percent(present, total),
            total_days=total,
            present_days=present,
        )
        for first, (total, present) in buckets.items()
    ]


def weekly_breakdown(days: Sequence[DayStatus]) -> List[WeekBreakdown]:
    buckets = _rollup(days, week_start)
    return [
        WeekBreakdown(
            week_start=monday,
            percentage=percent(present, total),
            total_days=total,
            present_days=present,
        )
        for monday, (total, present) in buckets.items()
    ]


def summarize_student(records: Iterable, pin: str, threshold: int) -> StudentAttendanceSummary:
    days = day_statuses(records, pin, threshold)
    if not days:
        return StudentAttendanceSummary()

    present_days = sum(1 for d in days if d.status == PRESENT)
    return StudentAttendanceSummary(
        overall_percentage=percent(present_days, len(days)),
        total_classes=len(days),
        present=present_days,
        absent=len(days) - present_days,
        monthly_breakdown=monthly_breakdown(days),
        weekly_breakdown=weekly_breakdown(days),
        daily_records=days,
    )


# ==========================================================
# class strategies
# ==========================================================

def latest_period_snapshot(records: Iterable, roster_pins: Iterable[str]) -> Optional[PeriodSnapshot]:
    """
    Snapshot of the highest-numbered period among the given records
    (callers pass one date + subject). Counts only PINs in the roster.
    None when there is nothing to report.
    """
    records = list(records)
    if not records:
        return None

    roster = set(roster_pins)
    latest = max(records, key=lambda r: (_day(r.date), r.period))
    present = [p for p in (latest.presents or []) if p in roster]
    absent = [p for p in (latest.absentees or []) if p in roster]
    return PeriodSnapshot(
        subject=latest.subject,
        day=_day(latest.date),
        period=latest.period,
        total_marked=len(present) + len(absent),
        present=len(present),
        absent=len(absent),
    )


def any_period_average(records: Iterable, roster_pins: Iterable[str]) -> float:
    """
    Mean over the roster of (days present in any period / distinct record days) * 100,
    rounded to 2 decimals.
    """
    roster = list(roster_pins)
    by_day = _present_any_period(records)
    if not roster or not by_day:
        return 0.0

    working_days = len(by_day)
    total = 0.0
    for pin in roster:
        present_days = sum(1 for pins in by_day.values() if pin in pins)
        total += present_days / working_days * 100
    return round(total / len(roster), 2)


def aggregate_class(strategy: ClassAggregation, records: Iterable, roster_pins: Iterable[str]):
    """Dispatch on the named policy. LATEST_PERIOD -> PeriodSnapshot | None, ANY_PERIOD -> float."""
    if strategy is ClassAggregation.LATEST_PERIOD:
        return latest_period_snapshot(records, roster_pins)
    if strategy is ClassAggregation.ANY_PERIOD:
        return any_period_average(records, roster_pins)
    raise ValueError(f"unknown class aggregation: {strategy!r}")


def dashboard_summary(
    roster_pins: Sequence[str],
    todays_records: Iterable,
    month_records: Iterable,
) -> ClassDashboardSummary:
    """Dashboard card: latest-period snapshot for today plus the any-period monthly average."""
    snapshot = aggregate_class(ClassAggregation.LATEST_PERIOD, todays_records, roster_pins)
    todays = TodaysAttendance()
    if snapshot is not None:
        todays = TodaysAttendance(total_marked=snapshot.total_marked, present=snapshot.present)

    return ClassDashboardSummary(
        total_students=len(roster_pins),
        todays_attendance=todays,
        monthly_average=aggregate_class(ClassAggregation.ANY_PERIOD, month_records, roster_pins),
    )


# ==========================================================
# class reports
# ==========================================================

def monthly_class_report(
    records: Iterable,
    roster: Sequence,
    *,
    month: str,
    subject: Optional[str] = None,
    min_periods: int = 1,
) -> MonthlyClassReport:
    """
    Per-student day counts for one month.
    A student is present on a day when present in >= min_periods periods;
    absent days are days the student was marked but fell short.
    """
    records = list(records)
    working_days = len({_day(r.date) for r in records})

    # pin -> day -> [present periods, marked periods]
    periods: Dict[str, Dict[date, List[int]]] = defaultdict(dict)
    for r in records:
        day = _day(r.date)
        for pin in r.presents or []:
            periods[pin].setdefault(day, [0, 0])
            periods[pin][day][0] += 1
            periods[pin][day][1] += 1
        for pin in r.absentees or []:
            periods[pin].setdefault(day, [0, 0])
            periods[pin][day][1] += 1

    rows = []
    for student in roster:
        days = periods.get(student.pin, {})
        present_days = sum(1 for present, _ in days.values() if present >= min_periods)
        rows.append(StudentMonthRow(
            pin=student.pin,
            name=student.name,
            present_days=present_days,
            absent_days=len(days) - present_days,
            percentage=round(present_days / working_days * 100, 2) if working_days else 0.0,
        ))

    return MonthlyClassReport(subject=subject, month=month, working_days=working_days, students=rows)


def weekly_trend(records: Iterable, roster_pins: Sequence[str]) -> List[DayTrend]:
    """Per record day, share of the roster present in any period."""
    roster = set(roster_pins)
    trend = []
    for day, pins in _present_any_period(records).items():
        present = len(pins & roster)
        trend.append(DayTrend(
            day=day,
            weekday=day.strftime("%a"),
            attendance=round(present / len(roster) * 100, 2) if roster else 0.0,
        ))
    return trend


def subject_wise(records: Iterable, roster_pins: Sequence[str]) -> List[SubjectAverage]:
    by_subject: Dict[str, list] = defaultdict(list)
    for r in records:
        by_subject[r.subject].append(r)

    return [
        SubjectAverage(
            subject=subject,
            attendance=any_period_average(subject_records, roster_pins),
            working_days=len({_day(r.date) for r in subject_records}),
        )
        for subject, subject_records in sorted(by_subject.items())
    ]


def low_attendance(
    records: Iterable,
    roster: Sequence,
    *,
    threshold: int,
    cutoff: float,
) -> List[LowAttendanceStudent]:
    """Students whose student-view percentage is below cutoff, lowest first. Unmarked students are skipped."""
    records = list(records)
    flagged = []
    for student in roster:
        own = [r for r in records if student.pin in (r.presents or []) or student.pin in (r.absentees or [])]
        summary = summarize_student(own, student.pin, threshold)
        if summary.total_classes and summary.overall_percentage < cutoff:
            flagged.append(LowAttendanceStudent(
                pin=student.pin,
                name=student.name,
                percentage=summary.overall_percentage,
                present_days=summary.present,
                total_days=summary.total_classes,
            ))
    return sorted(flagged, key=lambda s: (s.percentage, s.pin))
