from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

import pytest

from services import aggregator
from services.aggregator import ClassAggregation


@dataclass
class Rec:
    date: date
    period: int
    presents: list
    absentees: list = field(default_factory=list)
    subject: str = "SE"


@dataclass
class Stu:
    pin: str
    name: str = ""


ROSTER = ["A", "B", "C"]

# two periods on the same day, from the A/B/C example
EXAMPLE = [
    Rec(date(2024, 1, 1), 1, ["A", "B"], ["C"]),
    Rec(date(2024, 1, 1), 2, ["A"], ["B", "C"]),
]


def _status(records, pin, threshold):
    [day] = aggregator.day_statuses(records, pin, threshold)
    return day.status


# ==========================================================
# student view
# ==========================================================

def test_no_records_gives_zero_summary():
    summary = aggregator.summarize_student([], "A", threshold=4)

    assert summary.overall_percentage == 0
    assert summary.total_classes == 0
    assert summary.monthly_breakdown == []
    assert summary.to_json()["monthlyBreakdown"] == []


def test_example_with_threshold_one():
    assert _status(EXAMPLE, "A", 1) == "present"
    assert _status(EXAMPLE, "B", 1) == "present"
    assert _status(EXAMPLE, "C", 1) == "absent"


def test_example_with_threshold_two():
    assert _status(EXAMPLE, "A", 2) == "present"
    assert _status(EXAMPLE, "B", 2) == "absent"
    assert _status(EXAMPLE, "C", 2) == "absent"


@pytest.mark.parametrize("present_periods", range(0, 8))
def test_day_status_follows_threshold_of_four(present_periods):
    records = [
        Rec(date(2024, 2, 5), p, ["A"] if p <= present_periods else [], [] if p <= present_periods else ["A"])
        for p in range(1, 8)
    ]
    [day] = aggregator.day_statuses(records, "A", 4)

    assert day.total_periods == 7
    assert day.present_periods == present_periods
    assert day.status == ("present" if present_periods >= 4 else "absent")


def test_more_presence_never_turns_present_day_absent():
    statuses = []
    for k in range(0, 8):
        records = [Rec(date(2024, 2, 5), p, ["A"] if p <= k else ["B"]) for p in range(1, 8)]
        statuses.append(_status(records, "A", 4))

    first_present = statuses.index("present")
    assert all(s == "present" for s in statuses[first_present:])


def test_three_of_four_days_is_75_percent():
    records = [
        Rec(date(2024, 3, 4), 1, ["A"]),
        Rec(date(2024, 3, 5), 1, ["A"]),
        Rec(date(2024, 3, 6), 1, ["A"]),
        Rec(date(2024, 3, 7), 1, [], ["A"]),
    ]
    summary = aggregator.summarize_student(records, "A", threshold=1)

    assert summary.overall_percentage == 75
    assert summary.present == 3
    assert summary.absent == 1
    [month] = summary.monthly_breakdown
    assert (month.month, month.percentage, month.total_days, month.present_days) == ("March 2024", 75, 4, 3)


def test_months_are_sorted_chronologically_across_years():
    records = [
        Rec(date(2024, 2, 1), 1, ["A"]),
        Rec(date(2023, 12, 30), 1, [], ["A"]),
        Rec(date(2024, 1, 15), 1, ["A"]),
    ]
    summary = aggregator.summarize_student(records, "A", threshold=1)

    assert [m.month for m in summary.monthly_breakdown] == ["December 2023", "January 2024", "February 2024"]
    assert [m.percentage for m in summary.monthly_breakdown] == [0, 100, 100]
    assert [d.day for d in summary.daily_records] == [date(2023, 12, 30), date(2024, 1, 15), date(2024, 2, 1)]


def test_weekly_breakdown_groups_by_monday():
    records = [
        Rec(date(2024, 1, 1), 1, ["A"]),    # Monday
        Rec(date(2024, 1, 6), 1, [], ["A"]),  # Saturday, same week
        Rec(date(2024, 1, 8), 1, ["A"]),    # next Monday
    ]
    weeks = aggregator.summarize_student(records, "A", threshold=1).weekly_breakdown

    assert [(w.week_start, w.total_days, w.present_days, w.percentage) for w in weeks] == [
        (date(2024, 1, 1), 2, 1, 50),
        (date(2024, 1, 8), 1, 1, 100),
    ]


def test_percent_rounds_halves_up():
    assert aggregator.percent(1, 8) == 13
    assert aggregator.percent(2, 3) == 67
    assert aggregator.percent(1, 3) == 33
    assert aggregator.percent(0, 0) == 0


def test_summary_json_uses_camel_case():
    body = aggregator.summarize_student(EXAMPLE, "A", threshold=1).to_json()

    assert body["overallPercentage"] == 100
    assert body["totalClasses"] == 1
    assert body["dailyRecords"][0] == {
        "date": "2024-01-01",
        "totalPeriods": 2,
        "presentPeriods": 2,
        "status": "present",
    }


# ==========================================================
# class strategies
# ==========================================================

def test_latest_period_snapshot_uses_highest_period_only():
    snapshot = aggregator.aggregate_class(ClassAggregation.LATEST_PERIOD, EXAMPLE, ROSTER)

    assert snapshot.period == 2
    assert snapshot.total_marked == 3
    assert snapshot.present == 1
    assert snapshot.absent == 2


def test_latest_period_snapshot_ignores_pins_outside_roster():
    records = [Rec(date(2024, 1, 1), 3, ["A", "X"], ["B", "Y"])]
    snapshot = aggregator.latest_period_snapshot(records, ROSTER)

    assert (snapshot.total_marked, snapshot.present) == (2, 1)


def test_latest_period_snapshot_without_records_is_none():
    assert aggregator.aggregate_class(ClassAggregation.LATEST_PERIOD, [], ROSTER) is None


def test_any_period_average_counts_presence_in_any_period():
    # A and B present in some period, C never: (100 + 100 + 0) / 3
    assert aggregator.aggregate_class(ClassAggregation.ANY_PERIOD, EXAMPLE, ROSTER) == 66.67


def test_any_period_average_single_student_all_present_is_100():
    records = [Rec(date(2024, 1, d), 1, ["A"]) for d in (1, 2, 3)]

    assert aggregator.any_period_average(records, ["A"]) == 100.00


def test_any_period_average_without_records_is_zero():
    assert aggregator.any_period_average([], ROSTER) == 0.0
    assert aggregator.any_period_average(EXAMPLE, []) == 0.0


def test_dashboard_summary_combines_both_strategies():
    summary = aggregator.dashboard_summary(ROSTER, EXAMPLE, EXAMPLE)

    assert summary.to_json() == {
        "totalStudents": 3,
        "todaysAttendance": {"totalMarked": 3, "present": 1},
        "monthlyAverage": 66.67,
    }


def test_dashboard_summary_without_records_is_zero_valued():
    summary = aggregator.dashboard_summary(ROSTER, [], [])

    assert summary.to_json() == {
        "totalStudents": 3,
        "todaysAttendance": {"totalMarked": 0, "present": 0},
        "monthlyAverage": 0.0,
    }


# ==========================================================
# class reports
# ==========================================================

def test_monthly_class_report_with_one_period_rule():
    records = EXAMPLE + [Rec(date(2024, 1, 2), 1, ["C"], ["A", "B"])]
    report = aggregator.monthly_class_report(
        records, [Stu("A", "Asha"), Stu("B", "Bala"), Stu("C", "Chitra")],
        month="2024-01", subject="SE", min_periods=1,
    )

    assert report.working_days == 2
    rows = {r.pin: (r.present_days, r.absent_days, r.percentage) for r in report.students}
    assert rows == {"A": (1, 1, 50.0), "B": (1, 1, 50.0), "C": (1, 1, 50.0)}


def test_monthly_class_report_with_two_period_rule():
    report = aggregator.monthly_class_report(
        EXAMPLE, [Stu("A"), Stu("B"), Stu("C")], month="2024-01", min_periods=2,
    )

    rows = {r.pin: (r.present_days, r.absent_days) for r in report.students}
    assert rows == {"A": (1, 0), "B": (0, 1), "C": (0, 1)}


def test_monthly_class_report_without_records():
    report = aggregator.monthly_class_report([], [Stu("A")], month="2024-01")

    assert report.working_days == 0
    assert report.students[0].percentage == 0.0


def test_weekly_trend_reports_each_record_day():
    records = EXAMPLE + [Rec(date(2024, 1, 2), 1, ["A", "B", "C"])]
    trend = aggregator.weekly_trend(records, ROSTER)

    assert [(t.day, t.weekday, t.attendance) for t in trend] == [
        (date(2024, 1, 1), "Mon", 66.67),
        (date(2024, 1, 2), "Tue", 100.0),
    ]


def test_subject_wise_averages_per_subject():
    records = EXAMPLE + [Rec(date(2024, 1, 1), 3, ["A", "B", "C"], subject="Java")]
    subjects = aggregator.subject_wise(records, ROSTER)

    assert [(s.subject, s.attendance, s.working_days) for s in subjects] == [
        ("Java", 100.0, 1),
        ("SE", 66.67, 1),
    ]


def test_low_attendance_lists_students_below_cutoff():
    records = [
        Rec(date(2024, 1, 1), 1, ["A", "B"], ["C"]),
        Rec(date(2024, 1, 2), 1, ["A"], ["B", "C"]),
    ]
    flagged = aggregator.low_attendance(
        records, [Stu("A", "Asha"), Stu("B", "Bala"), Stu("C", "Chitra"), Stu("D", "Unmarked")],
        threshold=1, cutoff=75,
    )

    assert [(s.pin, s.percentage) for s in flagged] == [("C", 0), ("B", 50)]


def test_unknown_strategy_is_rejected():
    with pytest.raises(ValueError):
        aggregator.aggregate_class("sometimes", EXAMPLE, ROSTER)
