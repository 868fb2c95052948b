"""
services/marking.py

Validation and normalisation of a period-attendance marking.

- Only one of presents / absentees may be given; the other list is the active
  roster minus the given one. Neither given -> everybody present.
- Identifiers may be full PINs or short PINs; stored lists always hold full PINs
  in roster order, so presents and absentees are disjoint and cover the roster.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import date
from typing import List, Sequence, Tuple

from services.exceptions import (
    AttendanceValidationError,
    DuplicateRecordError,
    NotFoundError,
    UnknownIdentifierError,
)
from utils.dates import parse_iso_date_only
from utils.roll_parsing import parse_roll_list, uniq

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("department", "semester", "shift", "subject", "period", "date")
MIN_PERIOD, MAX_PERIOD = 1, 7


@dataclass(frozen=True)
class SlotKey:
    department: str
    semester: str
    shift: str
    subject: str
    period: int
    date: date


@dataclass(frozen=True)
class Marking:
    slot: SlotKey
    presents: List[str]
    absentees: List[str]

    def as_fields(self) -> dict:
        fields = asdict(self.slot)
        fields.update(presents=list(self.presents), absentees=list(self.absentees))
        return fields


# ==========================================================
# validation
# ==========================================================

def validate_slot(payload) -> SlotKey:
    """Checks the composite key fields of a marking request."""
    values = {name: getattr(payload, name, None) for name in REQUIRED_FIELDS}
    missing = [name for name, v in values.items() if v is None or str(v).strip() == ""]
    if missing:
        raise AttendanceValidationError(f"{', '.join(REQUIRED_FIELDS)} are required (missing: {', '.join(missing)})")

    # JSON true/false would otherwise coerce to 1/0
    if isinstance(values["period"], bool):
        raise AttendanceValidationError("period must be a number between 1 and 7")
    try:
        period = int(str(values["period"]).strip())
    except ValueError:
        raise AttendanceValidationError("period must be a number between 1 and 7")
    if not MIN_PERIOD <= period <= MAX_PERIOD:
        raise AttendanceValidationError("period must be a number between 1 and 7")

    day = parse_iso_date_only(values["date"])
    if day is None:
        raise AttendanceValidationError("Invalid date. Use YYYY-MM-DD.")

    return SlotKey(
        department=str(values["department"]).strip().lower(),
        semester=str(values["semester"]).strip(),
        shift=str(values["shift"]).strip(),
        subject=str(values["subject"]).strip(),
        period=period,
        date=day,
    )


def resolve_lists(roster: Sequence, presents_raw, absentees_raw) -> Tuple[List[str], List[str]]:
    """Returns (presents, absentees) as full PINs in roster order."""
    presents_in = uniq(parse_roll_list(presents_raw))
    absentees_in = uniq(parse_roll_list(absentees_raw))
    if presents_in and absentees_in:
        raise AttendanceValidationError("Enter only one list: absentees OR presents")

    pins = [s.pin for s in roster]
    aliases = {}
    for s in roster:
        aliases[s.pin] = s.pin
        aliases.setdefault(s.short_pin, s.pin)

    given = presents_in or absentees_in
    unknown = [ident for ident in given if ident not in aliases]
    if unknown:
        raise UnknownIdentifierError(unknown)
    chosen = {aliases[ident] for ident in given}

    if presents_in:
        presents = [p for p in pins if p in chosen]
    elif absentees_in:
        presents = [p for p in pins if p not in chosen]
    else:
        presents = list(pins)
    absentees = [p for p in pins if p not in set(presents)]
    return presents, absentees


def build_marking(slot: SlotKey, roster: Sequence, presents_raw=None, absentees_raw=None) -> Marking:
    if not roster:
        raise NotFoundError("No students found for selected class")
    presents, absentees = resolve_lists(roster, presents_raw, absentees_raw)
    return Marking(slot=slot, presents=presents, absentees=absentees)


# ==========================================================
# store-backed operations
# ==========================================================

def mark_attendance(store, payload):
    """Validate, resolve against the active roster and insert. Returns (record, marking)."""
    slot = validate_slot(payload)
    roster = store.find_active_roster(slot.department, slot.semester, slot.shift)
    marking = build_marking(slot, roster, payload.presents, payload.absentees)

    if store.find_slot(slot) is not None:
        raise DuplicateRecordError("Attendance already marked for this class, subject, period and date")

    record = store.insert_record(marking.as_fields())
    logger.info(
        "marked %s/%s/%s %s period %s on %s: %s present, %s absent",
        slot.department, slot.semester, slot.shift, slot.subject, slot.period, slot.date,
        len(marking.presents), len(marking.absentees),
    )
    return record, marking


def modify_attendance(store, record_id: int, payload):
    """Re-derive the lists of an existing record against today's active roster. The slot itself never changes."""
    record = store.get_record(record_id)
    if record is None:
        raise NotFoundError("Attendance record not found")

    roster = store.find_active_roster(record.department, record.semester, record.shift)
    slot = SlotKey(
        department=record.department,
        semester=record.semester,
        shift=record.shift,
        subject=record.subject,
        period=record.period,
        date=record.date,
    )
    marking = build_marking(slot, roster, payload.presents, payload.absentees)
    record = store.update_record(record, marking.presents, marking.absentees)
    logger.info("modified attendance record %s", record_id)
    return record, marking
