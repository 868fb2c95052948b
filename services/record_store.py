"""
services/record_store.py

Thin SQLAlchemy layer used by the marking and aggregation code.
The unique index on the composite key is the only concurrency guarantee:
a racing duplicate insert surfaces as DuplicateRecordError.
"""

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.attendance import PeriodAttendance as AttendanceModel
from models.students import Student as StudentModel
from services.exceptions import DuplicateRecordError

logger = logging.getLogger(__name__)


class AttendanceStore:
    def __init__(self, db: Session):
        self.db = db

    # ==========================================================
    # attendance records
    # ==========================================================
    def find_records(
        self,
        department: str,
        semester: str,
        shift: str,
        *,
        subject: Optional[str] = None,
        day: Optional[date] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        pin: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[AttendanceModel]:
        """
        Records of one class ordered by date then period.
        - end_date is exclusive
        - pin keeps only records that list the PIN in presents or absentees
        """
        query = (
            self.db.query(AttendanceModel)
            .filter(func.lower(AttendanceModel.department) == department.strip().lower())
            .filter(AttendanceModel.semester == semester)
            .filter(AttendanceModel.shift == shift)
        )
        if subject:
            query = query.filter(AttendanceModel.subject == subject)
        if day is not None:
            query = query.filter(AttendanceModel.date == day)
        if start_date is not None:
            query = query.filter(AttendanceModel.date >= start_date)
        if end_date is not None:
            query = query.filter(AttendanceModel.date < end_date)

        records = query.order_by(AttendanceModel.date, AttendanceModel.period, AttendanceModel.id).all()
        if pin is not None:
            # JSON lists are filtered in Python to stay portable across SQLite and MySQL
            records = [r for r in records if pin in (r.presents or []) or pin in (r.absentees or [])]
        if limit is not None:
            records = records[:limit]
        return records

    def find_slot(self, slot) -> Optional[AttendanceModel]:
        return (
            self.db.query(AttendanceModel)
            .filter(func.lower(AttendanceModel.department) == slot.department.lower())
            .filter(AttendanceModel.semester == slot.semester)
            .filter(AttendanceModel.shift == slot.shift)
            .filter(AttendanceModel.subject == slot.subject)
            .filter(AttendanceModel.period == slot.period)
            .filter(AttendanceModel.date == slot.date)
            .first()
        )

    def get_record(self, record_id: int) -> Optional[AttendanceModel]:
        return self.db.query(AttendanceModel).filter(AttendanceModel.id == record_id).first()

    def insert_record(self, fields: dict) -> AttendanceModel:
        record = AttendanceModel(**fields)
        self.db.add(record)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning("duplicate attendance slot rejected: %s", {k: fields[k] for k in fields if k not in ("presents", "absentees")})
            raise DuplicateRecordError("Attendance already marked for this class, subject, period and date")
        self.db.refresh(record)
        return record

    def update_record(self, record: AttendanceModel, presents: List[str], absentees: List[str]) -> AttendanceModel:
        record.presents = list(presents)
        record.absentees = list(absentees)
        self.db.commit()
        self.db.refresh(record)
        return record

    def delete_record(self, record: AttendanceModel) -> None:
        self.db.delete(record)
        self.db.commit()

    # ==========================================================
    # students
    # ==========================================================
    def find_active_roster(self, department: str, semester: str, shift: str) -> List[StudentModel]:
        return (
            self.db.query(StudentModel)
            .filter(func.lower(StudentModel.department) == department.strip().lower())
            .filter(StudentModel.semester == semester)
            .filter(StudentModel.shift == shift)
            .filter(StudentModel.status == "active")
            .order_by(StudentModel.pin)
            .all()
        )

    def get_student(self, pin: str) -> Optional[StudentModel]:
        return self.db.query(StudentModel).filter(StudentModel.pin == pin.strip()).first()
