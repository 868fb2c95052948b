from sqlalchemy import JSON, Column, Date, DateTime, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import validates

from database.db import Base


class PeriodAttendance(Base):
    __tablename__ = "period_attendance"  # one row per class / subject / period / day

    id = Column(Integer, primary_key=True, index=True)
    department = Column(String(50), nullable=False)
    semester = Column(String(30), nullable=False)
    shift = Column(String(20), nullable=False)
    subject = Column(String(80), nullable=False)
    period = Column(Integer, nullable=False)                 # 1 ~ 7
    date = Column(Date, nullable=False)                      # calendar day
    presents = Column(JSON, nullable=False, default=list)    # PINs marked present
    absentees = Column(JSON, nullable=False, default=list)   # PINs marked absent
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # composite key: a period can be marked only once
    __table_args__ = (
        UniqueConstraint(
            "department", "semester", "shift", "subject", "period", "date",
            name="uq_period_attendance_slot",
        ),
    )

    # department is case-insensitive; store it lowercased so the unique key agrees
    @validates("department")
    def _lower_department(self, key, value):
        return value.strip().lower() if isinstance(value, str) else value
