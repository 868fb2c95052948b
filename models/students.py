from sqlalchemy import Column, DateTime, Index, Integer, String, func
from database.db import Base


class Student(Base):
    __tablename__ = "students"  # student master table

    id = Column(Integer, primary_key=True, index=True)
    pin = Column(String(32), nullable=False, unique=True)               # full PIN (unique)
    short_pin = Column(String(16), nullable=False)                      # display alias used while marking
    name = Column(String(120), nullable=False)
    department = Column(String(50), nullable=False, default="cme")      # e.g. cme, mech
    year = Column(String(20), nullable=False)                           # e.g. 2nd year
    semester = Column(String(30), nullable=False)                       # e.g. 4th semester
    shift = Column(String(20), nullable=False)                          # 1st shift / 2nd shift
    status = Column(String(10), nullable=False, default="active")       # active / inactive
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("ix_students_class", "department", "semester", "shift"),
    )
