import datetime as dt
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator

RollInput = Union[List[str], str, None]


# ✅ marking request. Fields stay loose here; services/marking.py reports precise errors.
class MarkAttendanceRequest(BaseModel):
    department: Optional[str] = None
    semester: Optional[str] = None
    shift: Optional[str] = None
    subject: Optional[str] = None
    period: Optional[Union[int, str]] = None
    date: Optional[str] = None
    presents: RollInput = None
    absentees: RollInput = None

    @field_validator("period", mode="before")
    @classmethod
    def _no_bool_period(cls, v):
        if isinstance(v, bool):
            raise ValueError("period must be a number between 1 and 7")
        return v


# ✅ modify request: only the lists can change
class ModifyAttendanceRequest(BaseModel):
    presents: RollInput = None
    absentees: RollInput = None


# ✅ stored record
class PeriodAttendance(BaseModel):
    id: int
    department: str
    semester: str
    shift: str
    subject: str
    period: int
    date: dt.date
    presents: List[str]
    absentees: List[str]

    model_config = ConfigDict(from_attributes=True)
