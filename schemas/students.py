from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

from schemas.common import Shift, StudentStatus


# ✅ input (POST)
class StudentCreate(BaseModel):
    pin: str = Field(..., min_length=1)          # full PIN
    short_pin: str = Field(..., min_length=1)    # display alias
    name: str = Field(..., min_length=1)
    department: str = "cme"
    year: str
    semester: str
    shift: Shift
    status: StudentStatus = "active"

    model_config = ConfigDict(str_strip_whitespace=True)


# ✅ partial update (PUT); pin is immutable
class StudentUpdate(BaseModel):
    short_pin: Optional[str] = None
    name: Optional[str] = None
    department: Optional[str] = None
    year: Optional[str] = None
    semester: Optional[str] = None
    shift: Optional[Shift] = None
    status: Optional[StudentStatus] = None

    model_config = ConfigDict(str_strip_whitespace=True)


class StudentStatusUpdate(BaseModel):
    status: StudentStatus


# ✅ output
class Student(StudentCreate):
    id: int

    model_config = ConfigDict(from_attributes=True)
