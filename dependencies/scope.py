from fastapi import Query

from schemas.common import ClassScope, Shift
from services.exceptions import AttendanceValidationError


def class_scope(
    department: str = Query(..., description="e.g. cme (case-insensitive)"),
    semester: str = Query(..., description='e.g. "4th semester"'),
    shift: Shift = Query(...),
) -> ClassScope:
    """department / semester / shift query params -> ClassScope"""
    department, semester = department.strip(), semester.strip()
    if not department or not semester:
        raise AttendanceValidationError("department, semester, shift are required")
    return ClassScope(department=department, semester=semester, shift=shift)
