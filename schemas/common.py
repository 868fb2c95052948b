"""
schemas/common.py

- Shared schemas used across the project (Pydantic v2)
- Contents:
  1) Standard error response: ErrorDetail, ErrorResponse
  2) CamelModel: base for response payloads rendered in camelCase
  3) ClassScope: department / semester / shift selection passed to every class query
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


Shift = Literal["1st shift", "2nd shift"]
StudentStatus = Literal["active", "inactive"]


# =========================================================
# 1) Standard error response
# =========================================================

class ErrorDetail(BaseModel):
    code: str = Field(..., description="Error code (e.g. VALIDATION_ERROR, CONFLICT)")
    message: str = Field(..., description="Human readable message")


class ErrorResponse(BaseModel):
    """
    Body returned by the global error handlers
    - middlewares/error_handler.py renders every failure with this schema
    """
    success: bool = False
    error: ErrorDetail
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Response creation time (UTC)"
    )

    model_config = ConfigDict(extra="ignore")


# =========================================================
# 2) camelCase payloads
# =========================================================

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


# =========================================================
# 3) Class selection
# =========================================================

class ClassScope(BaseModel):
    """
    The class a query is about.
    - department is compared case-insensitively by the store
    - semester must match the student's semester verbatim (e.g. "4th semester")
    """
    department: str = Field(..., min_length=1)
    semester: str = Field(..., min_length=1)
    shift: Shift

    model_config = ConfigDict(str_strip_whitespace=True)
