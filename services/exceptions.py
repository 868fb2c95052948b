class AttendanceError(Exception):
    """Base class for errors reported back to the caller without a state change."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AttendanceValidationError(AttendanceError):
    """Missing or malformed scope fields, period out of range, bad date."""

    status_code = 400
    code = "VALIDATION_ERROR"


class UnknownIdentifierError(AttendanceError):
    """An identifier is not part of the active roster for the class."""

    status_code = 400
    code = "UNKNOWN_IDENTIFIER"

    def __init__(self, identifiers):
        self.identifiers = list(identifiers)
        super().__init__(f"Unknown roll numbers: {', '.join(self.identifiers)}")


class DuplicateRecordError(AttendanceError):
    """The composite key (or a unique student PIN) already exists."""

    status_code = 409
    code = "CONFLICT"


class NotFoundError(AttendanceError):
    status_code = 404
    code = "NOT_FOUND"
