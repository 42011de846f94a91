class WorkHoursError(ValueError):
    """Base class for failures reported to callers of the work-hours services."""


class NotFound(WorkHoursError):
    pass


class ValidationFailure(WorkHoursError):
    pass


class PermissionDenied(WorkHoursError):
    pass


class VersionConflict(WorkHoursError):
    def __init__(self, entry_id: int, expected: int, actual: int):
        super().__init__(
            f"Work hours entry {entry_id} changed (expected version {expected}, found {actual})"
        )
        self.entry_id = entry_id
        self.expected = expected
        self.actual = actual


class EngineFailure(WorkHoursError):
    """Raised by payroll engines; contained by the payout scheduler."""


def to_http_exception(exc: WorkHoursError):
    from fastapi import HTTPException

    if isinstance(exc, NotFound):
        status_code = 404
    elif isinstance(exc, PermissionDenied):
        status_code = 403
    elif isinstance(exc, VersionConflict):
        status_code = 409
    elif isinstance(exc, ValidationFailure):
        status_code = 422
    else:
        status_code = 400
    return HTTPException(status_code=status_code, detail=str(exc))
