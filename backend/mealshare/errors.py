"""Error taxonomy shared by services and routers.

Each error is an ``HTTPException`` so services can raise it directly and FastAPI
renders it with the matching status code. Charge computation never raises for
bad data rows; those are skipped (see ``charge_engine.SkipReason``).
"""
from fastapi import HTTPException, status


class ValidationError(HTTPException):
    """Malformed input, rejected before any mutation."""

    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class NotFoundError(HTTPException):
    """Referenced event, participant, selection or other row does not exist."""

    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ForbiddenError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class ConflictError(HTTPException):
    """Illegal state transition, blocked reset, or a lost race on the event lock."""

    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class EngineError(HTTPException):
    """Storage failed while loading charge inputs. No partial result is returned."""

    def __init__(self, detail: str = "Charge computation failed: storage unavailable"):
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)
