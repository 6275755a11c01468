# barbershop/errors.py

from fastapi import HTTPException


class ValidationError(HTTPException):
    def __init__(self, detail: str = "Invalid booking data"):
        super().__init__(status_code=400, detail=detail)


class PastDateError(HTTPException):
    def __init__(self, detail: str = "Cannot book an appointment in the past"):
        super().__init__(status_code=400, detail=detail)


class NotFoundError(HTTPException):
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=404, detail=detail)


class DuplicateSlotError(HTTPException):
    def __init__(self, detail: str = "This barber already has a booking at that time"):
        super().__init__(status_code=409, detail=detail)


class InvalidTransitionError(HTTPException):
    def __init__(self, current: str, requested: str):
        super().__init__(
            status_code=409,
            detail=f"Cannot change a {current} booking to {requested}",
        )


class InsufficientPointsError(HTTPException):
    def __init__(self, detail: str = "Not enough points"):
        super().__init__(status_code=400, detail=detail)


class DependencyFailure(Exception):
    """A notification or other side-effect provider failed.

    Never propagated to API callers; dispatch code catches and logs it.
    """
