# backend/services/errors.py


class PosError(Exception):
    """Base class for errors raised by the POS services."""


class ValidationError(PosError):
    """Bad input: malformed phone, insufficient tender, empty cart, bad line values.

    Raised before anything is written to the database.
    """


class StoreError(PosError):
    """Database read/write failure.

    `stage` names the write that failed ("order" or "items") so callers can
    tell a failed header insert from a failed item insert. The unit of work
    is rolled back in both cases.
    """

    def __init__(self, message: str, stage: str = None):
        super().__init__(message)
        self.stage = stage
