"""
Error taxonomy of the fine ledger.

Every error carries a stable kind, a human-readable message and
the HTTP status the API layer maps it to. Messages never contain
query text or other storage internals.
"""


class FineLedgerError(Exception):
    """Base class for all ledger errors."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def kind(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class ValidationError(FineLedgerError):
    """Malformed or missing input."""
    status_code = 400


class NotFoundError(FineLedgerError):
    """A referenced violation or vehicle does not exist."""
    status_code = 404


class OverpaymentError(FineLedgerError):
    """A payment exceeds the remaining balance of its violation."""
    status_code = 400


class AmountMismatchError(FineLedgerError):
    """A bulk settlement total differs from the sum of remaining balances."""
    status_code = 400


class ConcurrencyConflict(FineLedgerError):
    """Another writer changed the same violation; safe to retry once."""
    status_code = 409


class PersistenceError(FineLedgerError):
    """The storage layer failed and the transaction was rolled back."""
    status_code = 500
