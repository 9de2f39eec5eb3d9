"""
backend/app/services/ledger_errors.py

Purpose:
    Error taxonomy for the wager lifecycle engine. Every failure is raised
    synchronously to the caller; the engine never retries. The FastAPI app
    maps ``status_code``/``kind`` to a JSON response.
"""


class LedgerError(Exception):
    status_code = 400
    kind = "ledger_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LedgerError):
    """Missing or malformed input; raised before any store is touched."""

    kind = "validation_error"


class NotFoundError(LedgerError):
    """No pending game/record matched the criteria; nothing was mutated."""

    kind = "not_found"


class PartitionError(LedgerError):
    """Winner name matched none, or all, of the matched wagers."""

    kind = "partition_error"


class StoreCorruptError(LedgerError):
    """A stored collection could not be read back into ledger records."""

    status_code = 500
    kind = "store_corrupt"
