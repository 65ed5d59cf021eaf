class LedgerError(Exception):
    """Base class for errors raised by the ledger."""

class AccountNotFoundError(LedgerError):
    """Raised when an account id is missing from the account set."""

class InvalidInputError(LedgerError, ValueError):
    """Raised when a mutation is given a non-positive amount or a bad field."""

class InvalidFormatError(LedgerError, ValueError):
    """Raised when an imported snapshot lacks accounts/transactions or is malformed."""

class MirrorFailure(LedgerError):
    """Transport failure while mirroring a snapshot. Logged, never raised to callers."""
