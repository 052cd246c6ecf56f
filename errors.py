class LedgerError(ValueError):
    pass


class FormatError(LedgerError):
    """Malformed money or date input. Callers are expected to pre-validate."""


class NotFoundError(LedgerError):
    """Target row is absent or belongs to another owner."""


class PersistenceError(LedgerError):
    """Storage reported nothing written for an operation assumed to succeed."""


class RangeError(LedgerError):
    """A share was demanded while the selected total is zero."""
