"""Custom exception hierarchy for microlend."""


class MicrolendError(Exception):
    """Base exception for all microlend errors."""


class ValidationError(MicrolendError):
    """Raised when input is rejected before any state is touched."""


class EntityNotFoundError(MicrolendError):
    """Raised when a referenced entity does not exist."""


class LoanNotFoundError(EntityNotFoundError):
    """Raised when a loan id is unknown."""


class CollectorNotFoundError(EntityNotFoundError):
    """Raised when a collector id is unknown."""


class InvestorNotFoundError(EntityNotFoundError):
    """Raised when an investor id is unknown."""


class ReferentialIntegrityError(EntityNotFoundError):
    """Raised when a foreign key reference is violated."""


class InvalidEntityStateError(MicrolendError):
    """Raised when an entity is in an invalid state for the operation."""


class PayrollAlreadyProcessedError(InvalidEntityStateError):
    """Raised when payroll for a month has already been written."""


class PersistenceError(MicrolendError):
    """Raised when the backing store fails to read or write."""


class ConfigurationError(MicrolendError):
    """Raised when configuration is invalid or missing."""


class SinkError(MicrolendError):
    """Raised when an event sink operation fails."""
