class DomainError(Exception):
    """Base exception for analytics rule violations."""


class ValidationError(DomainError):
    """Raised when configuration or request parameters are invalid."""


class ContractViolationError(DomainError):
    """Raised when a caller breaks the engine's input contract.

    Example: records for several student/course pairs passed to a single
    assessment call. This is a programming error, not a data issue.
    """
