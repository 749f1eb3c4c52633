"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """Malformed input or a violated invariant.  Never retried."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class AvailabilityError(DomainException):
    """The requested quantity exceeds what is available for the window."""


class InvalidTransitionError(DomainException):
    """The action is not permitted from the order's current status."""


class UnauthorizedError(DomainException):
    """The actor has no rights over the order."""


class ConcurrencyConflictError(DomainException):
    """Another writer held the products being reserved."""
