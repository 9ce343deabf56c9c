"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidInputError(DomainException):
    """Arguments are malformed or out of range"""

    pass


class NotFoundError(DomainException):
    """Referenced entity does not exist"""

    pass


class PermissionDeniedError(DomainException):
    """Caller is not allowed to perform the action"""

    pass


class ConcurrencyConflictError(DomainException):
    """Record changed since it was read (version mismatch)"""

    pass
