"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidRecordError(DomainException):
    """Raw record cannot be turned into a domain object at all"""

    pass


class InvalidSortError(DomainException):
    """Sort field or direction is not one the engine supports"""

    pass
