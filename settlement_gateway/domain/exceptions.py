"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class BackofficeAPIError(DomainException):
    """Back-office API returned an error or is unavailable"""

    pass


class ResourceNotFoundError(DomainException):
    """Account or order does not exist in the back office"""

    pass


class InvalidBackofficeDataError(DomainException):
    """Back-office payload is malformed or invalid"""

    pass
