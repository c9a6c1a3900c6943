"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class RecordNotFoundError(DomainException):
    """Row does not exist or belongs to another user"""

    pass


class PlanNotFoundError(RecordNotFoundError):
    """SIP plan does not exist for this user"""

    pass


class PlanClosedError(DomainException):
    """SIP plan already has an end date and cannot be superseded again"""

    pass


class InvalidRangeError(DomainException):
    """Unknown report range or inconsistent date bounds"""

    pass
