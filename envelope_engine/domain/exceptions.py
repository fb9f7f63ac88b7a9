"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidFrequencyError(DomainException):
    """Frequency value is not a member of the expected enumeration"""

    pass


class InvalidCustomWeeksError(InvalidFrequencyError):
    """custom_weeks frequency given without a positive week count"""

    pass


class InvalidLevelingDataError(DomainException):
    """Leveling data does not cover exactly twelve months"""

    pass
