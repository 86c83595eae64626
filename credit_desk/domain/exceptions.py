"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidApplicantError(DomainException):
    """Applicant profile cannot be scored (e.g. zero monthly income)"""

    pass


class ImportParseError(DomainException):
    """Import batch is empty or structurally unusable; no rows were processed"""

    pass


class UnsupportedFileError(ImportParseError):
    """Uploaded file type is not one of the supported spreadsheet formats"""

    pass


class InsufficientDataError(DomainException):
    """Not enough data to generate a report"""

    pass
