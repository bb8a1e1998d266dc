"""
This file contains custom, application-specific exceptions.
"""

class DataSourceError(Exception):
    """Raised when the persistence layer fails to read or write."""
    pass

class NotFoundError(Exception):
    """Raised when a referenced entity does not exist."""
    pass

class SessionNotFoundError(NotFoundError):
    """Raised when a session ID is not found in the database."""
    pass

class StudentNotFoundError(NotFoundError):
    """Raised when a student ID is not found in the database."""
    pass

class InvalidTimeError(ValueError):
    """Raised when a time-of-day string cannot be parsed or a span is inverted."""
    pass
