"""Exceptions raised by the analytics engine and its storage boundary."""


class AnalyticsError(Exception):
    """Base exception for analytics errors."""

    pass


class ValidationError(AnalyticsError):
    """Query parameters are missing or invalid. No computation was attempted."""

    def __init__(self, message, field=None):
        self.field = field
        super().__init__(message)


class StorageError(AnalyticsError):
    """Raw-row fetch or cache operation failed in the storage collaborator."""

    def __init__(self, message, original=None):
        self.original = original
        super().__init__(message)
