"""Custom exceptions for the net worth tracker."""


class TrackerError(Exception):
    """Base exception."""
    pass


class EntityNotFoundError(TrackerError):
    pass


class DuplicateEntityError(TrackerError):
    pass


class RateFetchError(TrackerError):
    pass


class PriceFetchError(TrackerError):
    pass


class DocumentError(TrackerError):
    """The persisted document could not be read or written."""
    pass
