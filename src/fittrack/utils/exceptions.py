"""Custom exceptions for the FitTrack ledger."""


class FitTrackError(Exception):
    """Base exception for all FitTrack errors."""

    pass


class ConfigurationError(FitTrackError):
    """Raised when there is a configuration error."""

    pass


class StorageError(FitTrackError):
    """Raised when the key/value store refuses a write."""

    pass


class ValidationError(FitTrackError):
    """Raised when user input fails validation."""

    pass
