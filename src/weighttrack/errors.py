class WeightTrackError(Exception):
    """Base exception for weighttrack."""


class ConfigurationError(WeightTrackError):
    """Raised when configuration is invalid or incomplete."""


class NotFoundError(WeightTrackError):
    """Raised when a weight entry or goal does not exist."""
