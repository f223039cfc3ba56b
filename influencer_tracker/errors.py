"""
Typed exceptions shared by services and routes.

Every error carries the HTTP status the route layer should answer with.
"""


class TrackerError(Exception):
    """Base exception for influencer-tracker errors."""
    status_code = 500

    def __init__(self, message):
        self.message = message
        super().__init__(message)


class ValidationError(TrackerError):
    """Request input is missing or malformed."""
    status_code = 400


class NotFoundError(TrackerError):
    """Influencer or scrap job does not exist."""
    status_code = 404


class ConflictError(TrackerError):
    """Duplicate influencer, or a sync of the same kind is already running."""
    status_code = 409


class UnsupportedPlatformError(TrackerError):
    """No scraper is registered for the platform."""
    status_code = 400

    def __init__(self, platform):
        self.platform = platform
        super().__init__(f"Unsupported platform: {platform}")


class ScraperConfigError(TrackerError):
    """Scraper credentials are not configured."""
    status_code = 500


class ScraperRequestError(TrackerError):
    """The provider rejected or timed out a trigger request."""
    status_code = 502

    def __init__(self, message, status=None):
        self.status = status
        super().__init__(message)
