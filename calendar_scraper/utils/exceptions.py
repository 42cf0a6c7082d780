"""Custom exceptions for the calendar scraper."""


class ScraperException(Exception):
    """Base exception for scraper errors."""

    pass


class ScopeViolation(ScraperException):
    """Raised when a URL falls outside the allowed calendar domain."""

    pass


class FetchError(ScraperException):
    """Raised when a page cannot be retrieved."""

    def __init__(self, message: str = "", url: str = ""):
        super().__init__(message)
        self.url = url


class LoadError(ScraperException):
    """Raised when the batch load into storage fails."""

    pass


class StoreConflictError(LoadError):
    """Raised when a record key already exists in storage."""

    pass


class FatalInitError(ScraperException):
    """Raised when storage or proxy configuration is unusable at startup."""

    pass
