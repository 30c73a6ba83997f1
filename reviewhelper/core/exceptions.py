class ReviewHelperError(RuntimeError):
    """Base class for review helper failures."""


class ConfigurationError(ReviewHelperError):
    """Raised when the helper configuration cannot be loaded."""


class WaitError(ReviewHelperError):
    """Raised when a bounded wait does not produce a value."""


class WaitTimeoutError(WaitError):
    """Raised when a bounded wait passes its deadline."""


class WaitAbortedError(WaitError):
    """Raised when the conversation a wait belongs to has been closed."""
