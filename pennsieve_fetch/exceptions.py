"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class PennsieveFetchError(Exception):
    """Base exception for all application-specific errors."""


class ConfigurationError(PennsieveFetchError):
    """Raised when the run configuration is missing or fails validation."""


class TransportError(PennsieveFetchError):
    """Raised when a Pennsieve API host cannot be reached at all."""

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class DownloadError(PennsieveFetchError):
    """
    Raised when the external download utility cannot be launched or exits
    with a non-zero status.
    """

    def __init__(
        self,
        message: str,
        returncode: int | None = None,
        stdout: str = "",
        stderr: str = "",
    ):
        super().__init__(message)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
