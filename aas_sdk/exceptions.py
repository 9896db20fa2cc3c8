"""Exception classes raised by the AAS client."""

from typing import Any, Optional


class AasError(Exception):
    """
    Base exception class for all AAS client errors.
    """
    pass


class AuthError(AasError):
    """
    Raised when the client-credentials grant is rejected or credentials are missing.
    """

    def __init__(self, message: str, payload: Any = None):
        super().__init__(message)
        self.payload = payload


class TokenExpiredError(AasError):
    """
    Raised when the service reports an invalid or expired access token.

    Consumed by ApiClient, which refreshes the token and retries once.
    """

    def __init__(self, message: str, payload: Any = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.payload = payload
        self.status_code = status_code


class RemoteError(AasError):
    """
    Raised for any error reported by the service, or when it cannot be reached.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        payload: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.payload = payload


class LocalIOError(AasError):
    """
    Raised when a local file cannot be read for upload.
    """

    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path


class ConfigError(AasError):
    """
    Raised when a setting (environment variable, config file value or flag) is not valid.
    """

    def __init__(self, message: str, name: str):
        super().__init__(message)
        self.name = name
