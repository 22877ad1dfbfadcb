"""
Tether.name MCP server exceptions.
"""

from typing import Optional


class TetherError(Exception):
    """Base exception for all Tether.name MCP server errors."""

    def __init__(self, message: str, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ConfigError(TetherError):
    """Exception raised when required configuration is missing or invalid."""

    def __init__(self, message: str, missing: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.missing = missing


class TetherKeyError(TetherError):
    """Exception raised when there's an issue with the private key."""
    pass


class KeyNotFoundError(TetherKeyError):
    """Exception raised when the private key file does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Private key file not found: {path}")
        self.path = path


class KeyFormatError(TetherKeyError):
    """Exception raised when key bytes do not parse as an RSA private key."""
    pass


class SigningError(TetherKeyError):
    """Exception raised when a challenge cannot be signed."""
    pass


class NetworkError(TetherError):
    """Exception raised when the Tether.name API cannot be reached."""

    def __init__(self, message: str, timeout: bool = False) -> None:
        super().__init__(message)
        self.timeout = timeout


class ServiceError(TetherError):
    """Exception raised when the Tether.name API returns an error."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_text: Optional[str] = None
    ) -> None:
        super().__init__(message, details=response_text)
        self.status_code = status_code
        self.response_text = response_text


class InvalidArgumentsError(TetherError):
    """Exception raised when a tool is called with missing or invalid arguments."""
    pass
