"""
SimpleAuth Exceptions
=====================
Exception classes for token signing, parsing and configuration.
"""

from typing import Optional


class SimpleAuthError(Exception):
    """Base exception for all SimpleAuth errors."""
    pass


class ConfigurationError(SimpleAuthError):
    """Raised when configuration is invalid (fail-fast at setup time)."""
    pass


class SigningError(SimpleAuthError):
    """Raised when a token cannot be produced."""
    pass


class EncodingError(SigningError):
    """Raised when a payload cannot be form-encoded or decoded."""
    pass


class MalformedToken(SimpleAuthError):
    """Raised when a token string does not follow the wire format."""

    def __init__(self, message: str, token: Optional[str] = None):
        super().__init__(message)
        self.token = token


class UnknownAlgorithm(MalformedToken, SigningError):
    """Raised when an algorithm name is not registered."""

    def __init__(self, name: object):
        super().__init__(f"Unknown algorithm: {name!r}")
        self.name = name


class TokenExpired(SimpleAuthError):
    """Raised by SimpleAuth.require() when a token is past its window."""
    pass


class InvalidSignature(SimpleAuthError):
    """Raised by SimpleAuth.require() when the hash does not match."""
    pass
