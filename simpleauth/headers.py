"""
Header Functions
================
Carry a token as ``Authentication: torch <token>``.
"""

from typing import Dict, Optional

HTTP_HEADER = "Authentication"
SCHEME = "torch"


def build_auth_value(token: str) -> str:
    """Format the header value for a token."""
    return f"{SCHEME} {token}"


def create_auth_header(token: str) -> Dict[str, str]:
    """
    Create headers for an authenticated request.

    Args:
        token: Signed token

    Returns:
        Dictionary of headers to include in request
    """
    return {HTTP_HEADER: build_auth_value(token)}


def parse_auth_value(value: Optional[str]) -> Optional[str]:
    """
    Extract the token from a header value.

    Args:
        value: Raw header value, e.g. "torch SHA256,..."

    Returns:
        The token, or None if the scheme is missing/different or the
        token is empty
    """
    if not value:
        return None
    scheme, _, token = value.strip().partition(" ")
    if scheme.lower() != SCHEME:
        return None
    token = token.strip()
    return token or None
