"""
Pre-shared Key Generation
=========================
"""

import secrets

from .exceptions import ConfigurationError

# Excludes visually similar characters (0, O, 1, l)
KEY_ALPHABET = (
    "23456789"
    "ABCDEFGHIJKLMNPQRSTUVWXYZ"
    "abcdefghijkmnopqrstuvwxyz"
    "#$!:.=+-/_"
)
DEFAULT_KEY_LENGTH = 32


def generate_random_key(length: int = DEFAULT_KEY_LENGTH) -> str:
    """
    Generate a random pre-shared key.

    Args:
        length: Number of characters

    Returns:
        Key drawn uniformly from KEY_ALPHABET
    """
    if length <= 0:
        raise ConfigurationError("Key length must be greater than 0")
    return "".join(secrets.choice(KEY_ALPHABET) for _ in range(length))
