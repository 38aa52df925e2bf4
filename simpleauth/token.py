"""
Token Codec
===========
Wire format of a signed token: ``ALG,TS,DATA,HEXHASH``.

DATA is the canonical payload encoding, which percent-escapes commas,
so a well-formed token always has exactly four top-level fields.
"""

import binascii
import re
from dataclasses import dataclass
from typing import Union

from .algorithms import HashAlg, for_name
from .exceptions import MalformedToken

FIELD_SEPARATOR = ","
FIELD_COUNT = 4

_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1
_TIMESTAMP = re.compile(r"[+-]?[0-9]+")
_HEX = re.compile(r"(?:[0-9A-Fa-f]{2})*")


@dataclass(frozen=True)
class Token:
    """A parsed or freshly signed token."""
    alg: HashAlg
    timestamp: int
    data: str
    signature: bytes

    @classmethod
    def parse(cls, token: str) -> "Token":
        return parse_token(token)

    def to_string(self) -> str:
        return format_token(self.alg, self.timestamp, self.data, self.signature)

    def __str__(self) -> str:
        return self.to_string()


def format_token(
    alg: Union[HashAlg, str],
    timestamp: int,
    data: str,
    signature: bytes,
) -> str:
    """
    Serialize token fields.

    Args:
        alg: Hash algorithm
        timestamp: Issue time in Unix seconds
        data: Canonical payload encoding
        signature: Raw HMAC bytes

    Returns:
        Token string with uppercase hex hash
    """
    alg = for_name(alg)
    return FIELD_SEPARATOR.join((
        alg.value,
        str(int(timestamp)),
        data,
        signature.hex().upper(),
    ))


def parse_token(token: str) -> Token:
    """
    Split a token string into its fields.

    Args:
        token: Token as received

    Returns:
        Parsed Token

    Raises:
        MalformedToken: Wrong field count, bad timestamp or bad hex
        UnknownAlgorithm: Algorithm name not registered
    """
    if not isinstance(token, str):
        raise MalformedToken(f"Token must be str, got {type(token).__name__}")

    fields = token.split(FIELD_SEPARATOR)
    if len(fields) != FIELD_COUNT:
        raise MalformedToken(
            f"Expected {FIELD_COUNT} fields, got {len(fields)}", token=token
        )
    alg_name, ts_text, data, hash_hex = fields

    alg = for_name(alg_name)

    if not _TIMESTAMP.fullmatch(ts_text):
        raise MalformedToken(f"Invalid timestamp {ts_text!r}", token=token)
    timestamp = int(ts_text)
    if not _INT64_MIN <= timestamp <= _INT64_MAX:
        raise MalformedToken(f"Timestamp out of range: {ts_text}", token=token)

    if not _HEX.fullmatch(hash_hex):
        raise MalformedToken("Hash is not valid hex", token=token)
    try:
        signature = binascii.unhexlify(hash_hex)
    except binascii.Error as e:
        raise MalformedToken(f"Hash is not valid hex: {e}", token=token) from e

    return Token(alg=alg, timestamp=timestamp, data=data, signature=signature)
