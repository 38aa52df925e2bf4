"""
Canonical Payload Encoding
==========================
Order-preserving form encoding of the optional token payload.

The encoded string is what gets hashed, so it must be byte-for-byte
deterministic: pairs keep insertion order and quoting matches the
``application/x-www-form-urlencoded`` flavour used by other SimpleAuth
implementations (space as ``+``, only ``A-Z a-z 0-9 . - * _`` left bare).
"""

import re
from typing import Dict, Mapping, Optional
from urllib.parse import quote_plus, unquote_to_bytes

from .exceptions import EncodingError

PAIR_SEPARATOR = "&"
KEY_VALUE_SEPARATOR = "="

# '%' not followed by two hex digits
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def form_quote(text: str) -> str:
    """
    Form-encode a single key or value.

    Args:
        text: Raw key or value

    Returns:
        Percent-encoded text with spaces as '+'
    """
    if not isinstance(text, str):
        raise EncodingError(f"Payload keys and values must be str, got {type(text).__name__}")
    try:
        quoted = quote_plus(text, safe="*", encoding="utf-8", errors="strict")
    except UnicodeEncodeError as e:
        raise EncodingError(f"Cannot encode payload text: {e}") from e
    # quote_plus never escapes '~'
    return quoted.replace("~", "%7E")


def form_unquote(text: str) -> str:
    """
    Reverse form_quote().

    Raises:
        EncodingError: On a broken escape or non UTF-8 bytes
    """
    if _BAD_ESCAPE.search(text):
        raise EncodingError(f"Malformed percent-encoding in {text!r}")
    try:
        return unquote_to_bytes(text.replace("+", " ")).decode("utf-8")
    except UnicodeDecodeError as e:
        raise EncodingError(f"Payload is not valid UTF-8: {e}") from e


def encode_payload(payload: Optional[Mapping[str, str]]) -> str:
    """
    Encode a payload mapping into its canonical string.

    Args:
        payload: Ordered mapping of str keys to str values, or None

    Returns:
        "k1=v1&k2=v2" in insertion order, "" for an empty payload
    """
    if not payload:
        return ""
    return PAIR_SEPARATOR.join(
        f"{form_quote(key)}{KEY_VALUE_SEPARATOR}{form_quote(value)}"
        for key, value in payload.items()
    )


def decode_payload(data: str) -> Dict[str, str]:
    """
    Decode a canonical payload string back into an ordered dict.

    Scans left to right: '=' turns the buffer into the pending key,
    '&' turns it into the value and emits the pair (even when empty).
    At the end, a pending key gets the remaining buffer as its value
    ("k=" gives ""), and a trailing bare segment without '=' is a key
    mapped to "". A repeated key keeps its first position and takes
    the last value.

    Args:
        data: Encoded payload

    Returns:
        Decoded payload (empty dict for "")

    Raises:
        EncodingError: If any key or value has malformed percent-encoding
    """
    payload: Dict[str, str] = {}
    if not data:
        return payload

    buffer = []
    key = ""
    reading_value = False
    for char in data:
        if char == KEY_VALUE_SEPARATOR:
            key = form_unquote("".join(buffer))
            buffer.clear()
            reading_value = True
        elif char == PAIR_SEPARATOR:
            payload[key] = form_unquote("".join(buffer))
            buffer.clear()
            key = ""
            reading_value = False
        else:
            buffer.append(char)

    if reading_value:
        payload[key] = form_unquote("".join(buffer))
    elif buffer:
        payload[form_unquote("".join(buffer))] = ""

    return payload
