"""
SimpleAuth
==========
Stateless, time-bounded HMAC tokens with a pre-shared key.

    auth = SimpleAuth(AuthConfig(pre_shared_key="secret"))
    token = auth.sign({"user": "lazaro"})
    auth.decode(token)  # {"user": "lazaro"}
"""

__version__ = "1.0.0"

from .algorithms import HashAlg, MacContext, for_name
from .config import AuthConfig, DEFAULT_EXPIRE, MAX_EXPIRE
from .encoding import decode_payload, encode_payload
from .exceptions import (
    ConfigurationError,
    EncodingError,
    InvalidSignature,
    MalformedToken,
    SigningError,
    SimpleAuthError,
    TokenExpired,
    UnknownAlgorithm,
)
from .headers import HTTP_HEADER, SCHEME, create_auth_header, parse_auth_value
from .keys import generate_random_key
from .models import VerifyFailure, VerifyResult
from .signer import SimpleAuth, compute_mac
from .token import Token, format_token, parse_token

__all__ = [
    # Algorithms
    "HashAlg",
    "MacContext",
    "for_name",
    # Config
    "AuthConfig",
    "DEFAULT_EXPIRE",
    "MAX_EXPIRE",
    # Encoding
    "encode_payload",
    "decode_payload",
    # Exceptions
    "SimpleAuthError",
    "ConfigurationError",
    "SigningError",
    "EncodingError",
    "MalformedToken",
    "UnknownAlgorithm",
    "TokenExpired",
    "InvalidSignature",
    # Headers
    "HTTP_HEADER",
    "SCHEME",
    "create_auth_header",
    "parse_auth_value",
    # Keys
    "generate_random_key",
    # Models
    "VerifyFailure",
    "VerifyResult",
    # Signer
    "SimpleAuth",
    "compute_mac",
    # Token
    "Token",
    "format_token",
    "parse_token",
]
