"""
Token Signer / Verifier
=======================
Issues time-bounded HMAC tokens and verifies them statelessly.

The MAC covers the issue timestamp (8-byte big-endian signed) followed
by the UTF-8 bytes of the canonical payload encoding:

    HMAC(key, ts || data)

Verification runs parse -> resolve algorithm -> check expiry ->
recompute -> compare, and never raises: every failure becomes an
invalid VerifyResult.
"""

import hmac
import threading
import time
from typing import Callable, Dict, Mapping, Optional, Union

import structlog

from .algorithms import HashAlg, for_name
from .config import AuthConfig
from .encoding import decode_payload, encode_payload
from .exceptions import (
    EncodingError,
    InvalidSignature,
    MalformedToken,
    SigningError,
    TokenExpired,
    UnknownAlgorithm,
)
from .keys import DEFAULT_KEY_LENGTH, generate_random_key
from .models import VerifyFailure, VerifyResult
from .token import format_token, parse_token

logger = structlog.get_logger(__name__)

Clock = Callable[[], int]


def system_clock() -> int:
    """Current Unix time in whole seconds."""
    return int(time.time())


def compute_mac(key: bytes, alg: HashAlg, timestamp: int, data: str) -> bytes:
    """
    Compute the token MAC.

    Args:
        key: Pre-shared key bytes
        alg: Hash algorithm
        timestamp: Issue time in Unix seconds (signed 64-bit)
        data: Canonical payload encoding

    Returns:
        Raw digest bytes
    """
    mac = alg.new_mac(key)
    mac.update(timestamp.to_bytes(8, "big", signed=True))
    mac.update(data.encode("utf-8"))
    return mac.finish()


class SimpleAuth:
    """
    Signs and verifies tokens against a swappable AuthConfig.

    Every call reads the configuration once, so key rotation from
    another thread applies to the next call and never mixes a new key
    with an old expiry.
    """

    def __init__(self, config: Optional[AuthConfig] = None, clock: Optional[Clock] = None):
        self._config = config or AuthConfig()
        self._clock = clock or system_clock
        self._lock = threading.Lock()

    @property
    def config(self) -> AuthConfig:
        return self._config

    @property
    def pre_shared_key(self) -> str:
        return self._config.pre_shared_key

    @property
    def expire(self) -> int:
        return self._config.expire

    @property
    def algorithm(self) -> HashAlg:
        return self._config.algorithm

    def configure(self, **changes) -> "SimpleAuth":
        """
        Atomically replace configuration fields.

        Raises:
            ConfigurationError: If the resulting configuration is invalid
        """
        with self._lock:
            self._config = self._config.replace(**changes)
        return self

    def set_pre_shared_key(self, key: Optional[str]) -> "SimpleAuth":
        self.configure(pre_shared_key=key)
        logger.info("pre_shared_key_rotated")
        return self

    def set_pre_shared_key_random(self, length: int = DEFAULT_KEY_LENGTH) -> "SimpleAuth":
        return self.set_pre_shared_key(generate_random_key(length))

    def set_expire(self, expire: int) -> "SimpleAuth":
        return self.configure(expire=expire)

    def set_algorithm(self, alg: Union[HashAlg, str]) -> "SimpleAuth":
        return self.configure(algorithm=alg)

    def _now(self, now: Optional[int]) -> int:
        return self._clock() if now is None else int(now)

    def sign(
        self,
        payload: Optional[Mapping[str, str]] = None,
        alg: Union[HashAlg, str, None] = None,
        now: Optional[int] = None,
    ) -> str:
        """
        Produce a signed token.

        Args:
            payload: Optional ordered key-value pairs to sign
            alg: Hash algorithm (defaults to the configured one)
            now: Issue time override in Unix seconds

        Returns:
            Token string "ALG,TS,DATA,HEXHASH"

        Raises:
            UnknownAlgorithm: If alg is not registered
            EncodingError: If the payload holds non-str keys or values
            SigningError: If the timestamp does not fit in 64 bits
        """
        config = self._config
        alg = config.algorithm if alg is None else for_name(alg)
        data = encode_payload(payload)
        timestamp = self._now(now)

        try:
            signature = compute_mac(config.key_bytes, alg, timestamp, data)
        except OverflowError as e:
            raise SigningError(f"Timestamp out of range: {timestamp}") from e

        return format_token(alg, timestamp, data, signature)

    def check(self, token: str, now: Optional[int] = None) -> VerifyResult:
        """
        Verify a token and report why it failed, if it did.

        Args:
            token: Token string from an untrusted source
            now: Verification time override in Unix seconds

        Returns:
            VerifyResult with the decoded payload when valid
        """
        config = self._config

        try:
            parsed = parse_token(token)
        except UnknownAlgorithm:
            return self._reject(VerifyFailure.UNKNOWN_ALGORITHM)
        except MalformedToken as e:
            return self._reject(VerifyFailure.MALFORMED, error=str(e))

        if parsed.timestamp + config.expire < self._now(now):
            return self._reject(
                VerifyFailure.EXPIRED,
                alg=parsed.alg.value,
                timestamp=parsed.timestamp,
            )

        try:
            expected = compute_mac(config.key_bytes, parsed.alg, parsed.timestamp, parsed.data)
        except UnicodeEncodeError:
            return self._reject(VerifyFailure.MALFORMED, error="payload is not encodable")

        if not hmac.compare_digest(expected, parsed.signature):
            return self._reject(
                VerifyFailure.BAD_SIGNATURE,
                alg=parsed.alg.value,
                timestamp=parsed.timestamp,
            )

        try:
            payload = decode_payload(parsed.data)
        except EncodingError as e:
            return self._reject(VerifyFailure.MALFORMED, error=str(e))

        return VerifyResult.ok(payload)

    def verify(self, token: str, now: Optional[int] = None) -> bool:
        """Return True if the token is genuine and unexpired."""
        return self.check(token, now).valid

    def decode(self, token: str, now: Optional[int] = None) -> Optional[Dict[str, str]]:
        """Return the signed payload, or None if verification fails."""
        return self.check(token, now).payload

    def require(self, token: str, now: Optional[int] = None) -> Dict[str, str]:
        """
        Verify a token, raising on failure.

        Raises:
            MalformedToken: Unparseable token or unknown algorithm
            TokenExpired: Token is past its expiry window
            InvalidSignature: Hash does not match
        """
        result = self.check(token, now)
        if result.valid:
            return result.payload
        if result.reason == VerifyFailure.EXPIRED:
            raise TokenExpired("Token expired")
        if result.reason == VerifyFailure.BAD_SIGNATURE:
            raise InvalidSignature("Token signature does not match")
        raise MalformedToken(f"Invalid token: {result.reason.value}")

    @staticmethod
    def _reject(reason: VerifyFailure, **context) -> VerifyResult:
        logger.debug("token_rejected", reason=reason.value, **context)
        return VerifyResult.fail(reason)
