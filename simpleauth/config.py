"""
SimpleAuth Configuration
========================
Immutable signer/verifier configuration and environment loading.
"""

import dataclasses
import os
from dataclasses import dataclass
from typing import Optional, Union

from .algorithms import HashAlg, for_name
from .exceptions import ConfigurationError, UnknownAlgorithm

DEFAULT_EXPIRE = 5 * 60  # 5 minutes
# Effectively "never expires"
MAX_EXPIRE = 2 ** 31 - 1
DEFAULT_ALGORITHM = HashAlg.SHA256
ENV_PREFIX = "SIMPLEAUTH_"


@dataclass(frozen=True)
class AuthConfig:
    """
    Pre-shared key, expiry window and default algorithm.

    Instances are immutable; a signer swaps the whole value to rotate
    the key or change the window.
    """
    pre_shared_key: str = ""
    expire: int = DEFAULT_EXPIRE
    algorithm: Union[HashAlg, str] = DEFAULT_ALGORITHM

    def __post_init__(self):
        if self.pre_shared_key is None:
            object.__setattr__(self, "pre_shared_key", "")
        elif not isinstance(self.pre_shared_key, str):
            raise ConfigurationError("pre_shared_key must be a string")

        if isinstance(self.expire, bool) or not isinstance(self.expire, int):
            raise ConfigurationError(f"expire must be an integer, got {self.expire!r}")
        if self.expire <= 0:
            raise ConfigurationError("expire must be greater than 0")

        try:
            object.__setattr__(self, "algorithm", for_name(self.algorithm))
        except UnknownAlgorithm as e:
            raise ConfigurationError(str(e)) from e

    @property
    def key_bytes(self) -> bytes:
        return self.pre_shared_key.encode("utf-8")

    def replace(self, **changes) -> "AuthConfig":
        """Return a validated copy with the given fields changed."""
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX) -> "AuthConfig":
        """
        Load configuration from environment variables.

        Reads {prefix}PRE_SHARED_KEY, {prefix}EXPIRE and {prefix}ALGORITHM;
        missing variables fall back to the defaults.

        Raises:
            ConfigurationError: If a variable holds an invalid value
        """
        expire_text: Optional[str] = os.getenv(f"{prefix}EXPIRE")
        try:
            expire = int(expire_text) if expire_text else DEFAULT_EXPIRE
        except ValueError as e:
            raise ConfigurationError(
                f"{prefix}EXPIRE must be an integer, got {expire_text!r}"
            ) from e

        return cls(
            pre_shared_key=os.getenv(f"{prefix}PRE_SHARED_KEY", ""),
            expire=expire,
            algorithm=os.getenv(f"{prefix}ALGORITHM", DEFAULT_ALGORITHM.value),
        )
