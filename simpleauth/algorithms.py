"""
Algorithm Registry
==================
Supported keyed-hash algorithms and their HMAC factories.
"""

import hmac
from enum import Enum
from typing import Dict, Optional, Union

from .exceptions import ConfigurationError, UnknownAlgorithm


class HashAlg(str, Enum):
    """Keyed-hash algorithms, valued by their wire name."""
    SHA256 = "SHA256"
    SHA512 = "SHA512"

    @property
    def digest_name(self) -> str:
        """hashlib name of the underlying digest."""
        return _DIGESTS[self]

    @property
    def mac_name(self) -> str:
        """Conventional HMAC name (e.g. HmacSHA256)."""
        return f"Hmac{self.value}"

    def new_mac(self, key: bytes) -> "MacContext":
        """
        Create a fresh keyed-hash context.

        Args:
            key: Pre-shared key bytes

        Returns:
            Single-use MacContext
        """
        return MacContext(self, key)


_DIGESTS: Dict[HashAlg, str] = {
    HashAlg.SHA256: "sha256",
    HashAlg.SHA512: "sha512",
}


class MacContext:
    """
    Accumulating HMAC computation.

    update() may be called any number of times; finish() returns the
    digest and spends the context.
    """

    def __init__(self, alg: HashAlg, key: bytes):
        self.alg = alg
        self._mac: Optional["hmac.HMAC"] = hmac.new(key, digestmod=alg.digest_name)

    def update(self, data: bytes) -> "MacContext":
        if self._mac is None:
            raise RuntimeError("MacContext already finished")
        self._mac.update(data)
        return self

    def finish(self) -> bytes:
        if self._mac is None:
            raise RuntimeError("MacContext already finished")
        digest = self._mac.digest()
        self._mac = None
        return digest


def for_name(name: Union[str, HashAlg]) -> HashAlg:
    """
    Resolve an algorithm by its wire name.

    Args:
        name: Exact, case-sensitive name such as "SHA256"

    Returns:
        The matching HashAlg

    Raises:
        UnknownAlgorithm: If the name is not registered
    """
    if isinstance(name, HashAlg):
        return name
    if not isinstance(name, str):
        raise UnknownAlgorithm(name)
    try:
        return HashAlg(name)
    except ValueError:
        raise UnknownAlgorithm(name) from None


def _check_available() -> None:
    """Fail at import if the runtime lacks any registered digest."""
    for alg in HashAlg:
        try:
            hmac.new(b"", digestmod=alg.digest_name)
        except (ValueError, TypeError) as e:
            raise ConfigurationError(
                f"{alg.mac_name} is not available in this runtime: {e}"
            ) from e


_check_available()
