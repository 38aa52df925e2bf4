"""
Verification Models
===================
Result types returned by token verification.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


class VerifyFailure(str, Enum):
    """Why a token was rejected."""
    MALFORMED = "malformed_token"
    UNKNOWN_ALGORITHM = "unknown_algorithm"
    EXPIRED = "expired"
    BAD_SIGNATURE = "bad_signature"


@dataclass(frozen=True)
class VerifyResult:
    """Outcome of a single verification pass."""
    valid: bool
    payload: Optional[Dict[str, str]] = None
    reason: Optional[VerifyFailure] = None

    @classmethod
    def ok(cls, payload: Dict[str, str]) -> "VerifyResult":
        return cls(valid=True, payload=payload)

    @classmethod
    def fail(cls, reason: VerifyFailure) -> "VerifyResult":
        return cls(valid=False, reason=reason)

    def __bool__(self) -> bool:
        return self.valid
