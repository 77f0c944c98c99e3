from __future__ import annotations

from enum import Enum


class VerificationStatus(str, Enum):
    """Verification outcome fixed at clock-in and persisted by value."""

    # Reserved for a manual-review workflow; clock-in never produces it.
    PENDING = "PENDING"
    VERIFIED = "VERIFIED"
    OUT_OF_RANGE = "OUT_OF_RANGE"


class ShiftState(str, Enum):
    """Lifecycle state of a (worker, site) pair."""

    NO_OPEN_SHIFT = "NO_OPEN_SHIFT"
    OPEN = "OPEN"
