"""Ownership claims: registrar primitive and conflict detection."""

from __future__ import annotations

from .detector import Accepted, ClaimDecision, ClaimOutcome, ConflictDetector, Rejected
from .registrar import OwnershipRegistrar

__all__ = [
    "Accepted",
    "ClaimDecision",
    "ClaimOutcome",
    "ConflictDetector",
    "OwnershipRegistrar",
    "Rejected",
]
