from __future__ import annotations

import logging

import pytest

from claimwise.domain.ownership import (
    Accepted,
    ClaimOutcome,
    ConflictDetector,
    OwnershipRegistrar,
    Rejected,
)
from tests.helpers.fakes import FakeUnitOfWork


@pytest.fixture
def detector() -> ConflictDetector:
    uow = FakeUnitOfWork()
    return ConflictDetector(OwnershipRegistrar(lambda: uow))


def test_first_claim_is_accepted(detector: ConflictDetector) -> None:
    decision = detector.accept("p1", "s1")

    assert decision == Accepted(primary_key="p1", secondary_key="s1")
    assert decision.outcome is ClaimOutcome.ACCEPTED


def test_claim_by_owner_is_accepted_again(detector: ConflictDetector) -> None:
    detector.accept("p1", "s1")

    assert isinstance(detector.accept("p1", "s1"), Accepted)


def test_competing_claim_is_rejected_with_owner(
    detector: ConflictDetector,
    caplog: pytest.LogCaptureFixture,
) -> None:
    detector.accept("p1", "s1")

    with caplog.at_level(logging.WARNING, logger="claimwise.domain.ownership.detector"):
        decision = detector.accept("p1", "s2")

    assert decision == Rejected(
        primary_key="p1",
        attempted_secondary_key="s2",
        owned_secondary_key="s1",
    )
    assert decision.outcome is ClaimOutcome.REJECTED
    assert "Ownership conflict" in caplog.text


def test_rejection_leaves_binding_untouched(detector: ConflictDetector) -> None:
    detector.accept("p1", "s1")
    detector.accept("p1", "s2")
    detector.accept("p1", "s3")

    assert detector.accept("p1", "s1") == Accepted(primary_key="p1", secondary_key="s1")
