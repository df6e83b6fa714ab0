from __future__ import annotations

from datetime import UTC, datetime

import pytest

from claimwise.domain.errors import InvalidInputError
from claimwise.domain.ownership import OwnershipRegistrar
from tests.helpers.fakes import FakeUnitOfWork

FIXED_NOW = datetime(2024, 3, 20, 12, 0, tzinfo=UTC)


def _registrar(uow: FakeUnitOfWork) -> OwnershipRegistrar:
    return OwnershipRegistrar(lambda: uow, clock=lambda: FIXED_NOW)


def test_first_claim_binds_secondary_key() -> None:
    uow = FakeUnitOfWork()

    bound = _registrar(uow).claim("stripe:cus_1", "acct-a")

    assert bound == "acct-a"
    claim = uow.claims.get("stripe:cus_1")
    assert claim is not None
    assert claim.secondary_key == "acct-a"
    assert claim.claimed_at == FIXED_NOW
    assert uow.commits == 1


def test_later_claim_returns_existing_owner() -> None:
    uow = FakeUnitOfWork()
    registrar = _registrar(uow)
    registrar.claim("stripe:cus_1", "acct-a")

    bound = registrar.claim("stripe:cus_1", "acct-b")

    assert bound == "acct-a"
    claim = registrar.lookup("stripe:cus_1")
    assert claim is not None
    assert claim.is_owned_by("acct-a")
    assert not claim.is_owned_by("acct-b")


def test_reclaim_by_owner_is_accepted_again() -> None:
    uow = FakeUnitOfWork()
    registrar = _registrar(uow)

    assert registrar.claim("p1", "s1") == "s1"
    assert registrar.claim("p1", "s1") == "s1"


def test_lookup_unknown_primary_key_returns_none() -> None:
    assert _registrar(FakeUnitOfWork()).lookup("missing") is None


@pytest.mark.parametrize(
    ("primary_key", "secondary_key"),
    [("", "s1"), ("p1", ""), ("   ", "s1"), ("p1", None)],
)
def test_claim_rejects_empty_keys(primary_key: str, secondary_key: str | None) -> None:
    uow = FakeUnitOfWork()

    with pytest.raises(InvalidInputError):
        _registrar(uow).claim(primary_key, secondary_key)  # type: ignore[arg-type]

    assert uow.claims.claims == {}
    assert uow.commits == 0
