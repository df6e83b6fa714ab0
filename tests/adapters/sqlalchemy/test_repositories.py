from __future__ import annotations

from datetime import UTC, datetime
from types import SimpleNamespace
from typing import TYPE_CHECKING, cast

import pytest

from claimwise.adapters.sqlalchemy.repositories import (
    SqlAlchemyEventRecordRepository,
    SqlAlchemyOwnershipClaimRepository,
)
from claimwise.domain.errors import UnsupportedBackendError
from claimwise.domain.model import EventRecord, RecordStatus

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

CLAIMED_AT = datetime(2024, 3, 19, tzinfo=UTC)


def _record(
    entity_key: str,
    day: int,
    status: RecordStatus = RecordStatus.UNRESOLVED,
) -> EventRecord:
    return EventRecord(
        entity_key=entity_key,
        observed_at=datetime(2024, 3, day, tzinfo=UTC),
        status=status,
    )


def test_claim_inserts_then_returns_existing_owner(sqlite_session: Session) -> None:
    repo = SqlAlchemyOwnershipClaimRepository(sqlite_session)

    assert repo.claim("p1", "s1", claimed_at=CLAIMED_AT) == "s1"
    assert repo.claim("p1", "s2", claimed_at=CLAIMED_AT) == "s1"
    sqlite_session.commit()

    claim = repo.get("p1")
    assert claim is not None
    assert claim.secondary_key == "s1"
    assert claim.claimed_at == CLAIMED_AT


def test_claim_keeps_primary_keys_independent(sqlite_session: Session) -> None:
    repo = SqlAlchemyOwnershipClaimRepository(sqlite_session)

    assert repo.claim("p1", "s1", claimed_at=CLAIMED_AT) == "s1"
    assert repo.claim("p2", "s2", claimed_at=CLAIMED_AT) == "s2"


def test_claim_on_unsupported_dialect_raises() -> None:
    bind = SimpleNamespace(dialect=SimpleNamespace(name="mysql"))
    session = cast("Session", SimpleNamespace(get_bind=lambda: bind))
    repo = SqlAlchemyOwnershipClaimRepository(session)

    with pytest.raises(UnsupportedBackendError) as excinfo:
        repo.claim("p1", "s1", claimed_at=CLAIMED_AT)

    assert excinfo.value.dialect == "mysql"


def test_add_many_assigns_increasing_ids(sqlite_session: Session) -> None:
    repo = SqlAlchemyEventRecordRepository(sqlite_session)
    records = [_record("e1", 1), _record("e1", 2), _record("e2", 1)]

    repo.add_many(records)

    ids = [record.id for record in records]
    assert all(record_id is not None for record_id in ids)
    assert ids == sorted(ids)


def test_ignore_dominated_by_processed_counts_rows(sqlite_session: Session) -> None:
    repo = SqlAlchemyEventRecordRepository(sqlite_session)
    processed = _record("e1", 2, RecordStatus.PROCESSED)
    older = _record("e1", 1)
    newer = _record("e1", 3)
    unrelated = _record("e2", 1)
    repo.add_many([processed, older, newer, unrelated])

    assert repo.ignore_dominated_by_processed(None) == 2
    assert repo.ignore_dominated_by_processed(None) == 0

    statuses = {record.id: record.status for record in repo.history("e1")}
    assert statuses == {
        older.id: RecordStatus.IGNORED,
        processed.id: RecordStatus.PROCESSED,
        newer.id: RecordStatus.IGNORED,
    }
    (untouched,) = repo.history("e2")
    assert untouched.status is RecordStatus.UNRESOLVED


def test_ignore_superseded_and_activate_survivors(sqlite_session: Session) -> None:
    repo = SqlAlchemyEventRecordRepository(sqlite_session)
    records = [_record("e1", 1), _record("e1", 3), _record("e1", 2), _record("e2", 5)]
    repo.add_many(records)

    assert repo.ignore_superseded(None) == 2
    assert repo.activate_survivors(None) == 2
    assert repo.activate_survivors(None) == 0

    assert repo.authoritative_by_entity(None) == {"e1": records[1].id, "e2": records[3].id}
    active = repo.authoritative("e1")
    assert active is not None
    assert active.id == records[1].id
    assert active.status is RecordStatus.ACTIVE


def test_activate_survivors_skips_entities_with_processed(sqlite_session: Session) -> None:
    repo = SqlAlchemyEventRecordRepository(sqlite_session)
    repo.add_many([_record("e1", 1, RecordStatus.PROCESSED), _record("e1", 2)])

    assert repo.activate_survivors(None) == 0


def test_bulk_passes_respect_entity_scope(sqlite_session: Session) -> None:
    repo = SqlAlchemyEventRecordRepository(sqlite_session)
    repo.add_many([_record("e1", 1), _record("e1", 2), _record("e2", 1), _record("e2", 2)])

    assert repo.ignore_superseded(["e2"]) == 1
    assert repo.activate_survivors(["e2"]) == 1
    assert set(repo.authoritative_by_entity(["e1", "e2"])) == {"e2"}
    assert {record.status for record in repo.history("e1")} == {RecordStatus.UNRESOLVED}


def test_authoritative_prefers_processed(sqlite_session: Session) -> None:
    repo = SqlAlchemyEventRecordRepository(sqlite_session)
    processed = _record("e1", 1, RecordStatus.PROCESSED)
    active = _record("e1", 2, RecordStatus.ACTIVE)
    repo.add_many([processed, active])

    result = repo.authoritative("e1")

    assert result is not None
    assert result.id == processed.id
    assert repo.authoritative("missing") is None
