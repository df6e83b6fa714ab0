"""JSON Lines batch format for record ingestion.

One object per line::

    {"entity_key": "emp1", "observed_at": "2024-03-20T00:00:00Z",
     "payload": {"title": "engineer"}, "status": "unresolved"}

``payload`` defaults to an empty object and ``status`` to ``unresolved``.
Blank lines and lines starting with ``#`` are skipped.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from claimwise.domain.errors import InvalidInputError
from claimwise.domain.model import RecordStatus
from claimwise.domain.records import RecordDraft

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path


class RecordLine(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    entity_key: str = Field(min_length=1)
    observed_at: datetime
    payload: dict[str, Any] = Field(default_factory=dict)
    status: Literal["unresolved", "processed"] = "unresolved"

    @field_validator("observed_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def to_draft(self) -> RecordDraft:
        return RecordDraft(
            entity_key=self.entity_key,
            observed_at=self.observed_at,
            payload=self.payload,
            status=RecordStatus(self.status),
        )


def parse_record_lines(lines: Iterable[str]) -> list[RecordDraft]:
    """Validate every line and return drafts in file order."""

    drafts: list[RecordDraft] = []
    for line_number, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        try:
            parsed = RecordLine.model_validate_json(line)
        except ValidationError as exc:
            raise InvalidInputError(f"Invalid record on line {line_number}: {exc}") from exc
        drafts.append(parsed.to_draft())
    return drafts


def read_record_file(path: Path) -> list[RecordDraft]:
    with path.open(encoding="utf-8") as handle:
        return parse_record_lines(handle)
