"""Event records: ingestion, batch resolution and projection."""

from __future__ import annotations

from .ingest import RecordDraft, RecordIngestor
from .projection import StatusProjector
from .resolve import BatchResolver, ResolutionReport

__all__ = [
    "BatchResolver",
    "RecordDraft",
    "RecordIngestor",
    "ResolutionReport",
    "StatusProjector",
]
