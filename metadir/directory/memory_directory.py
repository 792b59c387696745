"""In-memory metadata directory.

Keeps two indexes over the same set of records:

- a primary index mapping each source to its record
- a secondary index mapping each company to the set of its sources

Both indexes are guarded by one lock, so readers never see a source
filed under zero or two companies while an upsert moves it.
"""

from __future__ import annotations

import logging
import threading

from metadir.directory.errors import InvalidQueryError
from metadir.directory.models import MetadataQuery, Record
from metadir.utils.validator import validate_record

logger = logging.getLogger(__name__)


class MetadataDirectory:
    """Process-lifetime store of application metadata."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_source: dict[str, Record] = {}
        self._by_company: dict[str, set[str]] = {}

    def upsert(self, record: Record) -> Record:
        """Create or replace the record for ``record.source``.

        The record is validated before the lock is taken; a ValidationError
        leaves both indexes untouched. When the company changed, the source
        moves from the old company bucket to the new one, and the old
        bucket is dropped once empty.
        """
        validate_record(record)

        with self._lock:
            existing = self._by_source.get(record.source)
            if existing is not None and existing.company != record.company:
                old_sources = self._by_company.get(existing.company)
                if old_sources is not None:
                    old_sources.discard(record.source)
                    if not old_sources:
                        del self._by_company[existing.company]
                logger.info(
                    "Moved %s from company %r to %r",
                    record.source,
                    existing.company,
                    record.company,
                )

            self._by_source[record.source] = record
            self._by_company.setdefault(record.company, set()).add(record.source)

        logger.debug("Stored metadata for %s (company=%r)", record.source, record.company)
        return record

    def query(self, query: MetadataQuery) -> list[Record]:
        """Look up records by source, or by company narrowed by title.

        A source lookup ignores company and title and returns at most one
        record. Missing records give an empty list. Result order for a
        company lookup is unspecified.
        """
        if query.source:
            record = self.get(query.source)
            return [record] if record is not None else []

        if not query.company:
            raise InvalidQueryError("please specify source or company")

        with self._lock:
            records = [self._by_source[s] for s in self._by_company.get(query.company, ())]

        if query.title:
            records = [r for r in records if r.title == query.title]
        return records

    def get(self, source: str) -> Record | None:
        with self._lock:
            return self._by_source.get(source)

    def companies(self) -> list[str]:
        """Return every company that currently owns at least one record."""
        with self._lock:
            return sorted(self._by_company)

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_source)

    def __contains__(self, source: object) -> bool:
        with self._lock:
            return source in self._by_source
