from __future__ import annotations

import logging
from collections.abc import Iterable

from sluggable.domain.models import SimilarSlugQuery
from sluggable.domain.records import SluggableRecord
from sluggable.infra.db.base import SlugStore

logger = logging.getLogger(__name__)


class InMemorySlugStore(SlugStore):
    def __init__(self, records: Iterable[SluggableRecord] = ()):
        self._records: list[SluggableRecord] = []
        for record in records:
            self.add(record)

    def add(self, record: SluggableRecord) -> SluggableRecord:
        if record not in self._records:
            self._records.append(record)
        return record

    def remove(self, record: SluggableRecord) -> None:
        self._records = [r for r in self._records if r is not record]

    def __len__(self) -> int:
        return len(self._records)

    def find_similar(self, query: SimilarSlugQuery) -> set[str]:
        found: set[str] = set()

        for record in self._records:
            if record.get_table() != query.table:
                continue
            if query.exclude_key is not None and record.get_attribute(query.exclude_key_name) == query.exclude_key:
                continue
            if query.excludes_trashed and record.is_trashed():
                continue
            if any(record.get_attribute(column) != value for column, value in query.constraints.items()):
                continue

            value = record.get_translations(query.attribute).get(query.locale)
            if query.matches(value):
                found.add(value)

        logger.debug(
            "Similar slugs: table=%s, attribute=%s, locale=%s, candidate=%s, found=%d",
            query.table,
            query.attribute,
            query.locale,
            query.candidate,
            len(found),
        )
        return found
