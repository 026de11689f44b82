# sluggable/infra/db/base.py
"""
Abstract base class for the slug lookup backend.
This interface allows easy swapping between different record stores.
"""
from __future__ import annotations

from abc import ABC, abstractmethod

from sluggable.domain.models import SimilarSlugQuery


class SlugStore(ABC):
    """
    Abstract interface for "find similar slugs" lookups.

    Implementations:
    - InMemorySlugStore: records registered in process (tests, previews)
    - SupabaseSlugStore: Postgres table with a JSON slug column per locale
    """

    @abstractmethod
    def find_similar(self, query: SimilarSlugQuery) -> set[str]:
        """
        Find stored slugs similar to a candidate.

        Args:
            query: Table, attribute, locale and candidate to compare against,
                plus the exclusion, soft-delete and constraint filters

        Returns:
            Distinct slug values at ``query.locale`` that equal the candidate
            or start with ``candidate + separator``
        """
        pass
