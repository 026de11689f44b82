# sluggable/services/uniqueness_resolver.py
"""
Uniqueness resolution for slug maps.

Each locale is resolved on its own: the English and French slugs of one
record live in different columns, so they may end up with different
numeric suffixes.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from sluggable.domain.errors import InvalidConfigurationError
from sluggable.domain.models import ExistingSlugSet, LocaleSlugMap, SimilarSlugQuery, SlugConfig
from sluggable.domain.records import SluggableRecord
from sluggable.infra.db.base import SlugStore

logger = logging.getLogger(__name__)

_LEADING_DIGITS = re.compile(r"\d+")


def _numeric_suffix(value: str, prefix: str) -> int:
    if not value.startswith(prefix):
        return 0
    match = _LEADING_DIGITS.match(value[len(prefix):])
    return int(match.group()) if match else 0


def generate_suffix(
    slug_map: Mapping[str, str],
    separator: str,
    existing: Mapping[str, Any],
) -> dict[str, int]:
    """
    Default suffix algorithm: highest numeric suffix already in use, plus one.

    Only locales with at least one existing match get a suffix. Remainders
    that do not start with digits count as 0, so ``post`` alone yields 1 and
    ``post``, ``post-1``, ``post-3`` yield 4.
    """
    suffixes: dict[str, int] = {}
    for locale, slug in slug_map.items():
        matches = existing.get(locale)
        if not matches:
            continue
        prefix = f"{slug}{separator}"
        suffixes[locale] = max(_numeric_suffix(value, prefix) for value in matches) + 1
    return suffixes


def compute_suffixes(
    config: SlugConfig,
    slug_map: LocaleSlugMap,
    existing: ExistingSlugSet,
    record_type: str | None = None,
    attribute: str | None = None,
) -> Mapping[str, Any]:
    method = config.unique_suffix
    if method is None:
        return generate_suffix(slug_map, config.separator, existing)
    if callable(method):
        return method(dict(slug_map), config.separator, existing) or {}
    raise InvalidConfigurationError("unique_suffix", "is not None, or a callable.", record_type, attribute)


def append_suffixes(slug_map: LocaleSlugMap, suffixes: Mapping[str, Any], separator: str) -> LocaleSlugMap:
    result = dict(slug_map)
    for locale, suffix in suffixes.items():
        if locale in result and suffix is not None:
            result[locale] = f"{result[locale]}{separator}{suffix}"
    return result


class UniquenessResolver:
    def __init__(self, store: SlugStore):
        self._store = store

    def resolve(
        self,
        record: SluggableRecord,
        attribute: str,
        slug_map: LocaleSlugMap,
        config: SlugConfig,
    ) -> LocaleSlugMap:
        """
        Suffix every locale whose candidate is already taken.

        Args:
            record: The record being slugged (excluded from the lookup)
            attribute: The slug attribute
            slug_map: Candidate slug per locale
            config: Resolved options

        Returns:
            The slug map with ``separator + suffix`` appended where needed
        """
        if not config.unique:
            return slug_map

        existing = self.find_existing(record, attribute, slug_map, config)
        if not existing:
            return slug_map

        record_type = type(record).__name__
        suffixes = compute_suffixes(config, slug_map, existing, record_type, attribute)
        resolved = append_suffixes(slug_map, suffixes, config.separator)

        logger.debug(
            "Resolved collisions for %s.%s: locales=%s, suffixes=%s",
            record_type,
            attribute,
            sorted(existing),
            dict(suffixes),
        )
        return resolved

    def find_existing(
        self,
        record: SluggableRecord,
        attribute: str,
        slug_map: LocaleSlugMap,
        config: SlugConfig,
    ) -> ExistingSlugSet:
        existing: ExistingSlugSet = {}
        for locale, candidate in slug_map.items():
            query = self._build_query(record, attribute, locale, str(candidate), config)
            found = self._store.find_similar(query)
            if found:
                existing[locale] = set(found)
        return existing

    def _build_query(
        self,
        record: SluggableRecord,
        attribute: str,
        locale: str,
        candidate: str,
        config: SlugConfig,
    ) -> SimilarSlugQuery:
        return SimilarSlugQuery(
            table=record.get_table(),
            attribute=attribute,
            locale=locale,
            candidate=candidate,
            separator=config.separator,
            exclude_key_name=record.key_name,
            exclude_key=record.key,
            soft_delete_column=record.soft_delete_column if record.uses_soft_deletes() else None,
            include_trashed=config.include_trashed,
            constraints=dict(record.unique_slug_constraints(attribute, config, candidate)),
        )
