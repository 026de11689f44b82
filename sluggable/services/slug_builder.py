from __future__ import annotations

import logging
from typing import Any

from sluggable.domain.errors import InvalidConfigurationError
from sluggable.domain.models import LocaleMap, LocaleSlugMap, SlugConfig, normalize_source_value
from sluggable.services.transliterator import TransliteratorCache

logger = logging.getLogger(__name__)


def _truncate(slug_map: dict[str, Any], max_length: int | None) -> dict[str, Any]:
    if not max_length:
        return slug_map
    return {
        locale: value[:max_length] if isinstance(value, str) else value
        for locale, value in slug_map.items()
    }


class SlugBuilder:
    """
    Turns per-locale source values into candidate slugs.

    Responsibilities:
    - Coerce legacy boolean sources to 0/1
    - Slugify each locale with the cached transliterator, or hand the whole
      map to a custom ``method``
    - Truncate string results to ``max_length``
    """

    def __init__(self, transliterators: TransliteratorCache | None = None):
        self._transliterators = transliterators or TransliteratorCache()

    def build(
        self,
        record: Any,
        attribute: str,
        source: LocaleMap,
        config: SlugConfig,
    ) -> LocaleSlugMap:
        """
        Build candidate slugs for every locale of ``source``.

        Args:
            record: The record being slugged (transliterator lookup key)
            attribute: The slug attribute
            source: Raw source value per locale
            config: Resolved options

        Returns:
            Candidate slug per locale, not yet checked for reserved words or uniqueness
        """
        normalized = {
            locale: normalize_source_value(attribute, value) for locale, value in source.items()
        }
        method = config.method

        if method is None:
            engine = self._transliterators.get(record, attribute)
            slug_map = {
                locale: engine.slugify(str(value), config.separator)
                for locale, value in normalized.items()
            }
        elif callable(method):
            slug_map = dict(method(normalized, config.separator))
        else:
            raise InvalidConfigurationError(
                "method", "is not callable nor None.", type(record).__name__, attribute
            )

        # a source made only of punctuation slugs to "" and has no usable candidate
        slug_map = {
            locale: value for locale, value in _truncate(slug_map, config.max_length).items() if value != ""
        }
        logger.debug("Built slug candidates for %s.%s: %s", type(record).__name__, attribute, slug_map)
        return slug_map
