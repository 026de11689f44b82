from __future__ import annotations

import logging
from typing import Any, Optional

from sluggable.domain.errors import InvalidConfigurationError
from sluggable.domain.models import LocaleSlugMap, SlugConfig, coerce_reserved
from sluggable.services.uniqueness_resolver import UniquenessResolver, append_suffixes, compute_suffixes

logger = logging.getLogger(__name__)


class ReservedWordValidator:
    def __init__(self, resolver: Optional[UniquenessResolver] = None):
        self._resolver = resolver

    def validate(
        self,
        record: Any,
        attribute: str,
        slug_map: LocaleSlugMap,
        config: SlugConfig,
    ) -> LocaleSlugMap:
        """
        Move candidates off reserved words.

        A reserved candidate gets the same suffix the uniqueness pass would
        give it, with the reserved words as the existing slugs of that
        locale. When the slug must also be unique and a resolver is wired
        in, slugs already stored under the candidate count as taken too, so
        ``admin`` skips a stored ``admin-1`` and becomes ``admin-2``.
        Other locales pass through untouched.
        """
        reserved = self._resolve_reserved(record, attribute, config)
        if not reserved:
            return slug_map

        record_type = type(record).__name__
        result = dict(slug_map)
        for locale, slug in slug_map.items():
            if slug not in reserved:
                continue
            taken = set(reserved)
            if config.unique and self._resolver is not None:
                taken |= self._resolver.find_existing(record, attribute, {locale: slug}, config).get(locale, set())

            suffixes = compute_suffixes(config, {locale: slug}, {locale: taken}, record_type, attribute)
            result.update(append_suffixes({locale: slug}, {locale: suffixes.get(locale)}, config.separator))
            logger.debug("Reserved slug %r for %s.%s [%s] -> %r", slug, record_type, attribute, locale, result[locale])

        return result

    @staticmethod
    def _resolve_reserved(record: Any, attribute: str, config: SlugConfig) -> Optional[frozenset[str]]:
        reserved = config.reserved
        if reserved is None:
            return None
        if callable(reserved):
            reserved = reserved(record)
        try:
            return coerce_reserved(reserved)
        except InvalidConfigurationError as error:
            raise InvalidConfigurationError("reserved", error.reason, type(record).__name__, attribute) from error
