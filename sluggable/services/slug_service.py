# sluggable/services/slug_service.py
"""
Slugging service.
Builds, validates and de-duplicates the slugs declared by a record.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Optional, Union

from sluggable.config import build_default_config, settings
from sluggable.domain.errors import AmbiguousArgumentError, InvalidConfigurationError
from sluggable.domain.models import LocaleMap, LocaleSlugMap, SlugConfig
from sluggable.domain.records import SluggableRecord
from sluggable.infra.db.base import SlugStore
from sluggable.services.reserved_validator import ReservedWordValidator
from sluggable.services.slug_builder import SlugBuilder
from sluggable.services.transliterator import TransliteratorCache
from sluggable.services.uniqueness_resolver import UniquenessResolver

logger = logging.getLogger(__name__)


def iter_sluggable(record: SluggableRecord) -> Iterator[tuple[str, Mapping[str, Any]]]:
    """Yield ``(attribute, overrides)`` for every slug the record declares."""
    declaration = record.sluggable()
    if isinstance(declaration, Mapping):
        for attribute, overrides in declaration.items():
            if overrides is None:
                overrides = {}
            if not isinstance(overrides, Mapping):
                raise InvalidConfigurationError(
                    "sluggable", "overrides must be a mapping or None.", type(record).__name__, attribute
                )
            yield attribute, overrides
        return
    for attribute in declaration:
        yield attribute, {}


class SlugService:
    """
    Service for keeping record slugs fresh and unique.

    Responsibilities:
    - Decide whether an attribute needs (re)slugging
    - Run builder -> reserved-word validator -> uniqueness resolver
    - Write the result onto the record and report whether anything changed

    The service never persists the record; that is the caller's job.
    """

    def __init__(
        self,
        store: SlugStore,
        *,
        defaults: Optional[SlugConfig] = None,
        locales: Optional[Iterable[str]] = None,
        transliterators: Optional[TransliteratorCache] = None,
    ):
        self.defaults = defaults or build_default_config()
        self.locales = tuple(locales if locales is not None else settings.LOCALES)
        self.transliterators = transliterators or TransliteratorCache()
        self._builder = SlugBuilder(self.transliterators)
        self._resolver = UniquenessResolver(store)
        self._validator = ReservedWordValidator(self._resolver)

    def get_configuration(self, overrides: Optional[Mapping[str, Any]] = None) -> SlugConfig:
        return self.defaults.merged(overrides)

    def slug(self, record: SluggableRecord, force: bool = False) -> bool:
        """
        Slug every declared attribute of ``record``.

        Args:
            record: The record to update in place
            force: Regenerate even when the current slug looks fine

        Returns:
            True if any slug attribute now differs from the persisted state
        """
        attributes: list[str] = []

        for attribute, overrides in iter_sluggable(record):
            config = self.get_configuration(overrides)
            slug_map = self.build_slug(record, attribute, config, force)
            if slug_map != record.get_translations(attribute):
                record.set_attribute(attribute, slug_map)
            attributes.append(attribute)

        if not attributes:
            return False
        return record.is_dirty(*attributes)

    def build_slug(
        self,
        record: SluggableRecord,
        attribute: str,
        config: SlugConfig,
        force: bool = False,
    ) -> LocaleSlugMap:
        current = {
            locale: value
            for locale, value in self.strip_unknown_locales(record.get_translations(attribute)).items()
            if value is not None and value != ""
        }

        if not (force or self.needs_slugging(record, attribute, config, current)):
            logger.debug("Keeping slug of %s.%s: %s", type(record).__name__, attribute, current)
            return current

        source = self.strip_unknown_locales(self.get_slug_source(record, config))
        if not source:
            logger.debug("No slug source for %s.%s", type(record).__name__, attribute)
            return current

        slug_map = self._run_pipeline(record, attribute, source, config)
        if not slug_map:
            logger.debug("Slug source of %s.%s slugs to nothing", type(record).__name__, attribute)
            return current

        if slug_map != current:
            logger.info(
                "Slug updated: %s.%s key=%s, %s -> %s",
                type(record).__name__,
                attribute,
                record.key,
                current,
                slug_map,
            )
        return slug_map

    def needs_slugging(
        self,
        record: SluggableRecord,
        attribute: str,
        config: SlugConfig,
        current: LocaleSlugMap,
    ) -> bool:
        if config.on_update or not current:
            return True
        # a slug set by hand in this cycle wins
        if record.is_dirty(attribute):
            return False
        return not record.exists

    def get_slug_source(self, record: SluggableRecord, config: SlugConfig) -> LocaleMap:
        if config.source is None:
            text = str(record)
            return {locale: text for locale in self.locales} if text else {}
        return record.get_source_values(config.source)

    def strip_unknown_locales(self, values: Mapping[str, Any]) -> dict[str, Any]:
        return {locale: value for locale, value in values.items() if locale in self.locales}

    def create_slug(
        self,
        record_or_type: Union[SluggableRecord, type[SluggableRecord]],
        attribute: str,
        from_string: Union[str, Mapping[str, Any]],
        config: Any = None,
    ) -> LocaleSlugMap:
        """
        Build a unique slug for an arbitrary string, without touching the record.

        Args:
            record_or_type: A record, or a record class to instantiate empty
            attribute: The slug attribute whose options apply
            from_string: Source text for every locale, or a locale map
            config: Option overrides; None uses the record's declaration

        Returns:
            Slug per locale

        Raises:
            AmbiguousArgumentError: If ``config`` is neither None nor a mapping
        """
        record = record_or_type() if isinstance(record_or_type, type) else record_or_type

        if config is None:
            config = dict(iter_sluggable(record)).get(attribute, {})
        elif not isinstance(config, Mapping):
            raise AmbiguousArgumentError(type(config).__name__)

        resolved = self.get_configuration(config)

        if isinstance(from_string, Mapping):
            source = dict(from_string)
        else:
            source = {locale: from_string for locale in self.locales}
        source = {
            locale: value
            for locale, value in self.strip_unknown_locales(source).items()
            if value is not None and value != ""
        }
        if not source:
            return {}

        return self._run_pipeline(record, attribute, source, resolved)

    def _run_pipeline(
        self,
        record: SluggableRecord,
        attribute: str,
        source: LocaleMap,
        config: SlugConfig,
    ) -> LocaleSlugMap:
        slug_map = self._builder.build(record, attribute, source, config)
        if not slug_map:
            return slug_map
        slug_map = self._validator.validate(record, attribute, slug_map, config)
        return self._resolver.resolve(record, attribute, slug_map, config)


def create_slug(
    record_or_type: Union[SluggableRecord, type[SluggableRecord]],
    attribute: str,
    from_string: Union[str, Mapping[str, Any]],
    config: Any = None,
    *,
    store: Optional[SlugStore] = None,
    service: Optional[SlugService] = None,
) -> LocaleSlugMap:
    """
    Shortcut for ``SlugService.create_slug``.

    Pass a long-lived ``service`` so its transliterator cache is reused;
    with only a ``store`` a throwaway service is built for this call.
    """
    if service is None:
        if store is None:
            raise ValueError("create_slug needs a store or a service")
        service = SlugService(store)
    return service.create_slug(record_or_type, attribute, from_string, config)
