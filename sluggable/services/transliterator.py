# sluggable/services/transliterator.py
from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, Callable, Optional, Protocol

from slugify import slugify as _slugify

logger = logging.getLogger(__name__)


class Transliterator(Protocol):
    def slugify(self, text: str, separator: str = "-") -> str:
        ...


class DefaultTransliterator:
    """Slugs text to lowercase ASCII words joined by the separator."""

    def __init__(
        self,
        *,
        lowercase: bool = True,
        replacements: Iterable[tuple[str, str]] = (),
        stopwords: Iterable[str] = (),
        regex_pattern: Optional[str] = None,
        allow_unicode: bool = False,
    ):
        self.lowercase = lowercase
        self.replacements = tuple(tuple(pair) for pair in replacements)
        self.stopwords = tuple(stopwords)
        self.regex_pattern = regex_pattern
        self.allow_unicode = allow_unicode

    def slugify(self, text: str, separator: str = "-") -> str:
        return _slugify(
            text,
            separator=separator,
            lowercase=self.lowercase,
            replacements=[list(pair) for pair in self.replacements],
            stopwords=self.stopwords,
            regex_pattern=self.regex_pattern,
            allow_unicode=self.allow_unicode,
        )

    def with_rules(self, **overrides: Any) -> DefaultTransliterator:
        """Copy with some options replaced; handy inside ``customize_transliterator``."""
        options = {
            "lowercase": self.lowercase,
            "replacements": self.replacements,
            "stopwords": self.stopwords,
            "regex_pattern": self.regex_pattern,
            "allow_unicode": self.allow_unicode,
        }
        options.update(overrides)
        return DefaultTransliterator(**options)


class TransliteratorCache:
    """One transliterator per (record type, attribute), built on first use."""

    def __init__(self, factory: Callable[[], Transliterator] = DefaultTransliterator):
        self._factory = factory
        self._engines: dict[tuple[type, str], Transliterator] = {}

    def get(self, record: Any, attribute: str) -> Transliterator:
        key = (type(record), attribute)
        engine = self._engines.get(key)
        if engine is None:
            engine = self._factory()
            customize = getattr(record, "customize_transliterator", None)
            if customize is not None:
                engine = customize(engine, attribute)
            self._engines[key] = engine
            logger.debug("Transliterator created for %s.%s", key[0].__name__, attribute)
        return engine

    def clear(self) -> None:
        self._engines.clear()

    def __len__(self) -> int:
        return len(self._engines)
