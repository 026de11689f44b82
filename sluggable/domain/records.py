# sluggable/domain/records.py
"""
Base class for models that carry slugs.

The slug service only needs an in-memory view of a record: its attributes,
the last-persisted snapshot and a handful of optional hooks. Persisting the
record stays with whatever store owns it.
"""
from __future__ import annotations

import copy
import json
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, ClassVar, Optional, Union

from sluggable.config import settings
from sluggable.domain.models import LocaleMap, SlugConfig, normalize_source_value

SluggableDeclaration = Union[Mapping[str, Optional[Mapping[str, Any]]], Sequence[str]]


class SluggableRecord:
    """
    Attribute bag with dirty tracking.

    Subclasses declare ``sluggable()`` and may override the hooks:
    - customize_transliterator: swap or tune the transliterator per attribute
    - unique_slug_constraints: extra equality filters for the uniqueness lookup
    - __str__: source used when an attribute has no ``source`` configured
    """

    table_name: ClassVar[str] = ""
    key_name: ClassVar[str] = "id"
    soft_delete_column: ClassVar[Optional[str]] = None
    default_locale: ClassVar[Optional[str]] = None

    def __init__(self, attributes: Optional[Mapping[str, Any]] = None, *, exists: bool = False):
        self._attributes: dict[str, Any] = dict(attributes or {})
        self._original: dict[str, Any] = {}
        self.exists = False
        if exists:
            self.mark_persisted()

    def sluggable(self) -> SluggableDeclaration:
        return {}

    @classmethod
    def get_table(cls) -> str:
        return cls.table_name or cls.__name__.lower()

    @property
    def key(self) -> Any:
        return self._attributes.get(self.key_name)

    @property
    def attributes(self) -> dict[str, Any]:
        return dict(self._attributes)

    def get_attribute(self, name: str, default: Any = None) -> Any:
        return self._attributes.get(name, default)

    def set_attribute(self, name: str, value: Any) -> None:
        self._attributes[name] = value

    def get_original(self, name: str, default: Any = None) -> Any:
        return self._original.get(name, default)

    def is_dirty(self, *names: str) -> bool:
        """True if any of ``names`` (or any attribute) differs from the persisted snapshot."""
        if not names:
            names = tuple(set(self._attributes) | set(self._original))
        return any(self._attributes.get(name) != self._original.get(name) for name in names)

    def mark_persisted(self) -> None:
        self._original = copy.deepcopy(self._attributes)
        self.exists = True

    def get_translations(self, name: str) -> LocaleMap:
        value = self._attributes.get(name)
        if value is None:
            return {}
        if isinstance(value, Mapping):
            return dict(value)
        return {self.default_locale or settings.FALLBACK_LOCALE: value}

    def get_source_values(self, fields: Iterable[str]) -> LocaleMap:
        """
        Collect the slug source per locale.

        Several fields are joined with a space in the given order; empty
        values are skipped.
        """
        combined: dict[str, list[Any]] = {}
        for field_name in fields:
            for locale, value in self.get_translations(field_name).items():
                value = normalize_source_value(field_name, value)
                if value is None or value == "":
                    continue
                combined.setdefault(locale, []).append(value)

        return {
            locale: parts[0] if len(parts) == 1 else " ".join(str(part) for part in parts)
            for locale, parts in combined.items()
        }

    def uses_soft_deletes(self) -> bool:
        return self.soft_delete_column is not None

    def is_trashed(self) -> bool:
        if not self.soft_delete_column:
            return False
        return self._attributes.get(self.soft_delete_column) is not None

    def customize_transliterator(self, transliterator: Any, attribute: str) -> Any:
        return transliterator

    def unique_slug_constraints(self, attribute: str, config: SlugConfig, slug: str) -> Mapping[str, Any]:
        return {}

    def __str__(self) -> str:
        return json.dumps(self._attributes, default=str, ensure_ascii=False)
