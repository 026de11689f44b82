# sluggable/domain/models.py
"""
Domain models for slug generation.
These are pure data structures with no infrastructure dependencies.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Callable, Optional, Union

from sluggable.domain.errors import InvalidConfigurationError, InvalidSourceValueError

# locale code -> raw source value / slug / similar slugs already stored
LocaleMap = dict[str, Any]
LocaleSlugMap = dict[str, str]
ExistingSlugSet = dict[str, set[str]]

SlugMethod = Callable[[LocaleMap, str], LocaleSlugMap]
SuffixMethod = Callable[[LocaleSlugMap, str, ExistingSlugSet], Mapping[str, Any]]
ReservedFactory = Callable[[Any], Any]

_RESERVED_COLLECTIONS = (set, frozenset, list, tuple)


def coerce_reserved(value: Any) -> Optional[frozenset[str]]:
    """
    Turn a concrete reserved-word collection into a frozenset.

    Returns None for None and raises InvalidConfigurationError for anything
    that is not a list, tuple or set of strings.
    """
    if value is None:
        return None
    if not isinstance(value, _RESERVED_COLLECTIONS):
        raise InvalidConfigurationError(
            "reserved", "is not None, a collection, or a callable that returns None/collection."
        )
    words = frozenset(value)
    if not all(isinstance(word, str) for word in words):
        raise InvalidConfigurationError("reserved", "must only contain strings.")
    return words


class SlugComparison(str, Enum):
    """How a stored slug is compared against a candidate."""
    EQUALS = "eq"
    PREFIXED_BY = "like"


@dataclass(frozen=True)
class SlugConfig:
    """
    Per-attribute slugging options.

    ``method``, ``unique_suffix`` and ``reserved`` are either unset (None)
    or a custom hook; ``reserved`` may also be a fixed collection of words.
    Invalid values are rejected when the config is built.
    """
    source: Union[str, tuple[str, ...], None] = None
    separator: str = "-"
    method: Optional[SlugMethod] = None
    max_length: Optional[int] = None
    reserved: Union[frozenset[str], ReservedFactory, None] = None
    unique_suffix: Optional[SuffixMethod] = None
    unique: bool = True
    on_update: bool = False
    include_trashed: bool = False

    def __post_init__(self) -> None:
        if self.method is not None and not callable(self.method):
            raise InvalidConfigurationError("method", "is not callable nor None.")
        if self.unique_suffix is not None and not callable(self.unique_suffix):
            raise InvalidConfigurationError("unique_suffix", "is not None, or a callable.")
        if not isinstance(self.separator, str):
            raise InvalidConfigurationError("separator", "must be a string.")
        if self.max_length is not None and (
            isinstance(self.max_length, bool)
            or not isinstance(self.max_length, int)
            or self.max_length <= 0
        ):
            raise InvalidConfigurationError("max_length", "must be a positive integer or None.")

        object.__setattr__(self, "source", self._normalize_source(self.source))
        if not callable(self.reserved):
            object.__setattr__(self, "reserved", coerce_reserved(self.reserved))

    @staticmethod
    def _normalize_source(source: Any) -> Optional[tuple[str, ...]]:
        if source is None:
            return None
        if isinstance(source, str):
            return (source,)
        if isinstance(source, (list, tuple)) and source and all(isinstance(s, str) for s in source):
            return tuple(source)
        raise InvalidConfigurationError("source", "must be None, a field name or a list of field names.")

    def merged(self, overrides: Optional[Mapping[str, Any]] = None) -> SlugConfig:
        """Return a copy with ``overrides`` applied; override keys win."""
        if not overrides:
            return self
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise InvalidConfigurationError(unknown[0], "is not a recognized option.")
        return replace(self, **overrides)


@dataclass(frozen=True)
class SimilarSlugQuery:
    """
    Store-agnostic description of a "find similar slugs" lookup.

    Matches rows of ``table`` whose ``attribute`` at ``locale`` equals
    ``candidate`` or starts with ``candidate + separator``.
    """
    table: str
    attribute: str
    locale: str
    candidate: str
    separator: str
    comparisons: tuple[SlugComparison, ...] = (SlugComparison.EQUALS, SlugComparison.PREFIXED_BY)
    exclude_key_name: str = "id"
    exclude_key: Any = None
    soft_delete_column: Optional[str] = None
    include_trashed: bool = False
    constraints: Mapping[str, Any] = field(default_factory=dict)

    @property
    def prefix(self) -> str:
        return self.candidate + self.separator

    @property
    def excludes_trashed(self) -> bool:
        return self.soft_delete_column is not None and not self.include_trashed

    def matches(self, value: Any) -> bool:
        if not isinstance(value, str):
            return False
        for comparison in self.comparisons:
            if comparison is SlugComparison.EQUALS and value == self.candidate:
                return True
            if comparison is SlugComparison.PREFIXED_BY and value.startswith(self.prefix):
                return True
        return False


def normalize_source_value(field_name: str, value: Any) -> Any:
    """
    Normalize one raw source value before slugging.

    Booleans become 0/1 (legacy behaviour kept for existing slugs); strings
    and numbers pass through; None stays None. Any other type is rejected
    rather than guessed at.
    """
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    raise InvalidSourceValueError(field_name, type(value).__name__)
