from sluggable.domain.errors import (
    AmbiguousArgumentError,
    InvalidConfigurationError,
    InvalidSourceValueError,
    SluggableError,
    SlugStoreError,
)
from sluggable.domain.models import SimilarSlugQuery, SlugComparison, SlugConfig
from sluggable.domain.records import SluggableRecord
from sluggable.infra.db.base import SlugStore
from sluggable.infra.db.memory_store import InMemorySlugStore
from sluggable.services.slug_service import SlugService, create_slug
from sluggable.services.transliterator import DefaultTransliterator, Transliterator, TransliteratorCache

__all__ = [
    "AmbiguousArgumentError",
    "DefaultTransliterator",
    "InMemorySlugStore",
    "InvalidConfigurationError",
    "InvalidSourceValueError",
    "SimilarSlugQuery",
    "SlugComparison",
    "SlugConfig",
    "SlugService",
    "SlugStore",
    "SlugStoreError",
    "SluggableError",
    "SluggableRecord",
    "Transliterator",
    "TransliteratorCache",
    "create_slug",
]
