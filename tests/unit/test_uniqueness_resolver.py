from __future__ import annotations

import pytest

from sluggable.domain.errors import InvalidConfigurationError
from sluggable.domain.models import SimilarSlugQuery, SlugConfig
from sluggable.domain.records import SluggableRecord
from sluggable.infra.db.base import SlugStore
from sluggable.services.uniqueness_resolver import (
    UniquenessResolver,
    append_suffixes,
    generate_suffix,
)


class Post(SluggableRecord):
    table_name = "posts"


class TrashablePost(SluggableRecord):
    table_name = "posts"
    soft_delete_column = "deleted_at"


class ScopedPost(SluggableRecord):
    table_name = "posts"

    def unique_slug_constraints(self, attribute, config, slug):
        return {"owner_id": self.get_attribute("owner_id")}


class SlugStoreStub(SlugStore):
    def __init__(self, existing: dict[str, set[str]] | None = None) -> None:
        self.existing = existing or {}
        self.queries: list[SimilarSlugQuery] = []

    def find_similar(self, query: SimilarSlugQuery) -> set[str]:
        self.queries.append(query)
        return {value for value in self.existing.get(query.locale, set()) if query.matches(value)}


class TestGenerateSuffix:
    def test_exact_match_gives_one(self) -> None:
        assert generate_suffix({"en": "post"}, "-", {"en": {"post"}}) == {"en": 1}

    def test_uses_highest_suffix_not_count(self) -> None:
        suffixes = generate_suffix({"en": "post"}, "-", {"en": {"post", "post-1", "post-3"}})
        assert suffixes == {"en": 4}

    def test_non_numeric_remainder_counts_as_zero(self) -> None:
        suffixes = generate_suffix({"en": "post"}, "-", {"en": {"post-office", "post-2abc"}})
        assert suffixes == {"en": 3}

    def test_locales_without_matches_get_no_suffix(self) -> None:
        suffixes = generate_suffix(
            {"en": "hello-world", "fr": "bonjour-monde"}, "-", {"en": {"hello-world"}}
        )
        assert suffixes == {"en": 1}

    def test_respects_separator(self) -> None:
        assert generate_suffix({"en": "post"}, "_", {"en": {"post", "post_7"}}) == {"en": 8}


class TestAppendSuffixes:
    def test_appends_only_given_locales(self) -> None:
        result = append_suffixes({"en": "a", "fr": "b"}, {"en": 2, "de": 5, "fr": None}, "-")
        assert result == {"en": "a-2", "fr": "b"}


class TestUniquenessResolver:
    def test_not_unique_returns_input(self) -> None:
        store = SlugStoreStub({"en": {"post"}})
        resolver = UniquenessResolver(store)

        result = resolver.resolve(Post(), "slug", {"en": "post"}, SlugConfig(unique=False))

        assert result == {"en": "post"}
        assert store.queries == []

    def test_no_collisions_returns_input(self) -> None:
        resolver = UniquenessResolver(SlugStoreStub())

        result = resolver.resolve(Post(), "slug", {"en": "post"}, SlugConfig())

        assert result == {"en": "post"}

    def test_per_locale_independence(self) -> None:
        resolver = UniquenessResolver(SlugStoreStub({"en": {"hello-world"}}))

        result = resolver.resolve(
            Post(), "slug", {"en": "hello-world", "fr": "bonjour-monde"}, SlugConfig()
        )

        assert result == {"en": "hello-world-1", "fr": "bonjour-monde"}

    def test_suffix_monotonicity(self) -> None:
        resolver = UniquenessResolver(SlugStoreStub({"en": {"post", "post-1", "post-3"}}))

        result = resolver.resolve(Post(), "slug", {"en": "post"}, SlugConfig())

        assert result == {"en": "post-4"}

    def test_locales_get_different_suffixes(self) -> None:
        resolver = UniquenessResolver(
            SlugStoreStub({"en": {"news", "news-1"}, "fr": {"news"}})
        )

        result = resolver.resolve(Post(), "slug", {"en": "news", "fr": "news"}, SlugConfig())

        assert result == {"en": "news-2", "fr": "news-1"}

    def test_query_describes_lookup(self) -> None:
        store = SlugStoreStub()
        resolver = UniquenessResolver(store)
        record = Post({"id": 42})

        resolver.resolve(record, "slug", {"en": "post"}, SlugConfig(separator="_"))

        query = store.queries[0]
        assert query.table == "posts"
        assert query.attribute == "slug"
        assert query.locale == "en"
        assert query.candidate == "post"
        assert query.separator == "_"
        assert query.exclude_key_name == "id"
        assert query.exclude_key == 42
        assert query.soft_delete_column is None
        assert dict(query.constraints) == {}

    def test_trashed_rows_follow_config(self) -> None:
        store = SlugStoreStub()
        resolver = UniquenessResolver(store)

        resolver.resolve(TrashablePost(), "slug", {"en": "a"}, SlugConfig())
        resolver.resolve(TrashablePost(), "slug", {"en": "a"}, SlugConfig(include_trashed=True))
        resolver.resolve(Post(), "slug", {"en": "a"}, SlugConfig(include_trashed=True))

        assert store.queries[0].excludes_trashed is True
        assert store.queries[1].excludes_trashed is False
        assert store.queries[2].soft_delete_column is None

    def test_record_constraints_are_passed_to_store(self) -> None:
        store = SlugStoreStub()
        resolver = UniquenessResolver(store)

        resolver.resolve(ScopedPost({"owner_id": "user-1"}), "slug", {"en": "a"}, SlugConfig())

        assert dict(store.queries[0].constraints) == {"owner_id": "user-1"}

    def test_custom_unique_suffix_replaces_default(self) -> None:
        calls = []

        def unique_suffix(slug_map, separator, existing):
            calls.append((slug_map, separator, existing))
            return {"en": "copy"}

        resolver = UniquenessResolver(SlugStoreStub({"en": {"post"}}))

        result = resolver.resolve(
            Post(), "slug", {"en": "post", "fr": "poste"}, SlugConfig(unique_suffix=unique_suffix)
        )

        assert result == {"en": "post-copy", "fr": "poste"}
        assert calls == [({"en": "post", "fr": "poste"}, "-", {"en": {"post"}})]

    def test_non_callable_unique_suffix_is_rejected(self) -> None:
        config = SlugConfig()
        object.__setattr__(config, "unique_suffix", "nope")
        resolver = UniquenessResolver(SlugStoreStub({"en": {"post"}}))

        with pytest.raises(InvalidConfigurationError):
            resolver.resolve(Post(), "slug", {"en": "post"}, config)

    def test_store_errors_propagate(self) -> None:
        class FailingStore(SlugStore):
            def find_similar(self, query: SimilarSlugQuery) -> set[str]:
                raise RuntimeError("database unavailable")

        resolver = UniquenessResolver(FailingStore())

        with pytest.raises(RuntimeError, match="database unavailable"):
            resolver.resolve(Post(), "slug", {"en": "post"}, SlugConfig())
