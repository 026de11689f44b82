from __future__ import annotations

import json

import pytest

from sluggable.domain.errors import InvalidSourceValueError
from sluggable.domain.records import SluggableRecord


class Article(SluggableRecord):
    table_name = "articles"
    default_locale = "en"
    soft_delete_column = "deleted_at"


class Plain(SluggableRecord):
    default_locale = "en"


class TestSluggableRecordAttributes:
    def test_get_and_set_attribute(self) -> None:
        record = Article({"id": 7, "title": "Hello"})

        record.set_attribute("title", "World")

        assert record.get_attribute("title") == "World"
        assert record.get_attribute("missing", "fallback") == "fallback"
        assert record.key == 7

    def test_table_defaults_to_class_name(self) -> None:
        assert Article.get_table() == "articles"
        assert Plain.get_table() == "plain"


class TestSluggableRecordDirtyTracking:
    def test_new_record_is_not_persisted(self) -> None:
        record = Article({"title": "Hello"})

        assert record.exists is False
        assert record.is_dirty("title") is True
        assert record.is_dirty("slug") is False

    def test_persisted_record_is_clean(self) -> None:
        record = Article({"title": "Hello", "slug": {"en": "hello"}}, exists=True)

        assert record.exists is True
        assert record.is_dirty() is False
        assert record.is_dirty("slug") is False

    def test_changes_after_persisting_are_dirty(self) -> None:
        record = Article({"slug": {"en": "hello"}}, exists=True)

        record.set_attribute("slug", {"en": "other"})

        assert record.is_dirty("slug") is True
        assert record.get_original("slug") == {"en": "hello"}

    def test_snapshot_is_independent_of_nested_mutation(self) -> None:
        record = Article({"slug": {"en": "hello"}}, exists=True)

        record.get_attribute("slug")["en"] = "mutated"

        assert record.is_dirty("slug") is True

    def test_mark_persisted_resets_dirty_state(self) -> None:
        record = Article({"title": "Hello"})

        record.mark_persisted()

        assert record.exists is True
        assert record.is_dirty() is False


class TestSluggableRecordTranslations:
    def test_locale_map_is_copied(self) -> None:
        record = Article({"title": {"en": "Hello", "fr": "Bonjour"}})

        translations = record.get_translations("title")
        translations["en"] = "changed"

        assert record.get_attribute("title") == {"en": "Hello", "fr": "Bonjour"}

    def test_scalar_is_keyed_under_default_locale(self) -> None:
        record = Article({"title": "Hello"})
        assert record.get_translations("title") == {"en": "Hello"}

    def test_missing_attribute_is_empty(self) -> None:
        assert Article().get_translations("title") == {}


class TestSluggableRecordSourceValues:
    def test_single_field_keeps_raw_value(self) -> None:
        record = Article({"year": {"en": 2024}})
        assert record.get_source_values(["year"]) == {"en": 2024}

    def test_several_fields_are_joined_per_locale(self) -> None:
        record = Article(
            {
                "first": {"en": "John", "fr": "Jean"},
                "last": {"en": "Smith", "fr": ""},
            }
        )

        assert record.get_source_values(["first", "last"]) == {"en": "John Smith", "fr": "Jean"}

    def test_booleans_are_coerced_before_joining(self) -> None:
        record = Article({"title": "Flag", "active": True})
        assert record.get_source_values(["title", "active"]) == {"en": "Flag 1"}

    def test_empty_values_are_dropped(self) -> None:
        record = Article({"title": {"en": "", "fr": None}})
        assert record.get_source_values(["title"]) == {}

    def test_unsupported_values_are_rejected(self) -> None:
        record = Article({"title": {"en": ["a", "b"]}})
        with pytest.raises(InvalidSourceValueError):
            record.get_source_values(["title"])


class TestSluggableRecordHooks:
    def test_soft_deletes(self) -> None:
        record = Article({"deleted_at": "2024-01-15T10:00:00Z"})

        assert record.uses_soft_deletes() is True
        assert record.is_trashed() is True
        assert Article().is_trashed() is False
        assert Plain().uses_soft_deletes() is False
        assert Plain().is_trashed() is False

    def test_default_hooks(self) -> None:
        record = Plain()
        marker = object()

        assert record.sluggable() == {}
        assert record.customize_transliterator(marker, "slug") is marker
        assert record.unique_slug_constraints("slug", None, "hello") == {}

    def test_str_is_json_of_attributes(self) -> None:
        record = Plain({"name": "Café"})
        assert json.loads(str(record)) == {"name": "Café"}
