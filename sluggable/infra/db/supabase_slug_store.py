from __future__ import annotations

import json
import logging
from typing import Any

from supabase import Client, create_client

from sluggable.config import settings
from sluggable.domain.errors import SlugStoreError
from sluggable.domain.models import SimilarSlugQuery, SlugComparison
from sluggable.infra.db.base import SlugStore

logger = logging.getLogger(__name__)


def _create_supabase_client() -> Client:
    url = settings.SUPABASE_URL
    key = settings.SUPABASE_SERVICE_ROLE_KEY
    if not url or not key:
        raise ValueError("SLUGGABLE_SUPABASE_URL and SLUGGABLE_SUPABASE_SERVICE_ROLE_KEY required")
    return create_client(str(url), key)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _quote(value: str) -> str:
    # PostgREST reserves , . : ( ) inside or=() filters
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _json_path(attribute: str, locale: str) -> str:
    return f"{attribute}->>{locale}"


def _locale_value(row: dict[str, Any], attribute: str, locale: str) -> Any:
    translations = row.get(attribute)
    if isinstance(translations, str):
        try:
            translations = json.loads(translations)
        except ValueError:
            return None
    if not isinstance(translations, dict):
        return None
    return translations.get(locale)


class SupabaseSlugStore(SlugStore):
    def __init__(self, client: Client | None = None):
        self._client = client or _create_supabase_client()
        logger.info("SupabaseSlugStore initialized")

    def _build_or_filter(self, query: SimilarSlugQuery) -> str:
        path = _json_path(query.attribute, query.locale)
        clauses: list[str] = []
        for comparison in query.comparisons:
            if comparison is SlugComparison.EQUALS:
                clauses.append(f"{path}.eq.{_quote(query.candidate)}")
            elif comparison is SlugComparison.PREFIXED_BY:
                clauses.append(f"{path}.like.{_quote(_escape_like(query.prefix) + '*')}")
        return ",".join(clauses)

    def find_similar(self, query: SimilarSlugQuery) -> set[str]:
        builder = (
            self._client.table(query.table)
            .select(f"{query.exclude_key_name},{query.attribute}")
            .or_(self._build_or_filter(query))
        )

        if query.exclude_key is not None:
            builder = builder.neq(query.exclude_key_name, str(query.exclude_key))
        if query.excludes_trashed:
            builder = builder.is_(query.soft_delete_column, "null")
        for column, value in query.constraints.items():
            builder = builder.eq(column, value)

        try:
            response = builder.execute()
        except (ConnectionError, TimeoutError) as error:
            logger.error("Network error looking up similar slugs in %s: %s", query.table, error)
            raise SlugStoreError("find_similar", str(error)) from error

        found: set[str] = set()
        for row in response.data or []:
            value = _locale_value(row, query.attribute, query.locale)
            if query.matches(value):
                found.add(value)

        logger.debug(
            "Similar slugs: table=%s, path=%s, candidate=%s, found=%d",
            query.table,
            _json_path(query.attribute, query.locale),
            query.candidate,
            len(found),
        )
        return found
