"""Async HTTP client for the service catalog, with retry logic, timeout
handling and a short-lived page cache.

The assistant only reads from the catalog: when the language model cannot
produce service suggestions, the first page of active services is used
instead.  Expected response shape of ``GET /services``::

    {"data": [{"id": "...", "slug": "visa-support",
               "translation": {"locale": "en", "name": "...", "summary": "..."},
               "translations": [...]}],
     "meta": {"page": 1, "limit": 3, "total": 1}}
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any

import httpx

from src.config import CATALOG_API_TOKEN, CATALOG_BASE_URL
from src.services.cache import TTLCache
from src.services.metrics import metrics

logger = logging.getLogger(__name__)

# ── Retry configuration ─────────────────────────────────────────────
# Kept short: the catalog is consulted while a user already waits on a
# failed model call.
MAX_RETRIES = 2
INITIAL_BACKOFF_SECONDS = 0.25
REQUEST_TIMEOUT_SECONDS = 5.0

_CK_SERVICES = "services:"


class CatalogAPIError(Exception):
    """Raised when a catalog call fails after all retries."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


@dataclass(frozen=True)
class CatalogEntry:
    id: str
    slug: str
    localized_name: str
    summary: str


@dataclass(frozen=True)
class CatalogPage:
    items: tuple[CatalogEntry, ...]
    meta: dict[str, Any] = field(default_factory=dict)


def _pick_translation(item: dict[str, Any], locale: str | None) -> dict[str, Any] | None:
    """Prefer the translation for *locale*, otherwise any named translation."""
    candidates = [item.get("translation"), *(item.get("translations") or [])]
    named = [t for t in candidates if isinstance(t, dict) and t.get("name")]
    for translation in named:
        if translation.get("locale") == locale:
            return translation
    return named[0] if named else None


def parse_entry(item: dict[str, Any], locale: str | None) -> CatalogEntry:
    translation = _pick_translation(item, locale) or {}
    slug = str(item.get("slug") or "")
    return CatalogEntry(
        id=str(item.get("id") or slug),
        slug=slug,
        localized_name=translation.get("name") or slug,
        summary=translation.get("summary") or translation.get("description") or "",
    )


class CatalogClient:
    """Read-only wrapper around the catalog REST API."""

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        *,
        cache: TTLCache | None = None,
    ) -> None:
        headers = {"Accept": "application/json"}
        token = token or CATALOG_API_TOKEN
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=base_url or CATALOG_BASE_URL,
            headers=headers,
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
        self._cache = cache or TTLCache()

    async def _request(
        self, method: str, path: str, *, params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Execute an HTTP request with exponential-backoff retries."""
        last_error: Exception | None = None
        for attempt in range(1, MAX_RETRIES + 1):
            t0 = time.perf_counter()
            try:
                response = await self._client.request(method, path, params=params)
                if response.status_code >= 400:
                    raise CatalogAPIError(
                        f"Catalog error {response.status_code}: {response.text}",
                        status_code=response.status_code,
                    )
                try:
                    data = response.json()
                except ValueError as exc:
                    raise CatalogAPIError(f"Catalog returned invalid JSON: {exc}") from exc
                if not isinstance(data, dict):
                    raise CatalogAPIError(
                        f"Catalog returned a {type(data).__name__} instead of an object"
                    )
                metrics.record_success(
                    "catalog", f"{method} {path}",
                    latency_ms=(time.perf_counter() - t0) * 1000,
                )
                return data

            except (httpx.TimeoutException, httpx.ConnectError) as exc:
                last_error = exc
                metrics.record_failure("catalog", f"{method} {path}", error_type=type(exc).__name__)
                logger.warning(
                    "Catalog attempt %d/%d failed (%s)", attempt, MAX_RETRIES, type(exc).__name__,
                )
            except CatalogAPIError as exc:
                metrics.record_failure(
                    "catalog", f"{method} {path}",
                    error_type=str(exc.status_code or "InvalidPayload"),
                )
                if exc.status_code and exc.status_code >= 500:
                    last_error = exc
                    logger.warning(
                        "Catalog server error on attempt %d/%d", attempt, MAX_RETRIES,
                    )
                else:
                    raise  # 4xx and malformed payloads are not retried

            if attempt < MAX_RETRIES:
                await asyncio.sleep(INITIAL_BACKOFF_SECONDS * (2 ** (attempt - 1)))

        raise CatalogAPIError(
            f"Catalog request failed after {MAX_RETRIES} attempts: {last_error}"
        )

    async def list_active(
        self, page: int = 1, limit: int = 3, locale: str | None = None,
    ) -> CatalogPage:
        """List active services (cached briefly per locale/page/limit)."""
        cache_key = f"{_CK_SERVICES}{locale or '*'}:{page}:{limit}"
        data = self._cache.get(cache_key)
        if data is None:
            params: dict[str, Any] = {"page": page, "limit": limit, "isActive": "true"}
            if locale:
                params["locale"] = locale
            data = await self._request("GET", "/services", params=params)
            if not isinstance(data.get("data") or [], list):
                raise CatalogAPIError("Catalog response 'data' must be a list")
            self._cache.put(cache_key, data)

        raw_items = data.get("data") or []
        items = tuple(
            parse_entry(item, locale)
            for item in raw_items
            if isinstance(item, dict) and item.get("isActive", True)
        )
        meta = data.get("meta")
        return CatalogPage(items=items, meta=dict(meta) if isinstance(meta, dict) else {})

    async def aclose(self) -> None:
        await self._client.aclose()
