"""oEmbed preview lookup for embed and external video blocks."""

import time

import httpx
from loguru import logger
from pydantic import ValidationError

from gutensync.contracts import EmbedPreview
from gutensync.engine.exceptions import EmbedResolutionError
from gutensync.engine.metrics import log_event


class OEmbedResolver:
    """Resolve embed previews through an oEmbed proxy (e.g. noembed.com).

    Responses are memoised per URL for the lifetime of the resolver, so one
    sync run asks the proxy at most once per embedded URL.
    """

    def __init__(self, endpoint: str, timeout: float = 10.0, client: httpx.Client | None = None):
        self._endpoint = endpoint
        self._client = client or httpx.Client(
            follow_redirects=True,
            timeout=timeout,
            headers={"User-Agent": "gutensync/0.1 (oEmbed lookup)"},
        )
        self._cache: dict[str, EmbedPreview] = {}

    def close(self) -> None:
        self._client.close()

    def resolve(self, url: str) -> EmbedPreview:
        if url in self._cache:
            return self._cache[url]

        start = time.monotonic()
        try:
            response = self._client.get(self._endpoint, params={"url": url, "format": "json"})
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise EmbedResolutionError(url, f"HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            raise EmbedResolutionError(url, f"request failed: {e}") from e
        except ValueError as e:
            raise EmbedResolutionError(url, "response is not JSON") from e

        if not isinstance(data, dict) or "error" in data:
            reason = data.get("error", "unexpected payload") if isinstance(data, dict) else "unexpected payload"
            raise EmbedResolutionError(url, str(reason))

        try:
            preview = EmbedPreview(
                type=data["type"],
                provider_name=data.get("provider_name") or "",
                html=data.get("html") or "",
            )
        except (KeyError, ValidationError) as e:
            raise EmbedResolutionError(url, f"incomplete oEmbed response: {e}") from e

        duration_ms = int((time.monotonic() - start) * 1000)
        logger.debug(f"Resolved {preview.type} embed from {preview.provider_name or 'unknown provider'} for {url}")
        log_event("embed_resolved", url=url, duration_ms=duration_ms)
        self._cache[url] = preview
        return preview
