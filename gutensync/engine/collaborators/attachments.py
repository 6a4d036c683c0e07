"""Media import for image, video and callout icon blocks, stored on the local filesystem."""

import hashlib
import io
import time
from collections.abc import Sequence
from pathlib import Path, PurePosixPath
from urllib.parse import urlparse

import httpx
from loguru import logger

from gutensync.contracts import ImportSession, MediaDescriptor
from gutensync.engine.blocks.models import FileObject
from gutensync.engine.exceptions import AttachmentImportError
from gutensync.engine.metrics import log_event


def strip_query(url: str) -> str:
    """Notion-hosted file URLs carry expiring signatures in the query string."""
    return url.split("?")[0] if "?" in url else url


def url_extension(url: str) -> str | None:
    suffix = PurePosixPath(urlparse(url).path).suffix
    return suffix.lstrip(".").lower() or None


class LocalAttachmentManager:
    """Download media once per source block and serve it from a public base URL.

    Descriptors are deduplicated by identity (source block + URL without query),
    stored files by content hash, so re-running a sync imports nothing new.
    """

    def __init__(
        self,
        base_path: Path,
        public_url: str,
        timeout: float = 30.0,
        max_size: int = 50 * 1024 * 1024,
        client: httpx.Client | None = None,
    ):
        self.base_path = base_path
        self.public_url = public_url.rstrip("/")
        self.max_size = max_size
        self._client = client or httpx.Client(follow_redirects=True, timeout=timeout)
        self._next_id = 1
        self._by_descriptor: dict[str, int] = {}
        self._by_digest: dict[str, int] = {}
        self._filenames: dict[int, str] = {}

    def close(self) -> None:
        self._client.close()

    def notion_file_to_media(
        self,
        block_id: str,
        label: str,
        file: FileObject,
        preferred_extension: str | None = None,
    ) -> MediaDescriptor:
        if not file.url or file.type not in ("file", "external"):
            raise AttachmentImportError(file.url or "", f"{file.type} file object has no URL")

        clean_url = strip_query(file.url)
        identity = hashlib.sha256(f"{block_id}|{clean_url}".encode("utf-8")).hexdigest()
        return MediaDescriptor(
            id=identity,
            block_id=block_id,
            label=label,
            url=file.url,
            source_type=file.type,
            extension=url_extension(clean_url) or preferred_extension,
        )

    def get_set_files(
        self,
        descriptors: Sequence[MediaDescriptor],
        session: ImportSession | None,
        post_id: int | None = None,
    ) -> list[int]:
        attachment_ids = []
        for descriptor in descriptors:
            attachment_id = self._by_descriptor.get(descriptor.id)
            if attachment_id is None:
                try:
                    attachment_id = self._import(descriptor)
                except AttachmentImportError as e:
                    logger.warning(f"Skipping media of block {descriptor.block_id}: {e}")
                    log_event("attachment_failed", block_id=descriptor.block_id, reason=e.reason)
                    continue
                self._by_descriptor[descriptor.id] = attachment_id
                logger.debug(f"Imported {descriptor.label!r} as attachment {attachment_id} (post {post_id})")

            if session is not None and attachment_id not in session.attachment_ids:
                session.attachment_ids.append(attachment_id)
            attachment_ids.append(attachment_id)
        return attachment_ids

    def attachment_url(self, attachment_id: int, size: str | None = None) -> str | None:
        """Public URL of an attachment. Only full-size files are stored, so size is ignored."""
        filename = self._filenames.get(attachment_id)
        if filename is None:
            return None
        return f"{self.public_url}/{filename}"

    def _import(self, descriptor: MediaDescriptor) -> int:
        data = self._download(descriptor.url)
        digest = hashlib.sha256(data).hexdigest()
        if digest in self._by_digest:
            return self._by_digest[digest]

        filename = f"{digest}.{descriptor.extension}" if descriptor.extension else digest
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
            (self.base_path / filename).write_bytes(data)
        except OSError as e:
            raise AttachmentImportError(descriptor.url, f"storage failed: {e}") from e

        attachment_id = self._next_id
        self._next_id += 1
        self._by_digest[digest] = attachment_id
        self._filenames[attachment_id] = filename
        return attachment_id

    def _download(self, url: str) -> bytes:
        start = time.monotonic()
        try:
            with self._client.stream("GET", url) as response:
                response.raise_for_status()
                content = io.BytesIO()
                downloaded = 0
                for chunk in response.iter_bytes(chunk_size=8192):
                    downloaded += len(chunk)
                    if downloaded > self.max_size:
                        raise AttachmentImportError(url, f"file exceeds maximum of {self.max_size} bytes")
                    content.write(chunk)
        except httpx.HTTPStatusError as e:
            raise AttachmentImportError(url, f"HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            raise AttachmentImportError(url, f"request failed: {e}") from e

        duration_ms = int((time.monotonic() - start) * 1000)
        log_event("attachment_imported", url=strip_query(url), size_bytes=downloaded, duration_ms=duration_ms)
        return content.getvalue()
