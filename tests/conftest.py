"""Shared fixtures: in-memory collaborators so block tests never touch the network."""

from collections.abc import Sequence

import pytest

from gutensync.contracts import EmbedPreview, ImportSession, MediaDescriptor
from gutensync.engine import metrics
from gutensync.engine.blocks import BlockTransformer
from gutensync.engine.blocks.models import FileObject
from gutensync.engine.collaborators import NotionRichTextRenderer
from gutensync.engine.exceptions import AttachmentImportError, EmbedResolutionError


class FakeAttachmentManager:
    """Hands out attachment ids for known URLs, nothing for the rest."""

    def __init__(self, known_urls: dict[str, int] | None = None, fail: bool = False):
        self.known_urls = known_urls or {}
        self.fail = fail
        self.calls: list[tuple[list[MediaDescriptor], ImportSession | None, int | None]] = []

    def notion_file_to_media(
        self, block_id: str, label: str, file: FileObject, preferred_extension: str | None = None
    ) -> MediaDescriptor:
        return MediaDescriptor(
            id=f"{block_id}:{file.url}",
            block_id=block_id,
            label=label,
            url=file.url or "",
            source_type=file.type,
            extension=preferred_extension,
        )

    def get_set_files(
        self, descriptors: Sequence[MediaDescriptor], session: ImportSession | None, post_id: int | None = None
    ) -> list[int]:
        self.calls.append((list(descriptors), session, post_id))
        if self.fail:
            raise AttachmentImportError(descriptors[0].url, "storage unavailable")
        return [self.known_urls[d.url] for d in descriptors if d.url in self.known_urls]

    def attachment_url(self, attachment_id: int, size: str | None = None) -> str | None:
        suffix = f"-{size}" if size else ""
        return f"https://cdn.example.com/{attachment_id}{suffix}.bin"


class FakeEmbedResolver:
    def __init__(self, previews: dict[str, EmbedPreview] | None = None):
        self.previews = previews or {}
        self.calls: list[str] = []

    def resolve(self, url: str) -> EmbedPreview:
        self.calls.append(url)
        if url not in self.previews:
            raise EmbedResolutionError(url, "no provider")
        return self.previews[url]


@pytest.fixture(autouse=True)
def reset_metrics():
    metrics.reset()
    yield
    metrics.reset()


@pytest.fixture
def attachments() -> FakeAttachmentManager:
    return FakeAttachmentManager()


@pytest.fixture
def embeds() -> FakeEmbedResolver:
    return FakeEmbedResolver()


@pytest.fixture
def transformer(attachments, embeds) -> BlockTransformer:
    return BlockTransformer(
        rich_text=NotionRichTextRenderer(),
        attachments=attachments,
        embeds=embeds,
    )


@pytest.fixture
def make_transformer():
    """Build a transformer around fresh fakes; the fakes stay reachable as attributes."""

    def factory(
        known_urls: dict[str, int] | None = None,
        fail: bool = False,
        previews: dict[str, EmbedPreview] | None = None,
        **kwargs,
    ) -> BlockTransformer:
        return BlockTransformer(
            rich_text=NotionRichTextRenderer(),
            attachments=FakeAttachmentManager(known_urls, fail=fail),
            embeds=FakeEmbedResolver(previews),
            **kwargs,
        )

    return factory
