"""Contracts between the block engine and its external collaborators.

The engine only ever talks to these protocols. Default implementations live
in gutensync.engine.collaborators, tests use in-memory fakes.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal, Protocol

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from gutensync.engine.blocks.models import FileObject, RichTextRun


class MediaDescriptor(BaseModel):
    """A media file to import, keyed by the block it comes from."""

    id: str  # stable per source block, used for deduplication
    block_id: str
    label: str
    url: str
    source_type: Literal["file", "external"]
    extension: str | None = None

    model_config = ConfigDict(frozen=True)


class EmbedPreview(BaseModel):
    """Subset of an oEmbed response the embed transformer needs."""

    type: str
    provider_name: str
    html: str

    model_config = ConfigDict(frozen=True)


@dataclass
class ImportSession:
    """One sync run of one source page. Collects the attachments it imported."""

    id: str
    attachment_ids: list[int] = field(default_factory=list)


class RichTextRenderer(Protocol):
    def parse_rich_text(self, rich_text: Sequence[RichTextRun], *, nl2br: bool = True) -> str:
        """Render runs to inline HTML. nl2br=False keeps line breaks verbatim."""
        ...

    def to_plain_text(self, rich_text: Sequence[RichTextRun]) -> str: ...

    def color_to_rgb(self, color: str) -> str: ...

    def bgcolor_to_rgb(self, color: str) -> str: ...


class AttachmentManager(Protocol):
    def notion_file_to_media(
        self,
        block_id: str,
        label: str,
        file: FileObject,
        preferred_extension: str | None = None,
    ) -> MediaDescriptor: ...

    def get_set_files(
        self,
        descriptors: Sequence[MediaDescriptor],
        session: ImportSession | None,
        post_id: int | None = None,
    ) -> list[int]:
        """Import (or reuse) every descriptor, return attachment ids in order. Failed imports are left out."""
        ...

    def attachment_url(self, attachment_id: int, size: str | None = None) -> str | None: ...


class EmbedResolver(Protocol):
    def resolve(self, url: str) -> EmbedPreview:
        """Resolve preview metadata for url. Raises EmbedResolutionError on failure."""
        ...
