"""Default implementations of the rich text, media and embed collaborators."""

from gutensync.engine.collaborators.attachments import LocalAttachmentManager
from gutensync.engine.collaborators.embed import OEmbedResolver
from gutensync.engine.collaborators.rich_text import NotionRichTextRenderer

__all__ = [
    "LocalAttachmentManager",
    "NotionRichTextRenderer",
    "OEmbedResolver",
]
