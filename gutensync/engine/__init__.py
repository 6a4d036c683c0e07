from gutensync.engine.blocks.transformer import BlockTransformer
from gutensync.engine.collaborators import LocalAttachmentManager, NotionRichTextRenderer, OEmbedResolver
from gutensync.engine.config import Settings
from gutensync.engine.logging_config import configure_logging


def create_block_transformer(settings: Settings | None = None) -> BlockTransformer:
    """Build a transformer wired to the default collaborators.

    The collaborators hold HTTP clients; call close() on the transformer when done.
    """
    settings = settings or Settings()
    configure_logging(settings.log_level, settings.log_dir)

    return BlockTransformer(
        rich_text=NotionRichTextRenderer(),
        attachments=LocalAttachmentManager(
            base_path=settings.attachments_dir,
            public_url=settings.attachments_public_url,
            timeout=settings.attachment_download_timeout_seconds,
            max_size=settings.attachment_max_download_size,
        ),
        embeds=OEmbedResolver(settings.oembed_endpoint, timeout=settings.oembed_timeout_seconds),
        toggle_max_depth=settings.toggle_max_depth,
        icons_url_prefix=settings.notion_icons_url_prefix,
    )
