from gutensync.engine import create_block_transformer
from gutensync.engine.collaborators import LocalAttachmentManager, NotionRichTextRenderer, OEmbedResolver
from gutensync.engine.config import Settings


def test_create_block_transformer(tmp_path):
    settings = Settings(_env_file=None, toggle_max_depth=3, attachments_dir=tmp_path, log_dir=tmp_path / "logs")

    transformer = create_block_transformer(settings)

    assert isinstance(transformer.rich_text, NotionRichTextRenderer)
    assert isinstance(transformer.attachments, LocalAttachmentManager)
    assert isinstance(transformer.embeds, OEmbedResolver)
    assert transformer.toggle_max_depth == 3
    assert transformer.attachments.base_path == tmp_path
    assert (tmp_path / "logs").is_dir()
    for block_type in ("paragraph", "heading_1", "bulleted_list_item", "toggle", "embed"):
        assert transformer.registry.handlers(block_type)
    assert transformer.registry.handlers("child_page") == []
    transformer.close()


def test_close_releases_http_clients(tmp_path):
    transformer = create_block_transformer(Settings(_env_file=None, attachments_dir=tmp_path))

    transformer.close()

    assert transformer.attachments._client.is_closed
    assert transformer.embeds._client.is_closed
