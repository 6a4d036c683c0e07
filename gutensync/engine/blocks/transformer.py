"""Transform Notion block trees to Gutenberg block markup.

Walks the sibling sequence, regroups consecutive list items into a single
list block, and hands every block (or group) to the handlers registered for
its type. Container handlers recurse back into transform() for their children.
"""

import dataclasses
import re
from collections.abc import Sequence

from loguru import logger
from pydantic import BaseModel
from slugify import slugify

from gutensync.contracts import AttachmentManager, EmbedResolver, RichTextRenderer
from gutensync.engine.blocks.aspect_ratio import generate_aspect_ratio_class_names
from gutensync.engine.blocks.models import (
    Block,
    CalloutBlock,
    CodeBlock,
    ColumnListBlock,
    DividerBlock,
    EmbedBlock,
    FileObject,
    ImageBlock,
    ListItemBlock,
    ParagraphBlock,
    ParseContext,
    QuoteBlock,
    RichText,
    SyncedBlock,
    TableBlock,
    TableRowBlock,
    TextPayload,
    ToggleBlock,
    VideoBlock,
)
from gutensync.engine.blocks.props import (
    Props,
    add_class_name,
    generate_attributes_from_props,
    init_block_props,
    wrap_gut,
)
from gutensync.engine.blocks.registry import BlockHandlerRegistry
from gutensync.engine.constants import (
    CALLOUT_ICON_HTML,
    CAPTION_HTML,
    DEFAULT_HEADING_LEVEL,
    DIVIDER_HTML,
    EMBED_HTML,
    EMPTY_PARAGRAPH_HTML,
    LIST_ITEM_TYPES,
    NOTION_ICONS_URL_PREFIX,
)
from gutensync.engine.exceptions import CollaboratorError
from gutensync.engine.metrics import log_event

_HEADING_PATTERN = re.compile(r"^heading_([1-6])$")
_EMBED_SIZE_PATTERN = re.compile(r'width="([0-9%]+)" height="([0-9]+)"')


def _skip(html: str, block: Block | Sequence[Block]) -> str:
    """Pass-through for a block whose payload is missing or that reached the wrong handler."""
    if isinstance(block, Block):
        log_event("block_skipped", block_id=block.id, block_type=block.type)
    return html


def _caption_html(caption: str) -> str:
    return CAPTION_HTML.format(caption=caption) if caption else ""


class BlockTransformer:
    """Transforms Notion blocks to Gutenberg markup."""

    def __init__(
        self,
        rich_text: RichTextRenderer,
        attachments: AttachmentManager,
        embeds: EmbedResolver,
        toggle_max_depth: int = 2,
        icons_url_prefix: str = NOTION_ICONS_URL_PREFIX,
        registry: BlockHandlerRegistry | None = None,
    ):
        self.rich_text = rich_text
        self.attachments = attachments
        self.embeds = embeds
        self.toggle_max_depth = toggle_max_depth
        self.icons_url_prefix = icons_url_prefix
        self.registry = registry if registry is not None else BlockHandlerRegistry()
        self.init_blocks()

    def init_blocks(self) -> None:
        """Register the built-in transformer of every supported block type."""
        handlers = {
            "paragraph": self.transform_paragraph,
            "heading_1": self.transform_heading,
            "heading_2": self.transform_heading,
            "heading_3": self.transform_heading,
            "bulleted_list_item": self.transform_list,
            "numbered_list_item": self.transform_list,
            "quote": self.transform_quote,
            "table": self.transform_table,
            "divider": self.transform_divider,
            "image": self.transform_image,
            "video": self.transform_video,
            "column_list": self.transform_column_list,
            "callout": self.transform_callout,
            "synced_block": self.transform_synced_block,
            "code": self.transform_code,
            "toggle": self.transform_toggle,
            "embed": self.transform_embed,
        }
        for block_type, handler in handlers.items():
            self.registry.register(block_type, handler)

    def close(self) -> None:
        """Release the collaborators' resources, e.g. the HTTP clients of the default ones."""
        for collaborator in (self.attachments, self.embeds):
            close = getattr(collaborator, "close", None)
            if callable(close):
                close()

    def transform(self, blocks: Sequence[Block], context: ParseContext | None = None, result: str = "") -> str:
        """Transform sibling blocks, appending each block's markup to result.

        Consecutive list items of the same type are dispatched together so they
        end up in one list block. Inside a list item (context.sublist) a change
        of list type does not split the group, and the list keeps only the items
        of its first item's type.
        """
        context = context or ParseContext()
        group_type: str | None = None
        group: list[Block] = []

        for block in blocks:
            if block.type in LIST_ITEM_TYPES:
                # Found all siblings of the group? transform them
                if group_type is not None and block.type != group_type and not context.sublist:
                    result = self.registry.apply(group_type, result, group, context)
                    group = []
                group.append(block)
                group_type = block.type
            else:
                if group:
                    result = self.registry.apply(group_type, result, group, context)
                    group = []
                    group_type = None
                result = self.registry.apply(block.type, result, block, context)

        if group:
            result = self.registry.apply(group_type, result, group, context)
        return result

    # === TEXT BLOCKS ===

    def transform_paragraph(self, html: str, block: Block | Sequence[Block], context: ParseContext | None = None) -> str:
        if not isinstance(block, ParagraphBlock) or block.paragraph is None:
            return _skip(html, block)
        paragraph = block.paragraph
        return html + self._paragraph_html(self.rich_text.parse_rich_text(paragraph.rich_text), paragraph)

    def _paragraph_html(self, block_html: str, payload: BaseModel) -> str:
        if not block_html:
            return ""
        props = init_block_props(payload, self.rich_text)
        html_attributes = generate_attributes_from_props(props)
        return wrap_gut(f"<p{html_attributes}>{block_html}</p>", "paragraph", props)

    def _synthetic_paragraph(self, block: Block, rich_text: RichText) -> ParagraphBlock:
        return ParagraphBlock(id=block.id, paragraph=TextPayload(rich_text=rich_text))

    def transform_heading(self, html: str, block: Block | Sequence[Block], context: ParseContext | None = None) -> str:
        if not isinstance(block, Block):
            return html
        match = _HEADING_PATTERN.match(block.type)
        heading = block.payload
        if not match or not isinstance(heading, TextPayload):
            return _skip(html, block)

        level = int(match.group(1))
        props = init_block_props(heading, self.rich_text)
        # Level 2 is the editor's default and stays implicit
        if level != DEFAULT_HEADING_LEVEL:
            props["level"] = level

        block_html = self.rich_text.parse_rich_text(heading.rich_text)
        if not block_html:
            return html
        return html + wrap_gut(f"<h{level}>{block_html}</h{level}>", "heading", props)

    def transform_quote(self, html: str, block: Block | Sequence[Block], context: ParseContext | None = None) -> str:
        if not isinstance(block, QuoteBlock) or block.quote is None:
            return _skip(html, block)

        props = init_block_props(block.quote, self.rich_text)
        block_html = self.transform_paragraph("", self._synthetic_paragraph(block, block.quote.rich_text), context)
        if not block_html:
            return html

        attribute_props = {**props, "className": ["wp-block-quote", *props["className"]]}
        block_html = f"<blockquote{generate_attributes_from_props(attribute_props)}>{block_html}</blockquote>"
        return html + wrap_gut(block_html, "quote", props)

    def transform_code(self, html: str, block: Block | Sequence[Block], context: ParseContext | None = None) -> str:
        if not isinstance(block, CodeBlock) or block.code is None:
            return _skip(html, block)

        code = block.code
        block_html = self.rich_text.parse_rich_text(code.rich_text, nl2br=False)
        if block_html:
            html += wrap_gut(f'<pre class="wp-block-code"><code>{block_html}</code></pre>', "code")

        if code.caption is not None:
            html = self.transform_paragraph(html, self._synthetic_paragraph(block, code.caption), context)
        return html

    def transform_callout(self, html: str, block: Block | Sequence[Block], context: ParseContext | None = None) -> str:
        if not isinstance(block, CalloutBlock) or block.callout is None:
            return _skip(html, block)
        context = context or ParseContext()
        callout = block.callout

        rich_text = ""
        icon = callout.icon
        if icon is not None:
            if icon.type == "emoji":
                rich_text += f"{icon.emoji or ''} "
            elif icon.type in ("external", "file"):
                url = self._callout_icon_url(block, icon, context)
                if url:
                    rich_text += CALLOUT_ICON_HTML.format(url=url)

        rich_text += self.rich_text.parse_rich_text(callout.rich_text)
        return html + self._paragraph_html(rich_text, callout)

    def _callout_icon_url(self, block: Block, icon: FileObject, context: ParseContext) -> str | None:
        if icon.type == "external" and icon.url and icon.url.startswith(self.icons_url_prefix):
            return icon.url
        attachment_ids = self._import_media(block, "icon", icon, context)
        if not attachment_ids:
            return None
        return self.attachments.attachment_url(attachment_ids[0], "thumbnail")

    # === LISTS ===

    def transform_list(self, html: str, blocks: Block | Sequence[Block], context: ParseContext | None = None) -> str:
        """Transform a group of consecutive list items into one list block."""
        if isinstance(blocks, Block) or not blocks:
            return html
        context = context or ParseContext()

        list_type = blocks[0].type
        if list_type not in LIST_ITEM_TYPES:
            return html

        props: Props = {}
        tagname = "ul"
        if list_type == "numbered_list_item":
            props["ordered"] = True
            tagname = "ol"

        block_html = ""
        for block in blocks:
            block_html = self.transform_list_item(block_html, block, list_type, context)
        block_html = block_html.rstrip("\n")

        if not block_html:
            return html
        return html + wrap_gut(f"<{tagname}>{block_html}</{tagname}>", "list", props)

    def transform_list_item(self, html: str, block: Block, list_type: str, context: ParseContext) -> str:
        """Render one item of a list_type list. Items of another type pass through."""
        if not isinstance(block, ListItemBlock) or block.type != list_type or block.payload is None:
            return _skip(html, block)

        block_html = self.rich_text.parse_rich_text(block.payload.rich_text)
        if block.has_children:
            block_html = self.transform(block.children, dataclasses.replace(context, sublist=True), block_html)
            block_html = block_html.rstrip("\n")

        if block_html:
            block_html = wrap_gut(f"<li>{block_html}</li>", "list-item")

        # Top level items get a line break of their own for readability
        return html + block_html + ("" if context.sublist else "\n")

    # === STRUCTURE ===

    def transform_table(self, html: str, block: Block | Sequence[Block], context: ParseContext | None = None) -> str:
        if not isinstance(block, TableBlock) or block.table is None or not block.children:
            return _skip(html, block)

        table = block.table
        rows = list(block.children)
        block_html = ""

        # Top row is the header
        if table.has_column_header:
            header = rows.pop(0)
            cells = header.table_row.cells if isinstance(header, TableRowBlock) and header.table_row else []
            block_html += "<thead><tr>"
            for cell in cells:
                block_html += f"<th>{self.rich_text.parse_rich_text(cell)}</th>"
            block_html += "</tr></thead>"

        block_html += "<tbody>"
        for row in rows:
            if not isinstance(row, TableRowBlock) or row.table_row is None:
                continue
            block_html += "<tr>"
            for col_idx, cell in enumerate(row.table_row.cells):
                # First column is the header
                tagname = "th" if table.has_row_header and col_idx == 0 else "td"
                block_html += f"<{tagname}>{self.rich_text.parse_rich_text(cell)}</{tagname}>"
            block_html += "</tr>"
        block_html += "</tbody>"

        return html + wrap_gut(f'<figure class="wp-block-table"><table>{block_html}</table></figure>', "table")

    def transform_divider(self, html: str, block: Block | Sequence[Block], context: ParseContext | None = None) -> str:
        if not isinstance(block, DividerBlock) or block.divider is None:
            return _skip(html, block)
        return html + wrap_gut(DIVIDER_HTML, "separator", {"className": ["is-style-wide"]})

    def transform_column_list(
        self, html: str, block: Block | Sequence[Block], context: ParseContext | None = None
    ) -> str:
        if not isinstance(block, ColumnListBlock) or block.column_list is None or not block.children:
            return _skip(html, block)
        context = context or ParseContext()

        block_html = '<div class="wp-block-columns">'
        for column in block.children:
            if column.type != "column":
                continue
            column_html = self.transform(column.children, context, '<div class="wp-block-column">')
            column_html += "</div>"
            block_html += wrap_gut(column_html, "column")
        block_html += "</div>"

        return html + wrap_gut(block_html, "columns")

    def transform_toggle(self, html: str, block: Block | Sequence[Block], context: ParseContext | None = None) -> str:
        if not isinstance(block, ToggleBlock) or block.toggle is None:
            return _skip(html, block)
        context = context or ParseContext()
        level = context.toggle_level

        block_html = "<summary>" + self.rich_text.parse_rich_text(block.toggle.rich_text) + "</summary>"

        children = list(block.children) if block.has_children else []
        # Deeper toggles are dropped, the rest of their level still renders
        if level >= self.toggle_max_depth:
            children = [child for child in children if child.type != "toggle"]

        if children:
            block_html = self.transform(children, dataclasses.replace(context, toggle_level=level + 1), block_html)
            block_html = block_html.rstrip("\n")
        else:
            # The editor rejects a details block without inner blocks
            block_html += EMPTY_PARAGRAPH_HTML

        block_html = wrap_gut(f'<details class="wp-block-details">{block_html}</details>', "details", {})
        if level > 1:
            block_html += "\n"
        return html + block_html

    def transform_synced_block(
        self, html: str, block: Block | Sequence[Block], context: ParseContext | None = None
    ) -> str:
        """Synced blocks have no markup of their own, only their children's."""
        if not isinstance(block, SyncedBlock):
            return _skip(html, block)
        return self.transform(block.children, context, html)

    # === MEDIA ===

    def _import_media(
        self, block: Block, label: str, file: FileObject, context: ParseContext, preferred_extension: str | None = None
    ) -> list[int]:
        """Import a block's media through the attachment manager. Failures yield no ids."""
        try:
            descriptor = self.attachments.notion_file_to_media(block.id, label, file, preferred_extension)
            attachment_ids = self.attachments.get_set_files([descriptor], context.session, context.post_id)
        except CollaboratorError as e:
            logger.warning(f"Media import failed for {block.type} block {block.id}: {e}")
            log_event("attachment_failed", block_id=block.id, block_type=block.type, reason=str(e))
            return []

        if not attachment_ids:
            log_event("attachment_missing", block_id=block.id, block_type=block.type)
        return attachment_ids

    def transform_image(self, html: str, block: Block | Sequence[Block], context: ParseContext | None = None) -> str:
        if not isinstance(block, ImageBlock) or block.image is None:
            return _skip(html, block)
        context = context or ParseContext()
        image = block.image

        if image.type not in ("external", "file"):
            return html

        props = init_block_props(image, self.rich_text, {"linkDestination": "none"})
        caption = self.rich_text.parse_rich_text(image.caption) if image.caption else ""
        label = self.rich_text.to_plain_text(image.caption) if caption else block.type

        attachment_ids = self._import_media(block, label, image, context)
        if not attachment_ids:
            return html
        image_url = self.attachments.attachment_url(attachment_ids[0], "large")
        if image_url is None:
            return html

        add_class_name(props, "size-large")
        block_html = f'<figure class="wp-block-image size-large"><img src="{image_url}" alt=""/>'
        block_html += _caption_html(caption)
        block_html += "</figure>"

        return html + wrap_gut(block_html, "image", props)

    def transform_video(self, html: str, block: Block | Sequence[Block], context: ParseContext | None = None) -> str:
        if not isinstance(block, VideoBlock) or block.video is None:
            return _skip(html, block)
        context = context or ParseContext()
        video = block.video

        props = init_block_props(video, self.rich_text)
        caption = self.rich_text.parse_rich_text(video.caption) if video.caption else ""

        if video.type == "external":
            if video.url:
                html += self.embed(video.url, props, caption)
        elif video.type == "file":
            attachment_ids = self._import_media(block, "video", video, context, "mp4")
            if not attachment_ids:
                return html
            video_url = self.attachments.attachment_url(attachment_ids[0])
            if video_url is None:
                return html
            props["id"] = attachment_ids[0]
            block_html = (
                f'<figure class="wp-block-video"><video controls src="{video_url}"></video>'
                f"{_caption_html(caption)}</figure>"
            )
            html += wrap_gut(block_html, "video", props)

        return html

    def transform_embed(self, html: str, block: Block | Sequence[Block], context: ParseContext | None = None) -> str:
        if not isinstance(block, EmbedBlock) or block.embed is None:
            return _skip(html, block)
        embed = block.embed
        props = init_block_props(embed, self.rich_text)
        caption = self.rich_text.parse_rich_text(embed.caption) if embed.caption else ""
        return html + self.embed(embed.url, props, caption)

    def embed(self, url: str, props: Props, caption: str = "") -> str:
        """Embed block markup for url, or "" when no preview can be resolved."""
        try:
            preview = self.embeds.resolve(url)
        except CollaboratorError as e:
            logger.warning(f"Embed skipped for {url}: {e}")
            log_event("embed_failed", url=url, reason=str(e))
            return ""

        props = {**props, "className": list(props.get("className", []))}
        props["url"] = url
        props["type"] = preview.type
        props["providerNameSlug"] = slugify(preview.provider_name)
        props["responsive"] = True
        is_rich = preview.type == "rich"

        aspect_ratio_class_names: list[str] = []
        match = _EMBED_SIZE_PATTERN.search(preview.html)
        if match:
            aspect_ratio_class_names = generate_aspect_ratio_class_names(match.group(1), match.group(2))
            previous_class_names = props.pop("className") if is_rich else props["className"]
            # Rich embeds get className last
            props["className"] = previous_class_names + aspect_ratio_class_names

        block_html = EMBED_HTML.format(
            type=preview.type,
            provider=props["providerNameSlug"],
            aspect_classes="".join(f" {name}" for name in aspect_ratio_class_names),
            url=url,
            caption=_caption_html(caption),
        )
        return wrap_gut(block_html, "embed", props, unescaped_slashes=is_rich)


def extract_child_page_ids(blocks: Sequence[Block]) -> list[str]:
    """Ids of the child_page blocks among blocks (not recursive), in order."""
    return [block.id for block in blocks if block.type == "child_page"]
