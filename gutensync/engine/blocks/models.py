"""Data models for Notion block trees.

A block tree is a tagged union keyed by ``type``. Every variant carries its
payload under a field named after its tag (the shape the Notion API returns)
and exposes it through ``Block.payload``, so transformers never build field
names out of type strings. Unknown tags parse into ``UnsupportedBlock``.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Literal

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from gutensync.engine.metrics import log_event

# === RICH TEXT ===


class Annotations(BaseModel):
    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    underline: bool = False
    code: bool = False
    color: str = "default"


class Link(BaseModel):
    url: str


class TextObject(BaseModel):
    content: str = ""
    link: Link | None = None


class EquationObject(BaseModel):
    expression: str = ""


class RichTextRun(BaseModel):
    """One styled run of text. Mentions keep only their plain_text."""

    type: str = "text"
    plain_text: str = ""
    href: str | None = None
    annotations: Annotations = Field(default_factory=Annotations)
    text: TextObject | None = None
    equation: EquationObject | None = None


RichText = list[RichTextRun]


# === PAYLOADS ===


class ExternalFile(BaseModel):
    url: str


class HostedFile(BaseModel):
    url: str
    expiry_time: str | None = None


class FileObject(BaseModel):
    """Notion file object: either hosted by Notion ("file") or hotlinked ("external")."""

    type: str
    external: ExternalFile | None = None
    file: HostedFile | None = None

    @property
    def url(self) -> str | None:
        if self.type == "external" and self.external:
            return self.external.url
        if self.type == "file" and self.file:
            return self.file.url
        return None


class FilePayload(FileObject):
    caption: RichText = Field(default_factory=list)
    color: str | None = None


class Icon(FileObject):
    emoji: str | None = None


class TextPayload(BaseModel):
    rich_text: RichText = Field(default_factory=list)
    color: str | None = None


class CodePayload(TextPayload):
    caption: RichText | None = None
    language: str | None = None


class CalloutPayload(TextPayload):
    icon: Icon | None = None


class TablePayload(BaseModel):
    table_width: int | None = None
    has_column_header: bool = False
    has_row_header: bool = False


class TableRowPayload(BaseModel):
    cells: list[RichText] = Field(default_factory=list)


class EmbedPayload(BaseModel):
    url: str
    caption: RichText = Field(default_factory=list)
    color: str | None = None


class EmptyPayload(BaseModel):
    """Payload of purely structural blocks (divider, columns)."""


class SyncedBlockPayload(BaseModel):
    synced_from: dict[str, Any] | None = None


class ChildPagePayload(BaseModel):
    title: str = ""


# === BLOCK TYPES ===


class Block(BaseModel):
    """Base block: identity, type tag and owned children."""

    id: str = ""
    type: str
    has_children: bool = False
    children: list["Block"] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @field_validator("children", mode="before")
    @classmethod
    def _parse_children(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return [parse_block(item) for item in value]
        return value

    @property
    def payload(self) -> BaseModel | None:
        return None


class ParagraphBlock(Block):
    type: Literal["paragraph"] = "paragraph"
    paragraph: TextPayload | None = None

    @property
    def payload(self) -> TextPayload | None:
        return self.paragraph


class Heading1Block(Block):
    type: Literal["heading_1"] = "heading_1"
    heading_1: TextPayload | None = None

    @property
    def payload(self) -> TextPayload | None:
        return self.heading_1


class Heading2Block(Block):
    type: Literal["heading_2"] = "heading_2"
    heading_2: TextPayload | None = None

    @property
    def payload(self) -> TextPayload | None:
        return self.heading_2


class Heading3Block(Block):
    type: Literal["heading_3"] = "heading_3"
    heading_3: TextPayload | None = None

    @property
    def payload(self) -> TextPayload | None:
        return self.heading_3


class BulletedListItemBlock(Block):
    type: Literal["bulleted_list_item"] = "bulleted_list_item"
    bulleted_list_item: TextPayload | None = None

    @property
    def payload(self) -> TextPayload | None:
        return self.bulleted_list_item


class NumberedListItemBlock(Block):
    type: Literal["numbered_list_item"] = "numbered_list_item"
    numbered_list_item: TextPayload | None = None

    @property
    def payload(self) -> TextPayload | None:
        return self.numbered_list_item


class QuoteBlock(Block):
    type: Literal["quote"] = "quote"
    quote: TextPayload | None = None

    @property
    def payload(self) -> TextPayload | None:
        return self.quote


class TableBlock(Block):
    type: Literal["table"] = "table"
    table: TablePayload | None = None

    @property
    def payload(self) -> TablePayload | None:
        return self.table


class TableRowBlock(Block):
    type: Literal["table_row"] = "table_row"
    table_row: TableRowPayload | None = None

    @property
    def payload(self) -> TableRowPayload | None:
        return self.table_row


class DividerBlock(Block):
    type: Literal["divider"] = "divider"
    divider: EmptyPayload | None = None

    @property
    def payload(self) -> EmptyPayload | None:
        return self.divider


class ImageBlock(Block):
    type: Literal["image"] = "image"
    image: FilePayload | None = None

    @property
    def payload(self) -> FilePayload | None:
        return self.image


class VideoBlock(Block):
    type: Literal["video"] = "video"
    video: FilePayload | None = None

    @property
    def payload(self) -> FilePayload | None:
        return self.video


class ColumnListBlock(Block):
    type: Literal["column_list"] = "column_list"
    column_list: EmptyPayload | None = None

    @property
    def payload(self) -> EmptyPayload | None:
        return self.column_list


class ColumnBlock(Block):
    type: Literal["column"] = "column"
    column: EmptyPayload | None = None

    @property
    def payload(self) -> EmptyPayload | None:
        return self.column


class CalloutBlock(Block):
    type: Literal["callout"] = "callout"
    callout: CalloutPayload | None = None

    @property
    def payload(self) -> CalloutPayload | None:
        return self.callout


class CodeBlock(Block):
    type: Literal["code"] = "code"
    code: CodePayload | None = None

    @property
    def payload(self) -> CodePayload | None:
        return self.code


class ToggleBlock(Block):
    type: Literal["toggle"] = "toggle"
    toggle: TextPayload | None = None

    @property
    def payload(self) -> TextPayload | None:
        return self.toggle


class SyncedBlock(Block):
    type: Literal["synced_block"] = "synced_block"
    synced_block: SyncedBlockPayload | None = None

    @property
    def payload(self) -> SyncedBlockPayload | None:
        return self.synced_block


class EmbedBlock(Block):
    type: Literal["embed"] = "embed"
    embed: EmbedPayload | None = None

    @property
    def payload(self) -> EmbedPayload | None:
        return self.embed


class ChildPageBlock(Block):
    type: Literal["child_page"] = "child_page"
    child_page: ChildPagePayload | None = None

    @property
    def payload(self) -> ChildPagePayload | None:
        return self.child_page


class UnsupportedBlock(Block):
    """Any block type we have no model for. Transformers skip it."""


ListItemBlock = BulletedListItemBlock | NumberedListItemBlock

_BLOCK_MODELS: dict[str, type[Block]] = {
    model.model_fields["type"].default: model
    for model in (
        ParagraphBlock,
        Heading1Block,
        Heading2Block,
        Heading3Block,
        BulletedListItemBlock,
        NumberedListItemBlock,
        QuoteBlock,
        TableBlock,
        TableRowBlock,
        DividerBlock,
        ImageBlock,
        VideoBlock,
        ColumnListBlock,
        ColumnBlock,
        CalloutBlock,
        CodeBlock,
        ToggleBlock,
        SyncedBlock,
        EmbedBlock,
        ChildPageBlock,
    )
}


def parse_block(data: Mapping[str, Any] | Block) -> Block:
    """Build a typed block (and its children) from a Notion API block object."""
    if isinstance(data, Block):
        return data
    if not isinstance(data, Mapping):
        # Let pydantic report the bad input
        return UnsupportedBlock.model_validate(data)
    block_type = str(data.get("type", ""))
    model = _BLOCK_MODELS.get(block_type, UnsupportedBlock)
    try:
        return model.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Malformed {block_type} block {data.get('id')}: {e.error_count()} validation error(s)")
        log_event("block_invalid", block_id=data.get("id"), block_type=block_type)

    # Without its payload the block reaches its handler and is skipped there
    fallback = {key: value for key, value in data.items() if key != block_type}
    try:
        return model.model_validate(fallback)
    except ValidationError:
        return model.model_validate({"id": str(data.get("id") or ""), "type": block_type})


def parse_blocks(items: Iterable[Mapping[str, Any] | Block]) -> list[Block]:
    return [parse_block(item) for item in items]


# === PARSE CONTEXT ===


@dataclass(frozen=True)
class ParseContext:
    """Per-call parameters threaded down the block tree.

    session: the import session handed to the attachment manager.
    post_id: target document the imported media gets attached to.
    toggle_level: nesting depth of the enclosing toggles, 1 at the top.
    sublist: set while rendering the children of a list item.
    """

    session: Any = None
    post_id: int | None = None
    toggle_level: int = 1
    sublist: bool = False
