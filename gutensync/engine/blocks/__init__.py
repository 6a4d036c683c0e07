"""Notion block models and their transformation to Gutenberg markup."""

from gutensync.engine.blocks.aspect_ratio import generate_aspect_ratio_class_names
from gutensync.engine.blocks.models import (
    Block,
    ParseContext,
    RichTextRun,
    UnsupportedBlock,
    parse_block,
    parse_blocks,
)
from gutensync.engine.blocks.props import init_block_props, wrap_gut
from gutensync.engine.blocks.registry import BlockHandler, BlockHandlerRegistry
from gutensync.engine.blocks.transformer import BlockTransformer, extract_child_page_ids

__all__ = [
    # Models
    "Block",
    "ParseContext",
    "RichTextRun",
    "UnsupportedBlock",
    "parse_block",
    "parse_blocks",
    # Dispatch
    "BlockHandler",
    "BlockHandlerRegistry",
    # Transformer
    "BlockTransformer",
    "extract_child_page_ids",
    # Markup helpers
    "generate_aspect_ratio_class_names",
    "init_block_props",
    "wrap_gut",
]
