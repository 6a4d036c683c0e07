"""Tests for the type-keyed handler registry."""

from gutensync.engine import metrics
from gutensync.engine.blocks.models import ParseContext, parse_block
from gutensync.engine.blocks.registry import BlockHandlerRegistry

PARAGRAPH = parse_block({"id": "p1", "type": "paragraph", "paragraph": {"rich_text": []}})


class TestRegistry:
    def test_unknown_type_passes_through(self):
        registry = BlockHandlerRegistry()
        assert registry.apply("bookmark", "before", PARAGRAPH, ParseContext()) == "before"
        assert metrics.get_counts()["block_unsupported"] == 1

    def test_handlers_chain_in_registration_order(self):
        registry = BlockHandlerRegistry()
        registry.register("paragraph", lambda html, block, context: html + "a")
        registry.register("paragraph", lambda html, block, context: html + "b")
        assert registry.apply("paragraph", "", PARAGRAPH, ParseContext()) == "ab"

    def test_later_handler_can_veto(self):
        registry = BlockHandlerRegistry()
        registry.register("paragraph", lambda html, block, context: html + "<p>x</p>")
        registry.register("paragraph", lambda html, block, context: "")
        assert registry.apply("paragraph", "", PARAGRAPH, ParseContext()) == ""

    def test_handler_receives_block_and_context(self):
        registry = BlockHandlerRegistry()
        seen = []
        registry.register("paragraph", lambda html, block, context: seen.append((block, context)) or html)
        context = ParseContext(post_id=7)
        registry.apply("paragraph", "", PARAGRAPH, context)
        assert seen == [(PARAGRAPH, context)]

    def test_keys_are_sanitized(self):
        registry = BlockHandlerRegistry()
        registry.register("Heading_1", lambda html, block, context: html + "h")
        assert len(registry.handlers("heading_1")) == 1
        assert registry.apply("heading_1!", "", PARAGRAPH, ParseContext()) == "h"

    def test_handlers_returns_copy(self):
        registry = BlockHandlerRegistry()
        registry.register("paragraph", lambda html, block, context: html)
        registry.handlers("paragraph").clear()
        assert len(registry.handlers("paragraph")) == 1
