"""Type-keyed handler chains used to dispatch blocks to their transformers."""

from collections.abc import Callable, Sequence

from gutensync.engine.blocks.models import Block, ParseContext
from gutensync.engine.metrics import log_event
from gutensync.engine.utils import sanitize_key

# (markup so far, block or list item group, context) -> markup
BlockHandler = Callable[[str, Block | Sequence[Block], ParseContext], str]


class BlockHandlerRegistry:
    """Ordered handlers per block type.

    Every handler registered for a type runs in registration order and gets
    the output of the previous one, so a later handler can extend, replace or
    veto what an earlier one produced. Types without handlers pass through.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[BlockHandler]] = {}

    def register(self, block_type: str, handler: BlockHandler) -> None:
        self._handlers.setdefault(sanitize_key(block_type), []).append(handler)

    def handlers(self, block_type: str) -> list[BlockHandler]:
        return list(self._handlers.get(sanitize_key(block_type), []))

    def apply(self, block_type: str, html: str, block: Block | Sequence[Block], context: ParseContext) -> str:
        handlers = self._handlers.get(sanitize_key(block_type))
        if not handlers:
            log_event("block_unsupported", block_type=block_type)
            return html
        for handler in handlers:
            html = handler(html, block, context)
        return html
