"""Render Notion rich text runs to inline HTML."""

from collections.abc import Sequence
from html import escape

from gutensync.engine.blocks.models import RichTextRun

# Notion's light theme palette
TEXT_COLORS: dict[str, str] = {
    "gray": "rgb(120, 119, 116)",
    "brown": "rgb(159, 107, 83)",
    "orange": "rgb(217, 115, 13)",
    "yellow": "rgb(203, 145, 47)",
    "green": "rgb(68, 131, 97)",
    "blue": "rgb(51, 126, 169)",
    "purple": "rgb(144, 101, 176)",
    "pink": "rgb(193, 76, 138)",
    "red": "rgb(212, 76, 71)",
}
BACKGROUND_COLORS: dict[str, str] = {
    "gray": "rgb(241, 241, 239)",
    "brown": "rgb(244, 238, 238)",
    "orange": "rgb(251, 236, 221)",
    "yellow": "rgb(251, 243, 219)",
    "green": "rgb(237, 243, 236)",
    "blue": "rgb(231, 243, 248)",
    "purple": "rgba(244, 240, 247, 0.8)",
    "pink": "rgba(249, 238, 243, 0.8)",
    "red": "rgb(253, 235, 236)",
}
FALLBACK_COLOR = "inherit"


class NotionRichTextRenderer:
    """Default rich text collaborator: runs to HTML, plain text, and color names to CSS."""

    def parse_rich_text(self, rich_text: Sequence[RichTextRun], *, nl2br: bool = True) -> str:
        return "".join(self._render_run(run, nl2br) for run in rich_text)

    def to_plain_text(self, rich_text: Sequence[RichTextRun]) -> str:
        return "".join(run.plain_text for run in rich_text)

    def color_to_rgb(self, color: str) -> str:
        return TEXT_COLORS.get(color, FALLBACK_COLOR)

    def bgcolor_to_rgb(self, color: str) -> str:
        return BACKGROUND_COLORS.get(color.removesuffix("_background"), FALLBACK_COLOR)

    def _render_run(self, run: RichTextRun, nl2br: bool) -> str:
        if run.type == "equation" and run.equation:
            return f"<code>{escape(run.equation.expression)}</code>"

        content = run.text.content if run.type == "text" and run.text else run.plain_text
        html = escape(content, quote=False)
        if nl2br:
            html = html.replace("\n", "<br>")

        annotations = run.annotations
        if annotations.code:
            html = f"<code>{html}</code>"
        if annotations.bold:
            html = f"<strong>{html}</strong>"
        if annotations.italic:
            html = f"<em>{html}</em>"
        if annotations.strikethrough:
            html = f"<s>{html}</s>"
        if annotations.underline:
            html = f'<span style="text-decoration: underline">{html}</span>'
        if annotations.color != "default":
            html = self._color_span(html, annotations.color)

        href = run.text.link.url if run.text and run.text.link else run.href
        if href:
            html = f'<a href="{escape(href)}">{html}</a>'
        return html

    def _color_span(self, html: str, color: str) -> str:
        if color.endswith("_background"):
            return f'<span style="background-color: {self.bgcolor_to_rgb(color)}">{html}</span>'
        return f'<span style="color: {self.color_to_rgb(color)}">{html}</span>'
