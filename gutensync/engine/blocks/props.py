"""Gutenberg block props and the block comment envelope.

A props bag is a plain dict whose insertion order is the serialization order.
"className" is held as a list of unique tokens while a block is being built and
collapsed to a space separated string when the block gets wrapped.
"""

import json
from typing import Any

from pydantic import BaseModel

from gutensync.contracts import RichTextRenderer
from gutensync.engine.constants import (
    HAS_BACKGROUND_CLASS,
    HAS_TEXT_COLOR_CLASS,
    LEGACY_CLASS_NAMES,
)

Props = dict[str, Any]


def add_class_name(props: Props, class_name: str) -> None:
    class_names = props.setdefault("className", [])
    if class_name not in class_names:
        class_names.append(class_name)


def init_block_props(payload: BaseModel | None, rich_text: RichTextRenderer, props: Props | None = None) -> Props:
    """Start a props bag for a block, deriving color classes and styles from its payload.

    Keys already in props come first, then className, then style.
    """
    props = dict(props or {})
    props["className"] = []
    color = getattr(payload, "color", None)
    if isinstance(color, str):
        if "_background" in color:
            add_class_name(props, HAS_BACKGROUND_CLASS)
            props.setdefault("style", {}).setdefault("color", {})["background"] = rich_text.bgcolor_to_rgb(color)
        else:
            add_class_name(props, HAS_TEXT_COLOR_CLASS)
            props.setdefault("style", {}).setdefault("color", {})["text"] = rich_text.color_to_rgb(color)
    return props


def generate_attributes_from_props(props: Props) -> str:
    """Render the class and style HTML attributes matching a props bag (leading space included)."""
    attributes = ""
    if props.get("className"):
        attributes += ' class="{}"'.format(" ".join(props["className"]))
    color_styles = (props.get("style") or {}).get("color") or {}
    styles = [
        f"{'color' if color_key == 'text' else 'background-color'}: {color}"
        for color_key, color in color_styles.items()
    ]
    if styles:
        attributes += ' style="{}"'.format("; ".join(styles))
    return attributes


def encode_props(props: Props, unescaped_slashes: bool = False) -> str:
    """JSON-encode props the way the block editor's PHP side does (compact, \\uXXXX, escaped slashes)."""
    encoded = json.dumps(props, separators=(",", ":"), ensure_ascii=True)
    if not unescaped_slashes:
        encoded = encoded.replace("/", "\\/")
    return encoded


def wrap_gut(content: str, block_name: str, props: Props | None = None, unescaped_slashes: bool = False) -> str:
    """Wrap HTML in the <!-- wp:name {props} --> ... <!-- /wp:name --> comments of a Gutenberg block."""
    props = dict(props or {})
    class_names = props.get("className")
    if isinstance(class_names, list):
        props["className"] = " ".join(name for name in class_names if name not in LEGACY_CLASS_NAMES)
    if not props.get("className"):
        props.pop("className", None)

    wrapped = f"<!-- wp:{block_name} "
    if props:
        wrapped += encode_props(props, unescaped_slashes) + " "
    wrapped += "-->\n"
    wrapped += content
    wrapped += f"\n<!-- /wp:{block_name} -->\n"
    return wrapped
