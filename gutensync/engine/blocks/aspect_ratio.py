"""Embed aspect ratio classes, following Gutenberg's getClassNames() in block-library/src/embed/util.js."""

from decimal import ROUND_HALF_UP, Decimal

from gutensync.engine.constants import (
    ASPECT_RATIO_TOLERANCE,
    ASPECT_RATIOS,
    HAS_ASPECT_RATIO_CLASS,
)
from gutensync.engine.utils import to_int

FULL_WIDTH = "100%"


def _round_ratio(width: int, height: int) -> float:
    """Round width/height to 2 decimals, half away from zero on the shortest decimal repr."""
    return float(Decimal(repr(width / height)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def generate_aspect_ratio_class_names(width: str | int, height: str | int) -> list[str]:
    """Return the aspect ratio classes for an embed of the given size, or [] if none fits.

    Width comes straight from the preview's HTML attribute and may be "100%".
    Gutenberg then classifies the embed as 21:9 whatever the height is. That is
    a bug upstream, reproduced here so our markup matches what the editor saves.
    """
    if width == FULL_WIDTH:
        widest_class = ASPECT_RATIOS[0][1]
        return [widest_class, HAS_ASPECT_RATIO_CLASS]

    width_px = to_int(width)
    height_px = to_int(height)
    if height_px <= 0:
        return []

    aspect_ratio = _round_ratio(width_px, height_px)
    # Given the actual aspect ratio, find the widest ratio to support it
    for ratio, class_name in ASPECT_RATIOS:
        if aspect_ratio >= ratio:
            # Too far from the closest match: don't scale the embed at all
            if aspect_ratio - ratio > ASPECT_RATIO_TOLERANCE:
                return []
            return [class_name, HAS_ASPECT_RATIO_CLASS]

    return []
