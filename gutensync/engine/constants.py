"""Gutenberg markup constants shared by the block transformers."""

LIST_ITEM_TYPES = ("bulleted_list_item", "numbered_list_item")

# Based on Gutenberg's packages/block-library/src/embed/constants.js, widest first
ASPECT_RATIOS = (
    # Common video resolutions
    (2.33, "wp-embed-aspect-21-9"),
    (2.00, "wp-embed-aspect-18-9"),
    (1.78, "wp-embed-aspect-16-9"),
    (1.33, "wp-embed-aspect-4-3"),
    # Vertical video and instagram square video
    (1.00, "wp-embed-aspect-1-1"),
    (0.56, "wp-embed-aspect-9-16"),
    (0.50, "wp-embed-aspect-1-2"),
)
HAS_ASPECT_RATIO_CLASS = "wp-has-aspect-ratio"
ASPECT_RATIO_TOLERANCE = 0.1

HAS_BACKGROUND_CLASS = "has-background"
HAS_TEXT_COLOR_CLASS = "has-text-color"
# Legacy marker classes, kept on HTML attributes but never serialized into block props
LEGACY_CLASS_NAMES = frozenset({HAS_BACKGROUND_CLASS, HAS_TEXT_COLOR_CLASS})

DEFAULT_HEADING_LEVEL = 2

DIVIDER_HTML = '<hr class="wp-block-separator has-alpha-channel-opacity is-style-wide"/>'
EMPTY_PARAGRAPH_HTML = "<!-- wp:paragraph -->\n<p></p>\n<!-- /wp:paragraph -->"
CAPTION_HTML = '<figcaption class="wp-element-caption">{caption}</figcaption>'
CALLOUT_ICON_HTML = (
    '<img style="height: 24px; width: 24px; object-fit: cover; border-radius: 3px; '
    'vertical-align: middle; margin-right: 8px;" src="{url}" alt=""/>'
)

NOTION_ICONS_URL_PREFIX = "https://www.notion.so/icons/"
EMBED_HTML = (
    '<figure class="wp-block-embed is-type-{type} is-provider-{provider} wp-block-embed-{provider}{aspect_classes}">'
    '<div class="wp-block-embed__wrapper">\n{url}\n</div>{caption}</figure>'
)
