import re

_NON_KEY_CHARS = re.compile(r"[^a-z0-9_\-]")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def sanitize_key(key: str) -> str:
    """Lowercase a key and drop everything but alphanumerics, dashes and underscores."""
    return _NON_KEY_CHARS.sub("", key.lower())


def to_int(value: str | int | float) -> int:
    """Loose integer coercion: leading digits of a string, 0 if there are none ("50%" -> 50, "abc" -> 0)."""
    if isinstance(value, (int, float)):
        return int(value)
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else 0
