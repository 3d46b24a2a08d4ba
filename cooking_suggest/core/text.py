import re

_EMPHASIS_EDGES = re.compile(r"^\*+|\*+$")
_QUOTE_CHARS = "\"'“”"
_PARENTHETICAL = re.compile(r"\(.*\)")


def strip_emphasis(text: str) -> str:
    return _EMPHASIS_EDGES.sub("", (text or "").strip()).strip()


def strip_quotes(text: str) -> str:
    return (text or "").strip().strip(_QUOTE_CHARS).strip()


def clean_value(text: str) -> str:
    """Trim markdown emphasis and stray quotes around a single-line value."""
    return strip_quotes(strip_emphasis(text))


def drop_parenthetical(text: str) -> str:
    return _PARENTHETICAL.sub("", text or "").strip()
