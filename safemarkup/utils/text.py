"""Escaping and URL helpers shared by the tokenizer and the sanitization pass."""

import re

# An ampersand that does not already start a named or numeric character reference
_BARE_AMPERSAND_RE = re.compile(r"&(?![A-Za-z][A-Za-z0-9]*;|#[0-9]+;|#[xX][0-9A-Fa-f]+;)")

# RFC 3986 scheme syntax
_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.\-]*$")

_ESCAPES = (
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
)


def escape_text(text: str) -> str:
    """Escape ``<``, ``>``, ``"`` and bare ``&`` for use as HTML text.

    Existing character references such as ``&amp;`` or ``&#39;`` are left
    alone so that escaping already-sanitized output is a no-op.

    Args:
        text: Raw text content.

    Returns:
        Text safe to place between tags.
    """
    if not text:
        return ""

    escaped = _BARE_AMPERSAND_RE.sub("&amp;", text)
    for char, entity in _ESCAPES:
        escaped = escaped.replace(char, entity)
    return escaped


def escape_unclosed(text: str) -> str:
    """Minimal escaping for the remainder of an unterminated tag."""
    return text.replace("<", "&lt;")


def url_scheme(value: str) -> str | None:
    """
    Extract the lowercased scheme of a URL.

    Args:
        value: Attribute value, possibly padded with whitespace.

    Returns:
        The scheme without the colon, or None for scheme-less (relative)
        references and values whose prefix is not a valid scheme.
    """
    candidate = value.strip().lower()
    scheme, sep, _ = candidate.partition(":")
    if not sep or not _SCHEME_RE.match(scheme):
        return None
    return scheme
