"""
Heuristics for obfuscated markup.

These routines are substring pattern matches rather than parsing. Each one is
kept small and separately tested so its exact behavior is pinned by golden
cases. They never decide on their own whether something is safe; the
sanitization pass escapes everything they return.
"""

_QUOTES = "\"'`"


def find_obfuscated_target(
    tag_name: str, dangerous_tags: frozenset[str], following_text: str = ""
) -> str | None:
    """
    Find the dangerous tag a truncated tag name could be the start of.

    ``<scr>ipt>`` style input splits a dangerous name so that the first half
    is parsed as a tag and the rest leaks into the next text token.

    Args:
        tag_name: Lowercased tag name.
        dangerous_tags: Names whose content is always discarded.
        following_text: Content of the next text token, used to choose
            between several candidates (``s`` could start ``script`` or
            ``style``).

    Returns:
        The dangerous tag name, or None if ``tag_name`` is not a non-empty
        strict prefix of any of them.
    """
    if not tag_name:
        return None

    candidates = sorted(
        name for name in dangerous_tags if len(name) > len(tag_name) and name.startswith(tag_name)
    )
    if not candidates:
        return None

    lowered = following_text.lower()
    for name in candidates:
        if lowered.startswith(name[len(tag_name) :]):
            return name
    return candidates[0]


def strip_leaked_suffix(text: str, tag_name: str, target: str) -> str:
    """Remove the missing part of ``target`` from the start of ``text``."""
    suffix = target[len(tag_name) :]
    if suffix and text.lower().startswith(suffix):
        return text[len(suffix) :]
    return text


def is_obfuscated_close(tag_name: str, target: str) -> bool:
    """Check if an end tag name could close an obfuscated ``target`` tag."""
    return bool(tag_name) and target.startswith(tag_name)


def _trim_quotes(value: str) -> str:
    if value and value[0] in _QUOTES:
        value = value[1:]
    if value and value[-1] in _QUOTES:
        value = value[:-1]
    return value


def recover_event_handler_value(tag_name: str, raw_attributes: str) -> str | None:
    """
    Recover the value of an attribute smuggled into a disallowed tag.

    ``<svg/onload=alert(1)>`` has no whitespace, so the handler ends up in the
    tag name. When the tag contains a ``/``, everything after the first ``=``
    is kept (with one pair of quotes removed) so it can be emitted as inert
    text.

    Returns:
        The unescaped value, or None when the tag should be dropped silently.
    """
    source = f"{tag_name} {raw_attributes}" if raw_attributes else tag_name
    if "/" not in source:
        return None

    _, sep, value = source.partition("=")
    if not sep:
        return None

    value = _trim_quotes(value.strip())
    return value or None


def anchor_leftover(raw_attributes: str) -> str:
    """
    Extract trailing content injected after the last quoted attribute value.

    Anything from a ``<`` onwards is discarded. When the last quote opens a
    value that is never closed there is no trailing content.
    """
    open_quote = None
    last_close = -1
    for i, char in enumerate(raw_attributes):
        if open_quote:
            if char == open_quote:
                open_quote = None
                last_close = i
        elif char in "\"'":
            open_quote = char

    if open_quote or last_close < 0:
        return ""

    tail = raw_attributes[last_close + 1 :]
    tail = tail.split("<", 1)[0]
    return tail.strip()


def drop_unmatched_trailing_parens(text: str) -> str:
    """Drop closing parentheses at the end of ``text`` that have no opener."""
    while text.endswith(")") and text.count(")") > text.count("("):
        text = text[:-1]
    return text
