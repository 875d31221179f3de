"""Utility modules for the sanitizer."""

from .recovery import (
    anchor_leftover,
    drop_unmatched_trailing_parens,
    find_obfuscated_target,
    is_obfuscated_close,
    recover_event_handler_value,
    strip_leaked_suffix,
)
from .text import escape_text, escape_unclosed, url_scheme

__all__ = [
    "anchor_leftover",
    "drop_unmatched_trailing_parens",
    "escape_text",
    "escape_unclosed",
    "find_obfuscated_target",
    "is_obfuscated_close",
    "recover_event_handler_value",
    "strip_leaked_suffix",
    "url_scheme",
]
