"""Lexical tokens produced by the tokenizer."""

from dataclasses import dataclass
from enum import Enum


class TokenType(Enum):
    """Kinds of token the tokenizer emits."""

    TEXT = "text"
    START_TAG = "start_tag"
    END_TAG = "end_tag"
    COMMENT = "comment"


@dataclass(frozen=True)
class Token:
    """
    A single lexical unit of the input markup.

    Text and comment tokens carry ``content``; tag tokens carry the lowercased
    ``tag_name`` and, for start tags, the untouched ``raw_attributes`` text.
    ``unclosed`` marks the final text token produced when a ``<`` has no
    matching ``>``; its content is already escaped.
    """

    type: TokenType
    content: str = ""
    tag_name: str = ""
    raw_attributes: str = ""
    unclosed: bool = False

    @classmethod
    def text(cls, content: str, unclosed: bool = False) -> "Token":
        return cls(TokenType.TEXT, content=content, unclosed=unclosed)

    @classmethod
    def comment(cls, content: str) -> "Token":
        return cls(TokenType.COMMENT, content=content)

    @classmethod
    def start_tag(cls, tag_name: str, raw_attributes: str = "") -> "Token":
        return cls(TokenType.START_TAG, tag_name=tag_name, raw_attributes=raw_attributes)

    @classmethod
    def end_tag(cls, tag_name: str) -> "Token":
        return cls(TokenType.END_TAG, tag_name=tag_name)

    @property
    def is_text(self) -> bool:
        return self.type is TokenType.TEXT

    @property
    def is_start_tag(self) -> bool:
        return self.type is TokenType.START_TAG

    @property
    def is_end_tag(self) -> bool:
        return self.type is TokenType.END_TAG
