"""Tolerant tokenizer turning raw markup into a flat token list."""

from .logger import get_logger
from .models.token import Token
from .utils.text import escape_unclosed

logger = get_logger(__name__)

CDATA_OPEN = "<![CDATA["
CDATA_CLOSE = "]]>"
COMMENT_OPEN = "<!--"
COMMENT_CLOSE = "-->"


class Tokenizer:
    """
    Single-pass scanner over untrusted markup.

    The scanner never raises: malformed input degrades to best-effort tokens.
    Every iteration of ``tokens()`` moves the cursor forward, so it always
    terminates in time linear to the input length.

    - CDATA sections are skipped without producing a token.
    - Comments become a single COMMENT token holding the interior text.
    - ``<...>`` becomes a START_TAG or END_TAG token.
    - A ``<`` without a closing ``>`` ends tokenization with one unclosed
      TEXT token containing the rest of the input.
    - Everything else up to the next ``<`` is a TEXT token.
    """

    def __init__(self, markup: str):
        self.markup = markup
        self.pos = 0

    def tokens(self) -> list[Token]:
        """
        Tokenize the whole input.

        Returns:
            Tokens in input order.
        """
        tokens: list[Token] = []
        self.pos = 0
        length = len(self.markup)

        while self.pos < length:
            if self.markup[self.pos] != "<":
                tokens.append(self._read_text())
                continue

            if self.markup.startswith(CDATA_OPEN, self.pos):
                self._skip_cdata()
                continue

            if self.markup.startswith(COMMENT_OPEN, self.pos):
                tokens.append(self._read_comment())
                continue

            token = self._read_tag()
            tokens.append(token)
            if token.unclosed:
                break

        logger.debug(f"Tokenized {length} characters into {len(tokens)} tokens")
        return tokens

    def _read_text(self) -> Token:
        next_lt = self.markup.find("<", self.pos)
        if next_lt == -1:
            next_lt = len(self.markup)
        content = self.markup[self.pos : next_lt]
        self.pos = next_lt
        return Token.text(content)

    def _skip_cdata(self) -> None:
        end = self.markup.find(CDATA_CLOSE, self.pos + len(CDATA_OPEN))
        if end == -1:
            logger.debug("Unterminated CDATA section skipped to end of input")
            self.pos = len(self.markup)
        else:
            self.pos = end + len(CDATA_CLOSE)

    def _read_comment(self) -> Token:
        start = self.pos + len(COMMENT_OPEN)
        end = self.markup.find(COMMENT_CLOSE, start)
        if end == -1:
            # The rest of the input belongs to the comment
            self.pos = len(self.markup)
            return Token.comment(self.markup[start:])
        self.pos = end + len(COMMENT_CLOSE)
        return Token.comment(self.markup[start:end])

    def _read_tag(self) -> Token:
        gt_pos = self.markup.find(">", self.pos + 1)
        if gt_pos == -1:
            remainder = self.markup[self.pos :]
            self.pos = len(self.markup)
            logger.debug("Unclosed tag at end of input kept as escaped text")
            return Token.text(escape_unclosed(remainder), unclosed=True)

        content = self.markup[self.pos + 1 : gt_pos]
        self.pos = gt_pos + 1

        is_end_tag = content.startswith("/")
        if is_end_tag:
            content = content[1:]

        parts = content.split(None, 1)
        tag_name = parts[0].rstrip("/").lower() if parts else ""
        raw_attributes = parts[1] if len(parts) > 1 else ""

        if is_end_tag:
            return Token.end_tag(tag_name)
        return Token.start_tag(tag_name, raw_attributes)


def tokenize(markup: str) -> list[Token]:
    """Tokenize ``markup`` into a list of tokens."""
    return Tokenizer(markup).tokens()
