"""Policy-driven sanitization pass over the token stream."""

from .attributes import parse_attributes
from .logger import get_logger
from .models.result import SanitizeResult
from .models.token import Token, TokenType
from .policy import DEFAULT_POLICY, Policy
from .tokenizer import tokenize
from .utils.recovery import (
    anchor_leftover,
    drop_unmatched_trailing_parens,
    find_obfuscated_target,
    is_obfuscated_close,
    recover_event_handler_value,
    strip_leaked_suffix,
)
from .utils.text import escape_text, url_scheme

logger = get_logger(__name__)


class HTMLSanitizer:
    """
    Left-to-right rewriting of tokens into safe markup.

    The pass keeps three pieces of state: the output buffer, the stack of
    tags opened in the output and not yet closed, and a cursor into the
    token list. Most rules consume one token; skipping a dangerous element
    or recovering from an obfuscated tag moves the cursor further.

    The open-tag stack is a plain list, so nesting depth in the input has no
    effect on the Python call stack.
    """

    def __init__(self, policy: Policy = DEFAULT_POLICY):
        self.policy = policy
        self._output: list[str] = []
        self._open_tags: list[str] = []
        self._tokens: list[Token] = []
        self._cursor = 0

    def run(self, tokens: list[Token]) -> str:
        """
        Sanitize a token list.

        Args:
            tokens: Tokens from the tokenizer, in input order.

        Returns:
            The sanitized markup with every opened tag closed.
        """
        self._output = []
        self._open_tags = []
        self._tokens = tokens
        self._cursor = 0

        while self._cursor < len(self._tokens):
            token = self._tokens[self._cursor]
            self._cursor += 1

            if token.type is TokenType.TEXT:
                self._handle_text(token)
            elif token.type is TokenType.START_TAG:
                self._handle_start_tag(token)
            elif token.type is TokenType.END_TAG:
                self._handle_end_tag(token)
            else:
                logger.debug("Dropped comment")

        while self._open_tags:
            self._close(self._open_tags.pop())

        return "".join(self._output)

    @property
    def open_tags(self) -> tuple[str, ...]:
        """Tags currently open in the output, outermost first."""
        return tuple(self._open_tags)

    # --- emitters -------------------------------------------------------

    def _emit(self, markup: str) -> None:
        if markup:
            self._output.append(markup)

    def _open(self, tag_name: str, push: bool = True) -> None:
        self._emit(f"<{tag_name}>")
        if push:
            self._open_tags.append(tag_name)

    def _close(self, tag_name: str) -> None:
        self._emit(f"</{tag_name}>")

    # --- token rules ----------------------------------------------------

    def _handle_text(self, token: Token) -> None:
        if token.unclosed:
            self._emit(token.content)
            return

        content = token.content
        if self._open_tags and self.policy.is_inline(self._open_tags[-1]):
            content = drop_unmatched_trailing_parens(content)
        self._emit(escape_text(content))

    def _handle_end_tag(self, token: Token) -> None:
        if self._open_tags and self._open_tags[-1] == token.tag_name:
            self._close(self._open_tags.pop())
        else:
            logger.debug(f"Dropped unmatched end tag: {token.tag_name!r}")

    def _handle_start_tag(self, token: Token) -> None:
        tag_name = token.tag_name

        if not self.policy.is_allowed(tag_name) and not self.policy.is_dangerous(tag_name):
            target = find_obfuscated_target(
                tag_name, self.policy.dangerous_tags, self._peek_text()
            )
            if target is not None:
                self._recover_obfuscated(tag_name, target)
                return

        if self.policy.is_allowed(tag_name):
            if tag_name == self.policy.anchor_tag:
                self._open_anchor(token)
            elif self.policy.is_void(tag_name):
                self._open(tag_name, push=False)
            else:
                self._open_element(tag_name)
        elif self.policy.is_dangerous(tag_name):
            self._skip_dangerous(tag_name)
        else:
            self._drop_disallowed(token)

    def _open_element(self, tag_name: str) -> None:
        if (
            self.policy.auto_close_block_level
            and self.policy.is_block_level(tag_name)
            and self._open_tags
            and self.policy.is_block_level(self._open_tags[-1])
        ):
            self._close(self._open_tags.pop())
        self._open(tag_name)

    def _open_anchor(self, token: Token) -> None:
        anchor = self.policy.anchor_tag
        attributes = parse_attributes(token.raw_attributes)
        href_attribute = self.policy.href_attribute
        href = attributes.get(href_attribute)

        if href is not None and self.policy.allows_scheme(url_scheme(href)):
            # Quotes in the value must not end the attribute early
            self._emit(f'<{anchor} {href_attribute}="{escape_text(href)}">')
            self._open_tags.append(anchor)
            return

        if href is not None:
            logger.debug(f"Dropped href with disallowed scheme: {url_scheme(href)!r}")
        self._open(anchor)
        self._emit(escape_text(anchor_leftover(token.raw_attributes)))

    def _skip_dangerous(self, tag_name: str) -> None:
        depth = 1
        skipped = 0
        while self._cursor < len(self._tokens) and depth > 0:
            token = self._tokens[self._cursor]
            self._cursor += 1
            skipped += 1
            if token.tag_name != tag_name:
                continue
            if token.is_start_tag:
                depth += 1
            elif token.is_end_tag:
                depth -= 1
        logger.debug(f"Skipped dangerous element {tag_name!r} ({skipped} tokens)")

    def _recover_obfuscated(self, tag_name: str, target: str) -> None:
        following = self._peek(TokenType.TEXT)
        if following is not None and not following.unclosed:
            self._cursor += 1
            remainder = strip_leaked_suffix(following.content, tag_name, target)
            self._emit(escape_text(remainder))

        while self._cursor < len(self._tokens):
            token = self._tokens[self._cursor]
            self._cursor += 1
            if token.is_end_tag and is_obfuscated_close(token.tag_name, target):
                break
        logger.debug(f"Recovered obfuscated {target!r} split as {tag_name!r}")

    def _drop_disallowed(self, token: Token) -> None:
        recovered = recover_event_handler_value(token.tag_name, token.raw_attributes)
        if recovered is None:
            logger.debug(f"Dropped disallowed tag: {token.tag_name!r}")
            return
        logger.debug(f"Kept attribute value of disallowed tag {token.tag_name!r} as text")
        self._emit(escape_text(recovered))

    # --- cursor helpers -------------------------------------------------

    def _peek(self, token_type: TokenType) -> Token | None:
        if self._cursor < len(self._tokens):
            token = self._tokens[self._cursor]
            if token.type is token_type:
                return token
        return None

    def _peek_text(self) -> str:
        token = self._peek(TokenType.TEXT)
        return token.content if token is not None else ""


def sanitize(markup: str, policy: Policy = DEFAULT_POLICY) -> SanitizeResult:
    """
    Sanitize untrusted markup.

    Hostile or malformed input never causes a failure; it is rewritten into
    safe output. The only error is an internally inconsistent policy.

    Args:
        markup: Untrusted HTML.
        policy: What to let through. Defaults to ``DEFAULT_POLICY``.

    Returns:
        A successful result holding the sanitized markup, or an error
        result describing the policy problems.

    Example:
        >>> sanitize('<p onclick="x()">Hi<script>evil()</script></p>').output
        '<p>Hi</p>'
    """
    problems = policy.problems()
    if problems:
        logger.error(f"Refusing to sanitize with invalid policy '{policy.name}': {problems}")
        return SanitizeResult.fail(f"Invalid policy '{policy.name}': " + "; ".join(problems))

    return SanitizeResult.ok(HTMLSanitizer(policy).run(tokenize(markup)))


def sanitize_or_raise(markup: str, policy: Policy = DEFAULT_POLICY) -> str:
    """
    Sanitize markup and return the string directly.

    Raises:
        SanitizationError: If the policy is invalid.
    """
    return sanitize(markup, policy).unwrap()
