"""Immutable sanitization policy."""

from dataclasses import dataclass, field
from typing import Any

HEADING_TAGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})

DEFAULT_BLOCK_LEVEL_TAGS = HEADING_TAGS | frozenset(
    {"p", "blockquote", "pre", "ul", "ol", "li", "dl", "dt", "dd"}
)

DEFAULT_INLINE_TAGS = frozenset(
    {
        "b",
        "strong",
        "i",
        "em",
        "u",
        "s",
        "sub",
        "sup",
        "small",
        "mark",
        "abbr",
        "cite",
        "q",
        "code",
        "kbd",
        "var",
        "time",
        "dfn",
        "bdi",
        "bdo",
        "a",
    }
)

DEFAULT_ALLOWED_TAGS = DEFAULT_BLOCK_LEVEL_TAGS | DEFAULT_INLINE_TAGS | frozenset({"hr", "br"})

DEFAULT_DANGEROUS_TAGS = frozenset(
    {"script", "iframe", "xml", "embed", "object", "base", "style"}
)

DEFAULT_VOID_ELEMENTS = frozenset({"br", "hr", "img"})

DEFAULT_ALLOWED_SCHEMES = frozenset({"http", "https"})

# Policy fields holding sets of names
SET_FIELDS = (
    "allowed_tags",
    "block_level_tags",
    "inline_tags",
    "dangerous_tags",
    "void_elements",
    "allowed_schemes",
)


class PolicyError(ValueError):
    """Raised when a policy is internally inconsistent."""

    pass


def _normalize(names) -> frozenset[str]:
    return frozenset(str(name).strip().lower() for name in names)


@dataclass(frozen=True)
class Policy:
    """
    What the sanitizer lets through.

    A policy is read-only once built and can be shared between concurrent
    sanitize calls. Use ``Policy.from_dict`` to build one from loosely typed
    data (names are lowercased and stripped there); the constructor takes
    the values as given.

    Attributes:
        allowed_tags: Tags emitted in the output. Attributes are dropped
            from all of them except the link attribute on the anchor tag.
        block_level_tags: Subset of ``allowed_tags`` that auto-closes an
            open block-level tag when ``auto_close_block_level`` is set.
        inline_tags: Subset of ``allowed_tags`` treated as inline.
        dangerous_tags: Tags whose whole content is discarded.
        void_elements: Tags that never get a closing tag.
        allowed_schemes: URL schemes accepted in the anchor's ``href``.
        anchor_tag: Name of the tag whose link attribute is kept.
        href_attribute: Name of the anchor attribute holding the link target.
        auto_close_block_level: Close the innermost open block-level tag
            before opening another block-level tag.
    """

    allowed_tags: frozenset[str] = DEFAULT_ALLOWED_TAGS
    block_level_tags: frozenset[str] = DEFAULT_BLOCK_LEVEL_TAGS
    inline_tags: frozenset[str] = DEFAULT_INLINE_TAGS
    dangerous_tags: frozenset[str] = DEFAULT_DANGEROUS_TAGS
    void_elements: frozenset[str] = DEFAULT_VOID_ELEMENTS
    allowed_schemes: frozenset[str] = DEFAULT_ALLOWED_SCHEMES
    anchor_tag: str = "a"
    href_attribute: str = "href"
    auto_close_block_level: bool = False
    name: str = field(default="default", compare=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any], base: "Policy | None" = None) -> "Policy":
        """
        Build a policy from a plain mapping.

        Keys missing from ``data`` are taken from ``base`` (the default
        policy if not given). Unknown keys are ignored.

        Args:
            data: Mapping such as the one loaded from a policy YAML file.
            base: Policy supplying values for missing keys.

        Returns:
            A new Policy.
        """
        base = base or DEFAULT_POLICY
        values: dict[str, Any] = {}

        for key in SET_FIELDS:
            if key in data and data[key] is not None:
                values[key] = _normalize(data[key])
            else:
                values[key] = getattr(base, key)

        values["anchor_tag"] = str(data.get("anchor_tag", base.anchor_tag)).strip().lower()
        values["href_attribute"] = (
            str(data.get("href_attribute", base.href_attribute)).strip().lower()
        )
        values["auto_close_block_level"] = bool(
            data.get("auto_close_block_level", base.auto_close_block_level)
        )
        values["name"] = str(data.get("name", base.name))
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to plain types (sorted lists), the inverse of ``from_dict``."""
        data: dict[str, Any] = {"name": self.name}
        for key in SET_FIELDS:
            data[key] = sorted(getattr(self, key))
        data["anchor_tag"] = self.anchor_tag
        data["href_attribute"] = self.href_attribute
        data["auto_close_block_level"] = self.auto_close_block_level
        return data

    def replace(self, **changes: Any) -> "Policy":
        """Return a copy with some fields changed."""
        return Policy.from_dict({**self.to_dict(), **changes}, base=self)

    def problems(self) -> list[str]:
        """
        List internal inconsistencies of the policy.

        Returns:
            Human-readable problem descriptions, empty for a valid policy.
        """
        problems = []

        for key in SET_FIELDS:
            for value in sorted(getattr(self, key)):
                if not value or value != value.strip().lower() or any(c.isspace() for c in value):
                    problems.append(f"{key}: invalid name {value!r}")

        stray_block = self.block_level_tags - self.allowed_tags
        if stray_block:
            problems.append(f"block_level_tags not in allowed_tags: {', '.join(sorted(stray_block))}")

        stray_inline = self.inline_tags - self.allowed_tags
        if stray_inline:
            problems.append(f"inline_tags not in allowed_tags: {', '.join(sorted(stray_inline))}")

        overlap = self.block_level_tags & self.inline_tags
        if overlap:
            problems.append(f"tags both block-level and inline: {', '.join(sorted(overlap))}")

        allowed_dangerous = self.allowed_tags & self.dangerous_tags
        if allowed_dangerous:
            problems.append(f"dangerous tags also allowed: {', '.join(sorted(allowed_dangerous))}")

        if not self.anchor_tag:
            problems.append("anchor_tag must not be empty")

        if not self.href_attribute or any(c.isspace() for c in self.href_attribute):
            problems.append(f"href_attribute: invalid name {self.href_attribute!r}")

        return problems

    def validate(self) -> None:
        """
        Check the policy for internal consistency.

        Raises:
            PolicyError: If ``problems()`` reports anything.
        """
        problems = self.problems()
        if problems:
            raise PolicyError(f"Invalid policy '{self.name}': " + "; ".join(problems))

    def is_allowed(self, tag_name: str) -> bool:
        return tag_name in self.allowed_tags

    def is_dangerous(self, tag_name: str) -> bool:
        return tag_name in self.dangerous_tags

    def is_void(self, tag_name: str) -> bool:
        return tag_name in self.void_elements

    def is_block_level(self, tag_name: str) -> bool:
        return tag_name in self.block_level_tags

    def is_inline(self, tag_name: str) -> bool:
        return tag_name in self.inline_tags

    def allows_scheme(self, scheme: str | None) -> bool:
        return scheme is not None and scheme in self.allowed_schemes


DEFAULT_POLICY = Policy()
