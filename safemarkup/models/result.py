"""Success/error result returned by ``sanitize``."""

from dataclasses import dataclass


class SanitizationError(Exception):
    """Raised when unwrapping a failed sanitization result."""

    pass


@dataclass(frozen=True)
class SanitizeResult:
    """
    Structured result of a sanitize call.

    Exactly one of ``output`` and ``error`` is set. A failed result never
    carries partial output.
    """

    output: str | None = None
    error: str | None = None

    def __post_init__(self):
        if (self.output is None) == (self.error is None):
            raise ValueError("SanitizeResult needs exactly one of output or error")

    @classmethod
    def ok(cls, output: str) -> "SanitizeResult":
        return cls(output=output)

    @classmethod
    def fail(cls, error: str) -> "SanitizeResult":
        return cls(error=error)

    @property
    def success(self) -> bool:
        """Check if sanitization produced output."""
        return self.error is None

    def unwrap(self) -> str:
        """
        Return the sanitized output.

        Raises:
            SanitizationError: If the result is an error.
        """
        if self.error is not None:
            raise SanitizationError(self.error)
        return self.output  # type: ignore[return-value]
