"""Data models for the sanitizer."""

from .result import SanitizationError, SanitizeResult
from .token import Token, TokenType

__all__ = [
    "SanitizationError",
    "SanitizeResult",
    "Token",
    "TokenType",
]
