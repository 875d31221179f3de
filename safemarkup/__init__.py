"""safemarkup - Policy-driven sanitizer for untrusted HTML."""

from .config import ConfigurationError, load_policy_config
from .models import SanitizationError, SanitizeResult, Token, TokenType
from .policy import DEFAULT_POLICY, Policy, PolicyError
from .sanitizer import HTMLSanitizer, sanitize, sanitize_or_raise
from .tokenizer import Tokenizer, tokenize

__version__ = "1.0.0"

__all__ = [
    "ConfigurationError",
    "DEFAULT_POLICY",
    "HTMLSanitizer",
    "Policy",
    "PolicyError",
    "SanitizationError",
    "SanitizeResult",
    "Token",
    "TokenType",
    "Tokenizer",
    "load_policy_config",
    "sanitize",
    "sanitize_or_raise",
    "tokenize",
]
