"""
SimpleValidator Exceptions
==========================

Errors raised by the sanitizer, the rule interpreter and the filter facade.

Rule failures are never raised: they are reported in the error mapping.
Only caller bugs (bad configuration) and the explicit ``*_or_fail``
helpers raise.
"""

from __future__ import annotations

from typing import Dict, Optional


class SimpleValidatorError(Exception):
    """Base class for all library errors."""
    pass


class ConfigurationError(SimpleValidatorError, ValueError):
    """
    Invalid sanitize tag, rule token or message template.

    Attributes:
        field: Field whose declaration is broken, if known
        rule: Offending rule name or sanitize tag, if known
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        rule: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.field = field
        self.rule = rule


class ValidationError(SimpleValidatorError):
    """
    Validation failed exception.

    Contains the error mapping (one message per field).
    """

    def __init__(
        self,
        message: str = "Validation failed",
        errors: Optional[Dict[str, str]] = None,
    ) -> None:
        super().__init__(message)
        self.errors = errors or {}

    def __str__(self) -> str:
        if self.errors:
            error_list = [
                f"  - {field_name}: {msg}"
                for field_name, msg in self.errors.items()
            ]
            return "Validation failed:\n" + "\n".join(error_list)
        return "Validation failed"

    def first(self, field_name: Optional[str] = None) -> Optional[str]:
        """Get first error message, or the one for ``field_name``."""
        if field_name:
            return self.errors.get(field_name)
        for msg in self.errors.values():
            return msg
        return None
