"""
SimpleValidator Sanitization
============================

Sanitize tags and the input sanitizer.
"""

from simplevalidator.security.sanitizer import (
    FILTERS,
    SanitizeFilter,
    Sanitizer,
    sanitize,
)

__all__ = [
    "FILTERS",
    "SanitizeFilter",
    "Sanitizer",
    "sanitize",
]
