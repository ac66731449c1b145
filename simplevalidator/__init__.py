"""
SimpleValidator - Declarative Input Sanitization and Validation
===============================================================

Describe constraints as compact strings instead of imperative code:

    from simplevalidator import filter

    errors = filter(
        {"username": "ann", "email": "ann@example"},
        {
            "username": "string|required|between:3,25",
            "email": "email|required|email",
        },
        {"email": {"email": "Please check your email address"}},
    )
    # {"email": "Please check your email address"}

Features:
---------
- Sanitize tags (string, email, int, float, url and list variants)
- Rule chains with typed parameters
- printf-style error messages with per-rule and per-field overrides
- Custom rules through a registry
- Locale-aware phone number checks (phonenumbers)
"""

from __future__ import annotations

__version__ = "1.0.0"
__license__ = "MIT"

from simplevalidator.config import FilterSettings
from simplevalidator.exceptions import (
    ConfigurationError,
    SimpleValidatorError,
    ValidationError,
)
from simplevalidator.input_filter import InputFilter, filter, split_rules
from simplevalidator.security.sanitizer import (
    FILTERS,
    SanitizeFilter,
    Sanitizer,
    sanitize,
)
from simplevalidator.validation import (
    BUILTIN_RULES,
    DEFAULT_MESSAGES,
    ParsedRule,
    RuleDefinition,
    RuleParser,
    RuleRegistry,
    ValidationResult,
    Validator,
    validate,
    validate_or_fail,
)

__all__ = [
    # Metadata
    "__version__",
    "__license__",
    # Facade
    "InputFilter",
    "filter",
    "split_rules",
    "FilterSettings",
    # Sanitizer
    "FILTERS",
    "SanitizeFilter",
    "Sanitizer",
    "sanitize",
    # Validation
    "BUILTIN_RULES",
    "DEFAULT_MESSAGES",
    "ParsedRule",
    "RuleDefinition",
    "RuleParser",
    "RuleRegistry",
    "ValidationResult",
    "Validator",
    "validate",
    "validate_or_fail",
    # Errors
    "SimpleValidatorError",
    "ConfigurationError",
    "ValidationError",
]
