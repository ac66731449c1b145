"""
SimpleValidator Validation System
=================================

Rule chain parsing, built-in rules and the validator.

Features:
- Compact rule chains (``"required|min:3|same:password"``)
- Typed rule parameters
- printf-style error messages with per-rule and per-field overrides
- Custom rule registration
"""

from simplevalidator.validation.messages import DEFAULT_MESSAGES, format_message
from simplevalidator.validation.parser import ParsedRule, RuleParser
from simplevalidator.validation.rules import (
    BUILTIN_RULES,
    RuleDefinition,
    RuleRegistry,
)
from simplevalidator.validation.validator import (
    ValidationResult,
    Validator,
    validate,
    validate_or_fail,
)

__all__ = [
    # Core
    "Validator",
    "ValidationResult",
    "validate",
    "validate_or_fail",
    # Parsing
    "RuleParser",
    "ParsedRule",
    # Rules
    "BUILTIN_RULES",
    "RuleDefinition",
    "RuleRegistry",
    # Messages
    "DEFAULT_MESSAGES",
    "format_message",
]
