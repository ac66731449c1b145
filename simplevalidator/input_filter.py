"""
SimpleValidator Input Filter
============================

Facade combining sanitization and validation.

Each field is declared with ``"<sanitize tag>|<rule chain>"``; the part
before the first ``|`` selects the sanitizer, the rest is validated
after sanitizing:

    errors = filter(
        request_data,
        {
            "username": "string|required|alphanumeric|between:3,25",
            "email": "email|required|email",
            "password": "string|required|secure",
            "password2": "string|required|same:password",
            "age": "int",
        },
    )
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple

from simplevalidator.config import FilterSettings
from simplevalidator.exceptions import ConfigurationError
from simplevalidator.security.sanitizer import SanitizeFilter, Sanitizer
from simplevalidator.validation.rules import RuleRegistry
from simplevalidator.validation.validator import ValidationResult, Validator

FIELD_SEPARATOR = "|"


def split_rules(fields: Mapping[str, str]) -> Tuple[Dict[str, str], Dict[str, str]]:
    """
    Split field declarations into sanitize tags and rule chains.

    Fields declared with a tag only get no rule chain.

    Returns:
        (sanitize tags, rule chains)
    """
    sanitize_tags: Dict[str, str] = {}
    rule_chains: Dict[str, str] = {}

    for name, rules in fields.items():
        if not isinstance(rules, str):
            raise ConfigurationError(
                f"Rules for field '{name}' must be a string, "
                f"got {type(rules).__name__}",
                field=name,
            )

        tag, separator, chain = rules.partition(FIELD_SEPARATOR)
        sanitize_tags[name] = tag.strip()
        if separator:
            rule_chains[name] = chain

    return sanitize_tags, rule_chains


class InputFilter:
    """
    Sanitize then validate input data.

    Example:
        input_filter = InputFilter()

        result = input_filter.run(
            {"name": "  <b>Ann</b> ", "age": "42 years"},
            {"name": "string|required|min:3", "age": "int|number"},
        )
        result.data    # {"name": "Ann", "age": "42"}
        result.errors  # {}
    """

    def __init__(
        self,
        settings: Optional[FilterSettings] = None,
        registry: Optional[RuleRegistry] = None,
        filters: Optional[Mapping[str, SanitizeFilter]] = None,
    ) -> None:
        """
        Initialize filter.

        Args:
            settings: Library settings, defaults to ``FilterSettings()``
            registry: Rule table for validation
            filters: Sanitize tag table
        """
        self.settings = settings or FilterSettings()
        self.sanitizer = Sanitizer(
            filters=filters,
            default_filter=self.settings.default_filter,
            trim=self.settings.trim,
        )
        self.validator = Validator(registry, strict=self.settings.strict)

    def filter(
        self,
        data: Mapping[str, Any],
        fields: Mapping[str, str],
        messages: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, str]:
        """
        Sanitize and validate.

        Returns:
            Field name to error message; empty when everything passed
        """
        return self.run(data, fields, messages).errors

    def run(
        self,
        data: Mapping[str, Any],
        fields: Mapping[str, str],
        messages: Optional[Mapping[str, Any]] = None,
    ) -> ValidationResult:
        """Sanitize and validate, keeping the sanitized data."""
        sanitize_tags, rule_chains = split_rules(fields)
        cleaned = self.sanitizer.sanitize(data, sanitize_tags)
        errors = self.validator.validate(cleaned, rule_chains, messages)
        return ValidationResult(valid=not errors, data=cleaned, errors=errors)

    def filter_or_fail(
        self,
        data: Mapping[str, Any],
        fields: Mapping[str, str],
        messages: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Sanitize and validate, raising on failure.

        Returns:
            The sanitized data

        Raises:
            ValidationError: If any rule failed
        """
        result = self.run(data, fields, messages)
        result.raise_if_invalid()
        return result.data


def filter(
    data: Mapping[str, Any],
    fields: Mapping[str, str],
    messages: Optional[Mapping[str, Any]] = None,
) -> Dict[str, str]:
    """
    Sanitize and validate with default settings.

    Example:
        filter({"name": ""}, {"name": "string|required"})
        # {"name": "Please enter the name"}
    """
    return InputFilter().filter(data, fields, messages)
