"""
SimpleValidator Validator
=========================

Core validation engine.

Runs every rule of every field's chain against the data and keeps, per
field, the message of the last rule that failed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from simplevalidator.exceptions import ValidationError
from simplevalidator.utils.logger import get_logger
from simplevalidator.validation.messages import (
    FieldMessages,
    format_message,
    merge_messages,
    split_overrides,
)
from simplevalidator.validation.parser import ParsedRule, RuleChain, RuleParser
from simplevalidator.validation.rules import RuleRegistry

logger = get_logger("simplevalidator.validation")


@dataclass
class ValidationResult:
    """
    Result of validation.

    Contains the validated data and one error message per failing field.
    """

    valid: bool
    data: Dict[str, Any] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)

    def __bool__(self) -> bool:
        """Allow using result as boolean."""
        return self.valid

    def failed(self) -> bool:
        return not self.valid

    def has_error(self, field_name: str) -> bool:
        return field_name in self.errors

    def get_error(self, field_name: str) -> Optional[str]:
        return self.errors.get(field_name)

    def first_error(self) -> Optional[str]:
        """Get first error message in field order."""
        for message in self.errors.values():
            return message
        return None

    def raise_if_invalid(self) -> None:
        """Raise ValidationError if invalid."""
        if not self.valid:
            raise ValidationError(errors=self.errors)


class Validator:
    """
    Main validation class.

    Example:
        validator = Validator()

        errors = validator.validate(
            {"name": "Jo", "email": "jo@example"},
            {"name": "required|min:3", "email": "email"},
            {"name": {"min": "Name is too short"}},
        )
        # {"name": "Name is too short",
        #  "email": "The email is not a valid email address"}
    """

    def __init__(
        self,
        registry: Optional[RuleRegistry] = None,
        strict: bool = False,
    ) -> None:
        """
        Initialize validator.

        Args:
            registry: Rule table, defaults to the built-in rules
            strict: Raise ConfigurationError on unknown rule names
                instead of skipping them
        """
        self.registry = registry if registry is not None else RuleRegistry()
        self.strict = strict
        self.parser = RuleParser(self.registry, strict=strict)

    def validate(
        self,
        data: Mapping[str, Any],
        fields: Mapping[str, RuleChain],
        messages: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, str]:
        """
        Validate data against rule chains.

        Args:
            data: Sanitized input record
            fields: Field name to rule chain
            messages: Rule-level (``{"required": "..."}``) and field-level
                (``{"name": {"required": "..."}}``) message overrides

        Returns:
            Field name to error message, only for failing fields

        Raises:
            ConfigurationError: On malformed chains or templates
        """
        rule_messages, field_messages = split_overrides(messages)
        templates = merge_messages(rule_messages, self.registry.messages())

        # Parse everything before running any checker
        parsed = self.parser.parse_fields(fields)

        errors: Dict[str, str] = {}

        for field_name, rules in parsed.items():
            for rule in rules:
                if not rule.known:
                    continue

                if rule.definition(data, field_name, *rule.params):
                    continue

                errors[field_name] = self._get_message(
                    field_name, rule, templates, field_messages
                )
                logger.debug("Rule failed", field=field_name, rule=rule.name)

        return errors

    def run(
        self,
        data: Mapping[str, Any],
        fields: Mapping[str, RuleChain],
        messages: Optional[Mapping[str, Any]] = None,
    ) -> ValidationResult:
        """Validate and wrap the outcome in a ValidationResult."""
        errors = self.validate(data, fields, messages)
        return ValidationResult(valid=not errors, data=dict(data), errors=errors)

    def _get_message(
        self,
        field_name: str,
        rule: ParsedRule,
        templates: Mapping[str, str],
        field_messages: FieldMessages,
    ) -> str:
        """Field-specific override, then merged defaults, then the rule's own."""
        overrides = field_messages.get(field_name, {})
        if rule.name in overrides:
            template = overrides[rule.name]
        else:
            template = templates.get(rule.name, rule.definition.message)

        return format_message(template, field_name, rule.params)


# Convenience functions

def validate(
    data: Mapping[str, Any],
    fields: Mapping[str, RuleChain],
    messages: Optional[Mapping[str, Any]] = None,
    registry: Optional[RuleRegistry] = None,
    strict: bool = False,
) -> Dict[str, str]:
    """
    Validate data with rule chains.

    Example:
        errors = validate({"name": ""}, {"name": "required"})
        # {"name": "Please enter the name"}
    """
    return Validator(registry, strict).validate(data, fields, messages)


def validate_or_fail(
    data: Mapping[str, Any],
    fields: Mapping[str, RuleChain],
    messages: Optional[Mapping[str, Any]] = None,
    registry: Optional[RuleRegistry] = None,
    strict: bool = False,
) -> Dict[str, Any]:
    """
    Validate data and raise on failure.

    Returns the data if every rule passed.

    Example:
        try:
            data = validate_or_fail(form, {"email": "required|email"})
        except ValidationError as e:
            return {"errors": e.errors}
    """
    result = Validator(registry, strict).run(data, fields, messages)
    result.raise_if_invalid()
    return result.data

