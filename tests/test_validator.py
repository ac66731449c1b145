"""Tests for the validator."""

import pytest

from simplevalidator.exceptions import ConfigurationError, ValidationError
from simplevalidator.validation.rules import BUILTIN_RULES, RuleRegistry
from simplevalidator.validation.validator import (
    ValidationResult,
    Validator,
    validate,
    validate_or_fail,
)


class TestValidate:
    """Tests for Validator.validate."""

    def test_absent_unrequired_field(self, validator):
        """Test an absent optional field produces no error."""
        assert validator.validate({}, {"nickname": "min:3"}) == {}

    def test_required_empty(self, validator):
        """Test the default required message."""
        assert validator.validate({"name": ""}, {"name": "required"}) == {
            "name": "Please enter the name"
        }

    def test_min(self, validator):
        """Test min boundary and message."""
        assert validator.validate({"name": "ab"}, {"name": "min:3"}) == {
            "name": "The name must have at least 3 characters"
        }
        assert validator.validate({"name": "abc"}, {"name": "min:3"}) == {}

    def test_same(self, validator):
        """Test same passes on equality and names both fields on failure."""
        fields = {"confirm": "same:password"}

        assert validator.validate({"password": "x", "confirm": "x"}, fields) == {}

        errors = validator.validate({"password": "x", "confirm": "y"}, fields)
        assert "confirm" in errors["confirm"]
        assert "password" in errors["confirm"]

    def test_between_message(self, validator):
        """Test integer placeholders."""
        errors = validator.validate({"user": "ab"}, {"user": "between:3,25"})

        assert errors == {"user": "The user must have between 3 and 25 characters"}

    def test_last_failing_rule_wins(self, validator):
        """Test only the last failing rule's message is kept."""
        errors = validator.validate({"code": "a-b"}, {"code": "min:5|alphanumeric"})

        assert errors == {"code": "The code should have only letters and numbers"}

    def test_later_passing_rule_keeps_earlier_message(self, validator):
        """Test a passing rule does not clear an earlier failure."""
        errors = validator.validate({"code": "a-b"}, {"code": "alphanumeric|min:2"})

        assert errors == {"code": "The code should have only letters and numbers"}

    def test_passing_fields_never_appear(self, validator):
        errors = validator.validate(
            {"a": "ok", "b": ""},
            {"a": "required", "b": "required"},
        )

        assert list(errors) == ["b"]

    def test_field_message_override(self, validator):
        """Test a field-level override replaces that field and rule only."""
        errors = validator.validate(
            {"name": "", "city": ""},
            {"name": "required", "city": "required"},
            {"name": {"required": "Name needed"}},
        )

        assert errors == {"name": "Name needed", "city": "Please enter the city"}

    def test_field_override_only_for_named_rule(self, validator):
        errors = validator.validate(
            {"name": "ab"},
            {"name": "min:3"},
            {"name": {"required": "Name needed"}},
        )

        assert errors == {"name": "The name must have at least 3 characters"}

    def test_rule_message_override(self, validator):
        """Test a rule-level override applies to every field."""
        errors = validator.validate(
            {"a": "", "b": ""},
            {"a": "required", "b": "required"},
            {"required": "%s is mandatory"},
        )

        assert errors == {"a": "a is mandatory", "b": "b is mandatory"}

    def test_field_override_beats_rule_override(self, validator):
        errors = validator.validate(
            {"a": "", "b": ""},
            {"a": "required", "b": "required"},
            {"required": "%s is mandatory", "a": {"required": "A!"}},
        )

        assert errors == {"a": "A!", "b": "b is mandatory"}

    def test_override_with_parameters(self, validator):
        errors = validator.validate(
            {"name": "ab"},
            {"name": "min:3"},
            {"name": {"min": "Use %2$s+ characters for %1$s"}},
        )

        assert errors == {"name": "Use 3+ characters for name"}

    def test_unknown_rule_is_skipped(self, validator):
        """Test unknown rules are a silent pass."""
        errors = validator.validate(
            {"email": "ann@example.com"},
            {"email": "required|unique:users|nonsense"},
        )

        assert errors == {}

    def test_unknown_rule_strict(self):
        """Test strict mode reports unknown rules."""
        with pytest.raises(ConfigurationError):
            Validator(strict=True).validate({"email": "x"}, {"email": "unique"})

    def test_malformed_rule_raises_before_checking(self, validator):
        with pytest.raises(ConfigurationError):
            validator.validate({"a": ""}, {"a": "required", "b": "min:x"})

    def test_custom_rule(self):
        """Test rules registered on a registry are dispatched."""
        registry = RuleRegistry()

        @registry.rule("even", message="The %s must be even")
        def is_even(data, field):
            return data.get(field) is None or int(data[field]) % 2 == 0

        validator = Validator(registry)

        assert validator.validate({"n": "3"}, {"n": "even"}) == {"n": "The n must be even"}
        assert validator.validate({"n": "4"}, {"n": "even"}) == {}

    def test_custom_rule_with_params(self):
        registry = RuleRegistry()
        registry.register(
            "starts",
            lambda data, field, prefix: str(data.get(field, "")).startswith(prefix),
            message="The %s must start with %s",
            params=(str,),
        )

        errors = Validator(registry).validate({"sku": "B-1"}, {"sku": "starts:A-"})

        assert errors == {"sku": "The sku must start with A-"}

    @pytest.mark.parametrize("name", sorted(BUILTIN_RULES))
    @pytest.mark.parametrize("value", [None, "", "x", "12", ["a"], 3, {"k": "v"}])
    def test_builtin_rules_never_raise(self, validator, name, value):
        """Test every registered rule returns a mapping for any value."""
        definition = BUILTIN_RULES[name]
        params = ",".join("1" if convert is int else "CH" for convert in definition.params)
        chain = f"{name}:{params}" if params else name

        errors = validator.validate({"f": value, "other": "x"}, {"f": chain})

        assert isinstance(errors, dict)


class TestRun:
    """Tests for Validator.run and ValidationResult."""

    def test_valid_result(self, validator):
        result = validator.run({"a": "x"}, {"a": "required"})

        assert result
        assert result.valid
        assert result.data == {"a": "x"}
        assert result.first_error() is None

    def test_invalid_result(self, validator):
        result = validator.run({"a": ""}, {"a": "required"})

        assert not result
        assert result.failed()
        assert result.has_error("a")
        assert result.get_error("a") == "Please enter the a"
        assert result.first_error() == "Please enter the a"

        with pytest.raises(ValidationError) as exc_info:
            result.raise_if_invalid()
        assert exc_info.value.errors == {"a": "Please enter the a"}


class TestConvenienceFunctions:
    """Tests for validate and validate_or_fail."""

    def test_validate(self):
        assert validate({"name": ""}, {"name": "required"}) == {
            "name": "Please enter the name"
        }

    def test_validate_with_registry(self):
        registry = RuleRegistry()
        registry.register("never", lambda data, field: False, message="No %s")

        assert validate({}, {"x": "never"}, registry=registry) == {"x": "No x"}

    def test_validate_or_fail_returns_data(self):
        assert validate_or_fail({"a": "x"}, {"a": "required"}) == {"a": "x"}

    def test_validate_or_fail_raises(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_or_fail({"a": ""}, {"a": "required"})

        assert exc_info.value.first() == "Please enter the a"
        assert exc_info.value.first("a") == "Please enter the a"
        assert "a: Please enter the a" in str(exc_info.value)

    def test_validation_result_defaults(self):
        result = ValidationResult(valid=True)

        assert result.data == {}
        assert result.errors == {}
