"""Tests for the built-in rule checkers and the registry."""

from datetime import date, datetime

import pytest

from simplevalidator.exceptions import ConfigurationError
from simplevalidator.validation import rules
from simplevalidator.validation.rules import (
    BUILTIN_RULES,
    RuleDefinition,
    RuleRegistry,
    age_on,
    is_alphanumeric,
    is_between,
    is_email,
    is_iso,
    is_max,
    is_min,
    is_minAge,
    is_number,
    is_phone,
    is_required,
    is_same,
    is_secure,
    is_url,
    parse_date,
)


class TestRequired:
    """Tests for is_required."""

    @pytest.mark.parametrize("value", ["x", "0", 0, 1.5, True, [" a ", "b"], {"k": "v"}])
    def test_present(self, value):
        assert is_required({"f": value}, "f")

    @pytest.mark.parametrize("value", [None, "", False, ["a", " "], ["a", None], {}])
    def test_missing_or_empty(self, value):
        assert not is_required({"f": value}, "f")

    def test_absent(self):
        """Test absence is the one failure other rules ignore."""
        assert not is_required({}, "f")

    def test_empty_list_has_no_blank_items(self):
        """Test an empty list passes since none of its items is blank."""
        assert is_required({"f": []}, "f")
        assert is_required({"f": ()}, "f")


class TestAbsentFieldsPass:
    """Every rule except required and secure passes on absence."""

    @pytest.mark.parametrize("name", sorted(set(BUILTIN_RULES) - {"required", "secure", "same"}))
    def test_absent_passes(self, name):
        definition = BUILTIN_RULES[name]
        params = tuple(convert("1") for convert in definition.params)

        assert definition({}, "f", *params)
        assert definition({"f": None}, "f", *params)

    def test_secure_fails_on_absence(self):
        assert not is_secure({}, "f")


class TestEmail:
    """Tests for is_email."""

    @pytest.mark.parametrize("value", [
        "ann@example.com", "a.b+c@sub.example.org", "o'brien@example.com",
        "a!b@example.com", "x#{y}~z@example.com", "",
    ])
    def test_valid(self, value):
        assert is_email({"e": value}, "e")

    @pytest.mark.parametrize("value", [
        "ann", "ann@example", "@example.com", "ann@@example.com",
        "ann..b@example.com", ".ann@example.com", "ann.@example.com",
        "ann@.example.com", ["ann@example.com"],
    ])
    def test_invalid(self, value):
        assert not is_email({"e": value}, "e")


class TestLengths:
    """Tests for min, max and between."""

    def test_min_boundary(self):
        assert not is_min({"n": "ab"}, "n", 3)
        assert is_min({"n": "abc"}, "n", 3)

    def test_max_boundary(self):
        assert is_max({"n": "abc"}, "n", 3)
        assert not is_max({"n": "abcd"}, "n", 3)

    def test_between_inclusive(self):
        assert is_between({"n": "abc"}, "n", 3, 5)
        assert is_between({"n": "abcde"}, "n", 3, 5)
        assert not is_between({"n": "ab"}, "n", 3, 5)
        assert not is_between({"n": "abcdef"}, "n", 3, 5)

    def test_unicode_length(self):
        """Test length counts characters, not bytes."""
        assert is_max({"n": "ééé"}, "n", 3)
        assert is_min({"n": "日本語"}, "n", 3)

    def test_numbers_use_their_text(self):
        assert is_min({"n": 12345}, "n", 5)

    def test_lists_use_item_count(self):
        assert is_max({"n": ["a", "b"]}, "n", 2)
        assert not is_min({"n": ["a"]}, "n", 2)

    def test_empty_string_is_present(self):
        assert not is_min({"n": ""}, "n", 1)


class TestSame:
    """Tests for is_same."""

    def test_both_absent(self):
        assert is_same({}, "confirm", "password")

    def test_one_absent(self):
        assert not is_same({"password": "x"}, "confirm", "password")
        assert not is_same({"confirm": "x"}, "confirm", "password")

    def test_equal(self):
        assert is_same({"password": "x", "confirm": "x"}, "confirm", "password")

    def test_different(self):
        assert not is_same({"password": "x", "confirm": "y"}, "confirm", "password")

    def test_strict_comparison(self):
        """Test values of different types never match."""
        assert not is_same({"a": "1", "b": 1}, "a", "b")


class TestAlphanumeric:
    """Tests for is_alphanumeric."""

    @pytest.mark.parametrize("value", ["abc123", "ABC", "123", 42, "Ünïcode"])
    def test_valid(self, value):
        assert is_alphanumeric({"f": value}, "f")

    @pytest.mark.parametrize("value", ["", "ab c", "ab-c", "a_b", True, ["ab"]])
    def test_invalid(self, value):
        assert not is_alphanumeric({"f": value}, "f")


class TestSecure:
    """Tests for is_secure."""

    @pytest.mark.parametrize("value", ["Passw0rd!", "Aa1$" * 2, "Aa1!" + "x" * 60])
    def test_valid(self, value):
        assert is_secure({"p": value}, "p")

    @pytest.mark.parametrize("value", [
        "Pa0!",                 # too short
        "Aa1!" + "x" * 61,      # too long
        "password1!",           # no upper case
        "PASSWORD1!",           # no lower case
        "Password!!",           # no digit
        "Password12",           # no special character
        "",
    ])
    def test_invalid(self, value):
        assert not is_secure({"p": value}, "p")


class TestNumber:
    """Tests for is_number."""

    @pytest.mark.parametrize("value", [42, -1.5, "42", "-3.5", "+7", ".5", "1e5", " 12 ", "5."])
    def test_numeric(self, value):
        assert is_number({"n": value}, "n")

    @pytest.mark.parametrize("value", ["", "abc", "12abc", "1,5", "0x1A", True, ["1"]])
    def test_not_numeric(self, value):
        assert not is_number({"n": value}, "n")


class TestPhoneAndUrl:
    """Tests for is_phone and is_url."""

    def test_phone_with_digits(self):
        assert is_phone({"p": "+1 (555) 123-4567"}, "p")

    def test_phone_without_digits(self):
        assert not is_phone({"p": "call me"}, "p")

    def test_url_with_allowed_chars(self):
        assert is_url({"u": "https://example.com"}, "u")

    def test_url_nothing_left(self):
        assert not is_url({"u": "   "}, "u")
        assert not is_url({"u": "äöü"}, "u")


class TestIso:
    """Tests for is_iso (phonenumbers)."""

    def test_valid_swiss_number(self):
        assert is_iso({"p": "044 668 18 00"}, "p", "CH")

    def test_valid_international_format(self):
        assert is_iso({"p": "+41 44 668 18 00"}, "p", "CH")

    def test_region_is_case_insensitive(self):
        assert is_iso({"p": "+1 650-253-0000"}, "p", "us")

    def test_invalid_number(self):
        assert not is_iso({"p": "+1 123"}, "p", "US")

    def test_parse_failure_is_not_an_error(self):
        assert not is_iso({"p": "not a number"}, "p", "CH")


class TestMinAge:
    """Tests for is_minAge and the date helpers."""

    def test_old_enough(self, fixed_today):
        assert is_minAge({"dob": "2006-06-15"}, "dob", 18)

    def test_day_before_birthday(self, fixed_today):
        assert not is_minAge({"dob": "2006-06-16"}, "dob", 18)

    def test_date_objects(self, fixed_today):
        assert is_minAge({"dob": date(2000, 1, 1)}, "dob", 18)
        assert is_minAge({"dob": datetime(2000, 1, 1, 12, 0)}, "dob", 18)

    def test_unparseable_date(self, fixed_today):
        assert not is_minAge({"dob": "15/06/2006"}, "dob", 18)
        assert not is_minAge({"dob": 2006}, "dob", 18)

    def test_uses_current_date(self, monkeypatch):
        monkeypatch.setattr(rules, "today", lambda: date(2030, 1, 1))

        assert is_minAge({"dob": "2012-01-01"}, "dob", 18)

    def test_age_on(self):
        assert age_on(date(2000, 2, 29), date(2018, 2, 28)) == 17
        assert age_on(date(2000, 2, 29), date(2018, 3, 1)) == 18

    def test_parse_date(self):
        assert parse_date(" 2001-02-03 ") == date(2001, 2, 3)
        assert parse_date("2001-02-30") is None


class TestRuleDefinition:
    """Tests for RuleDefinition."""

    def test_coerce(self):
        definition = BUILTIN_RULES["between"]

        assert definition.coerce(["3", "9"]) == (3, 9)

    def test_coerce_bad_value(self):
        with pytest.raises(ConfigurationError):
            BUILTIN_RULES["min"].coerce(["x"])

    def test_call_returns_bool(self):
        definition = RuleDefinition("truthy", lambda data, field: data.get(field))

        assert definition({"f": "yes"}, "f") is True


class TestRuleRegistry:
    """Tests for RuleRegistry."""

    def test_builtin_names(self):
        assert set(RuleRegistry()) == {
            "required", "email", "min", "max", "between", "same",
            "alphanumeric", "secure", "number", "phone", "url", "iso", "minAge",
        }

    def test_unique_is_not_implemented(self):
        assert "unique" not in RuleRegistry()
        assert "unique" in RuleRegistry().messages()

    def test_register(self):
        registry = RuleRegistry()
        definition = registry.register(
            "prefix",
            lambda data, field, p: str(data.get(field, p)).startswith(p),
            message="The %s must start with %s",
            params=(str,),
        )

        assert registry.get("prefix") is definition
        assert "prefix" not in BUILTIN_RULES

    def test_decorator(self):
        registry = RuleRegistry()

        @registry.rule("even", message="The %s must be even")
        def is_even(data, field):
            return int(data[field]) % 2 == 0

        assert registry.get("even").checker is is_even
        assert registry.messages()["even"] == "The %s must be even"

    def test_registered_rule_without_message(self):
        registry = RuleRegistry()
        registry.register("odd", lambda data, field: True)

        assert registry.get("odd").message == "The %s is invalid"

    @pytest.mark.parametrize("name", ["", "a|b", "a:b", "a,b"])
    def test_invalid_names(self, name):
        with pytest.raises(ConfigurationError):
            RuleRegistry().register(name, lambda data, field: True)

    def test_empty_registry(self):
        assert len(RuleRegistry({})) == 0
