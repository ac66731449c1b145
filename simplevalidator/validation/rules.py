"""
SimpleValidator Validation Rules
================================

Built-in rule checkers and the rule registry.

A checker receives the whole (sanitized) data, the field name and the
rule parameters already converted to their declared types:

    is_min(data, "name", 3) -> bool

Every checker except ``required`` and ``secure`` passes when the field
is absent (missing or ``None``), so rules compose with ``required``:
``"min:3"`` alone means "if present, at least 3 characters".
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from types import MappingProxyType
from typing import (
    Any,
    Callable,
    Dict,
    Iterator,
    Mapping,
    Optional,
    Sequence,
    Tuple,
)

import phonenumbers
from phonenumbers import NumberParseException

from simplevalidator.exceptions import ConfigurationError
from simplevalidator.security.sanitizer import keep_int_chars, keep_url_chars, to_text
from simplevalidator.validation.messages import DEFAULT_MESSAGES, FALLBACK_MESSAGE

Checker = Callable[..., bool]
ParamType = Callable[[str], Any]

# Local part accepts the RFC 5322 atext characters plus dots
EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
)

NUMERIC_PATTERN = re.compile(
    r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?\s*$"
)

# 8 to 64 chars, one lower, one upper, one digit, one non-word char
SECURE_PATTERN = re.compile(
    r"(?=.{8,64}\Z)(?=.*[a-z])(?=.*[A-Z])(?=.*[0-9])(?=.*\W)",
    re.DOTALL,
)

DATE_FORMAT = "%Y-%m-%d"


def today() -> date:
    """Current date used by age checks."""
    return date.today()


def _is_absent(data: Mapping[str, Any], field: str) -> bool:
    return data.get(field) is None


def _is_list(value: Any) -> bool:
    return isinstance(value, (list, tuple, dict))


def _length(value: Any) -> int:
    if _is_list(value):
        return len(value)
    return len(to_text(value))


def is_required(data: Mapping[str, Any], field: str) -> bool:
    """Field is present and not empty; list items must all be non-blank."""
    value = data.get(field)

    if value is None:
        return False

    if isinstance(value, (list, tuple)):
        return all(
            item is not None and to_text(item).strip() != "" for item in value
        )

    if isinstance(value, dict):
        return len(value) > 0

    return to_text(value) != ""


def is_email(data: Mapping[str, Any], field: str) -> bool:
    value = data.get(field)

    if value is None or value == "":
        return True
    if _is_list(value):
        return False

    email = to_text(value)
    if not EMAIL_PATTERN.match(email):
        return False

    local, _, domain = email.rpartition("@")
    if ".." in email:
        return False
    return not (
        local.startswith(".") or local.endswith(".")
        or domain.startswith(".") or domain.startswith("-")
    )


def is_min(data: Mapping[str, Any], field: str, min_length: int) -> bool:
    if _is_absent(data, field):
        return True
    return _length(data[field]) >= min_length


def is_max(data: Mapping[str, Any], field: str, max_length: int) -> bool:
    if _is_absent(data, field):
        return True
    return _length(data[field]) <= max_length


def is_between(
    data: Mapping[str, Any],
    field: str,
    min_length: int,
    max_length: int,
) -> bool:
    if _is_absent(data, field):
        return True
    return min_length <= _length(data[field]) <= max_length


def is_same(data: Mapping[str, Any], field: str, other: str) -> bool:
    """Both absent passes, exactly one absent fails, else strict equality."""
    field_absent = _is_absent(data, field)
    other_absent = _is_absent(data, other)

    if field_absent and other_absent:
        return True
    if field_absent or other_absent:
        return False

    first, second = data[field], data[other]
    return type(first) is type(second) and first == second


def is_alphanumeric(data: Mapping[str, Any], field: str) -> bool:
    if _is_absent(data, field):
        return True
    value = data[field]
    if _is_list(value) or isinstance(value, bool):
        return False
    return to_text(value).isalnum()


def is_secure(data: Mapping[str, Any], field: str) -> bool:
    """Password policy; the only rule besides required failing on absence."""
    value = data.get(field)
    if value is None or _is_list(value):
        return False
    return SECURE_PATTERN.match(to_text(value)) is not None


def is_number(data: Mapping[str, Any], field: str) -> bool:
    if _is_absent(data, field):
        return True

    value = data[field]
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    if isinstance(value, str):
        return NUMERIC_PATTERN.match(value) is not None
    return False


def is_phone(data: Mapping[str, Any], field: str) -> bool:
    """Something phone-like survives integer filtering."""
    if _is_absent(data, field):
        return True
    value = data[field]
    if _is_list(value):
        return False
    return keep_int_chars(to_text(value)) != ""


def is_url(data: Mapping[str, Any], field: str) -> bool:
    if _is_absent(data, field):
        return True
    value = data[field]
    if _is_list(value):
        return False
    return keep_url_chars(to_text(value)) != ""


def is_iso(data: Mapping[str, Any], field: str, iso: str) -> bool:
    """
    Valid phone number for the ISO 3166 region code ``iso``.

    Parse failures are validation failures, never errors.
    """
    if _is_absent(data, field):
        return True

    value = data[field]
    if _is_list(value):
        return False

    try:
        number = phonenumbers.parse(to_text(value), iso.upper())
    except NumberParseException:
        return False

    return phonenumbers.is_valid_number(number)


def parse_date(value: Any) -> Optional[date]:
    """Parse a ``YYYY-MM-DD`` string or date-like value, None if invalid."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.strptime(value.strip(), DATE_FORMAT).date()
        except ValueError:
            return None
    return None


def age_on(born: date, on: date) -> int:
    """Whole years elapsed between ``born`` and ``on``."""
    years = on.year - born.year
    if (on.month, on.day) < (born.month, born.day):
        years -= 1
    return years


def is_minAge(data: Mapping[str, Any], field: str, min_age: int) -> bool:
    if _is_absent(data, field):
        return True

    born = parse_date(data[field])
    if born is None:
        return False

    return age_on(born, today()) >= min_age


@dataclass(frozen=True)
class RuleDefinition:
    """
    A named rule.

    Attributes:
        name: Rule name as written in rule chains
        checker: Predicate ``(data, field, *params) -> bool``
        message: Default message template
        params: Converters for each positional parameter (``int``, ``str``...)
    """

    name: str
    checker: Checker
    message: str = FALLBACK_MESSAGE
    params: Tuple[ParamType, ...] = ()

    def coerce(
        self,
        raw: Sequence[str],
        field: Optional[str] = None,
    ) -> Tuple[Any, ...]:
        """
        Convert raw string parameters to the declared types.

        Raises:
            ConfigurationError: On wrong parameter count or bad value
        """
        if len(raw) != len(self.params):
            raise ConfigurationError(
                f"Rule '{self.name}' expects {len(self.params)} parameter(s), "
                f"got {len(raw)}",
                field=field,
                rule=self.name,
            )

        converted = []
        for convert, value in zip(self.params, raw):
            try:
                converted.append(convert(value))
            except (TypeError, ValueError):
                raise ConfigurationError(
                    f"Invalid parameter '{value}' for rule '{self.name}'",
                    field=field,
                    rule=self.name,
                ) from None

        return tuple(converted)

    def __call__(self, data: Mapping[str, Any], field: str, *params: Any) -> bool:
        return bool(self.checker(data, field, *params))


def _builtin(name: str, checker: Checker, *params: ParamType) -> RuleDefinition:
    return RuleDefinition(
        name=name,
        checker=checker,
        message=DEFAULT_MESSAGES.get(name, FALLBACK_MESSAGE),
        params=params,
    )


# ``unique`` has a message but no checker: chains using it skip the rule
BUILTIN_RULES: Mapping[str, RuleDefinition] = MappingProxyType({
    rule.name: rule
    for rule in (
        _builtin("required", is_required),
        _builtin("email", is_email),
        _builtin("min", is_min, int),
        _builtin("max", is_max, int),
        _builtin("between", is_between, int, int),
        _builtin("same", is_same, str),
        _builtin("alphanumeric", is_alphanumeric),
        _builtin("secure", is_secure),
        _builtin("number", is_number),
        _builtin("phone", is_phone),
        _builtin("url", is_url),
        _builtin("iso", is_iso, str),
        _builtin("minAge", is_minAge, int),
    )
})


class RuleRegistry:
    """
    Rule name to checker table.

    Starts as a copy of the built-in rules; registering on an instance
    never changes ``BUILTIN_RULES``.

    Example:
        registry = RuleRegistry()

        @registry.rule("even", message="The %s must be even")
        def is_even(data, field):
            value = data.get(field)
            return value is None or int(value) % 2 == 0

        registry.register(
            "prefix",
            lambda data, field, p: field not in data or str(data[field]).startswith(p),
            message="The %s must start with %s", params=(str,),
        )
    """

    def __init__(self, rules: Optional[Mapping[str, RuleDefinition]] = None) -> None:
        self._rules: Dict[str, RuleDefinition] = dict(
            BUILTIN_RULES if rules is None else rules
        )

    def register(
        self,
        name: str,
        checker: Checker,
        message: Optional[str] = None,
        params: Sequence[ParamType] = (),
    ) -> RuleDefinition:
        """
        Register (or replace) a rule on this registry.

        Args:
            name: Rule name used in chains
            checker: Predicate ``(data, field, *params) -> bool``
            message: Default template, falls back to the built-in one for the name
            params: Converters for each parameter

        Returns:
            The new rule definition
        """
        if not name or any(sep in name for sep in "|:,"):
            raise ConfigurationError(f"Invalid rule name '{name}'", rule=name)

        definition = RuleDefinition(
            name=name,
            checker=checker,
            message=message or DEFAULT_MESSAGES.get(name, FALLBACK_MESSAGE),
            params=tuple(params),
        )
        self._rules[name] = definition
        return definition

    def rule(
        self,
        name: str,
        message: Optional[str] = None,
        params: Sequence[ParamType] = (),
    ) -> Callable[[Checker], Checker]:
        """Decorator form of ``register``."""

        def decorator(checker: Checker) -> Checker:
            self.register(name, checker, message, params)
            return checker

        return decorator

    def get(self, name: str) -> Optional[RuleDefinition]:
        return self._rules.get(name)

    def messages(self) -> Dict[str, str]:
        """Default templates: built-in table plus every registered rule."""
        merged = dict(DEFAULT_MESSAGES)
        merged.update({name: rule.message for name, rule in self._rules.items()})
        return merged

    def __contains__(self, name: object) -> bool:
        return name in self._rules

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)
