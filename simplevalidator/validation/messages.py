"""
SimpleValidator Error Messages
==============================

Default message templates and printf-style formatting.

Templates receive the field name as the first argument and the rule
parameters after it:

    "The %s must have at least %s characters" % ("name", 3)
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from simplevalidator.exceptions import ConfigurationError

DEFAULT_MESSAGES: Mapping[str, str] = MappingProxyType({
    "required": "Please enter the %s",
    "email": "The %s is not a valid email address",
    "min": "The %s must have at least %s characters",
    "max": "The %s must have at most %s characters",
    "between": "The %s must have between %d and %d characters",
    "same": "The %s must match with %s",
    "alphanumeric": "The %s should have only letters and numbers",
    "secure": (
        "The %s must have between 8 and 64 characters and contain at least one "
        "number, one upper case letter, one lower case letter and one special "
        "character example (!@#$%^&*+_)"
    ),
    "unique": "The %s already exists",
    "number": "The %s must be numeric",
    "phone": "The %s must be a valid phone number",
    "url": "The %s must be a valid URL",
    "iso": "The %s must be a valid phone number",
    "minAge": "The %s must be older than the minimum age",
})

FALLBACK_MESSAGE = "The %s is invalid"

# %s, %5d, %-10s, %.2f, %1$s ... anything else is left as written
_PLACEHOLDER = re.compile(
    r"%(?:(?P<position>\d+)\$)?"
    r"(?P<flags>[-+ 0]*)"
    r"(?P<width>\d+)?"
    r"(?:\.(?P<precision>\d+))?"
    r"(?P<conversion>[sdufF%])"
)

FieldMessages = Dict[str, Dict[str, str]]


def split_overrides(
    messages: Optional[Mapping[str, Any]],
) -> Tuple[Dict[str, str], FieldMessages]:
    """
    Separate rule-level and field-level overrides.

    ``{"required": "..."}`` overrides a rule everywhere,
    ``{"name": {"required": "..."}}`` overrides it for one field.
    """
    rule_messages: Dict[str, str] = {}
    field_messages: FieldMessages = {}

    for key, value in (messages or {}).items():
        if isinstance(value, str):
            rule_messages[key] = value
        elif isinstance(value, Mapping):
            field_messages[key] = dict(value)
        else:
            raise ConfigurationError(
                f"Message override for '{key}' must be a string or a mapping",
                field=key,
            )

    return rule_messages, field_messages


def merge_messages(
    rule_messages: Mapping[str, str],
    defaults: Mapping[str, str] = DEFAULT_MESSAGES,
) -> Dict[str, str]:
    """Overlay rule-level overrides on the defaults."""
    return {**defaults, **rule_messages}


def _to_number(value: Any, cast: type) -> Any:
    try:
        if isinstance(value, (bool, int, float)):
            return cast(value)
        return cast(float(str(value).strip()))
    except (ValueError, OverflowError):
        return cast(0)


def format_message(template: str, field: str, params: Sequence[Any] = ()) -> str:
    """
    Format a message template printf style.

    Extra arguments are ignored and unknown conversions are kept
    literally.

    Raises:
        ConfigurationError: If the template needs more arguments than given
    """
    args = (field, *params)
    counter = 0

    def replace(match: "re.Match[str]") -> str:
        nonlocal counter

        conversion = match.group("conversion")
        if conversion == "%":
            return "%"

        if match.group("position"):
            index = int(match.group("position")) - 1
        else:
            index = counter
            counter += 1

        if index < 0 or index >= len(args):
            raise ConfigurationError(
                f"Message template '{template}' expects more arguments "
                f"than the {len(args)} given",
                field=field,
            )

        arg = args[index]
        fmt = "%" + match.group("flags")
        if match.group("width"):
            fmt += match.group("width")
        if match.group("precision") is not None:
            fmt += "." + match.group("precision")

        if conversion in ("d", "u"):
            return (fmt + "d") % _to_number(arg, int)
        if conversion in ("f", "F"):
            return (fmt + "f") % _to_number(arg, float)
        if isinstance(arg, bool):
            arg = "1" if arg else ""
        return (fmt + "s") % (arg,)

    return _PLACEHOLDER.sub(replace, template)
