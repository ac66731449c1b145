"""
SimpleValidator Input Sanitizer
===============================

Cleans raw input before validation. Each field is mapped to a
sanitize tag which selects a character filter:

- ``string`` / ``string[]``: markup, null bytes and control characters removed,
  remaining ``&``, ``<`` and ``>`` HTML-escaped
- ``email``: characters allowed in an email address
- ``int`` / ``int[]``: digits and sign
- ``float`` / ``float[]``: digits, sign and decimal point
- ``url``: characters allowed in a URL

Tags ending in ``[]`` expect a list of scalars; the others expect a scalar.
A value of the wrong shape is rejected (replaced by ``None``) so that a
``required`` rule reports it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional

import bleach

from simplevalidator.exceptions import ConfigurationError
from simplevalidator.utils.logger import get_logger

logger = get_logger("simplevalidator.sanitizer")

SCALAR = "scalar"
ARRAY = "array"

# Control characters to strip (tab, newline and carriage return are kept)
CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")

EMAIL_DISALLOWED = re.compile(r"[^A-Za-z0-9!#$%&'*+\-=?^_`{|}~@.\[\]]")

URL_DISALLOWED = re.compile(r"[^A-Za-z0-9$\-_.+!*'(),{}|\\^~\[\]`<>#%\";/?:@&=]")

INT_DISALLOWED = re.compile(r"[^0-9+\-]")

FLOAT_DISALLOWED = re.compile(r"[^0-9+\-.]")


def strip_markup(value: str) -> str:
    """Remove HTML tags and comments, keeping the text between them.

    The remaining text is left HTML-escaped (``&``, ``<`` and ``>`` become
    entities) so encoded markup in the input can never turn back into tags.
    """
    return bleach.clean(
        CONTROL_CHARS.sub("", value),
        tags=set(),
        attributes={},
        strip=True,
        strip_comments=True,
    )


def keep_email_chars(value: str) -> str:
    return EMAIL_DISALLOWED.sub("", value)


def keep_url_chars(value: str) -> str:
    return URL_DISALLOWED.sub("", value)


def keep_int_chars(value: str) -> str:
    return INT_DISALLOWED.sub("", value)


def keep_float_chars(value: str) -> str:
    return FLOAT_DISALLOWED.sub("", value)


@dataclass(frozen=True)
class SanitizeFilter:
    """
    A sanitize tag definition.

    Attributes:
        name: Tag name as written in rule specs (``int[]``)
        clean: Character filter applied to each string value
        shape: ``scalar`` or ``array``
    """

    name: str
    clean: Callable[[str], str]
    shape: str = SCALAR

    def accepts(self, value: Any) -> bool:
        """Check the value has the shape this filter expects."""
        is_array = isinstance(value, (list, tuple))
        if self.shape == ARRAY:
            return is_array
        return not is_array and not isinstance(value, dict)


def _build_filters(*filters: SanitizeFilter) -> Mapping[str, SanitizeFilter]:
    return MappingProxyType({f.name: f for f in filters})


# Built-in sanitize tags (read-only)
FILTERS: Mapping[str, SanitizeFilter] = _build_filters(
    SanitizeFilter("string", strip_markup),
    SanitizeFilter("string[]", strip_markup, ARRAY),
    SanitizeFilter("email", keep_email_chars),
    SanitizeFilter("int", keep_int_chars),
    SanitizeFilter("int[]", keep_int_chars, ARRAY),
    SanitizeFilter("float", keep_float_chars),
    SanitizeFilter("float[]", keep_float_chars, ARRAY),
    SanitizeFilter("url", keep_url_chars),
)

DEFAULT_FILTER = "string"


def to_text(value: Any) -> str:
    """Stringify a scalar the way form data would carry it."""
    if isinstance(value, bool):
        return "1" if value else ""
    if isinstance(value, str):
        return value
    return str(value)


class Sanitizer:
    """
    Input sanitizer applying sanitize tags per field.

    Example:
        sanitizer = Sanitizer()

        # Per-field tags; fields without a tag pass through untouched
        clean = sanitizer.sanitize(
            {"age": " 42 years", "tags": ["<b>a</b>", " b "], "note": "x"},
            {"age": "int", "tags": "string[]"},
        )
        # {"age": "42", "tags": ["a", "b"], "note": "x"}

        # No tags: the default tag is applied to every field
        clean = sanitizer.sanitize({"name": "<i>Ann</i>"})
    """

    def __init__(
        self,
        filters: Optional[Mapping[str, SanitizeFilter]] = None,
        default_filter: str = DEFAULT_FILTER,
        trim: bool = True,
    ) -> None:
        """
        Initialize sanitizer.

        Args:
            filters: Tag table, defaults to the built-in ``FILTERS``
            default_filter: Tag used when no per-field tags are given
            trim: Strip surrounding whitespace after filtering
        """
        self.filters = filters if filters is not None else FILTERS
        self.default_filter = default_filter
        self.trim_values = trim

    def get_filter(self, tag: str, field: Optional[str] = None) -> SanitizeFilter:
        """Resolve a sanitize tag, raising ConfigurationError if unknown."""
        try:
            return self.filters[tag]
        except KeyError:
            raise ConfigurationError(
                f"Unknown sanitize tag '{tag}'"
                + (f" for field '{field}'" if field else ""),
                field=field,
                rule=tag,
            ) from None

    def sanitize(
        self,
        inputs: Mapping[str, Any],
        fields: Optional[Mapping[str, str]] = None,
        default_filter: Optional[str] = None,
        trim: Optional[bool] = None,
    ) -> Dict[str, Any]:
        """
        Sanitize input data.

        Args:
            inputs: Raw input record
            fields: Field name to sanitize tag; empty applies the default tag
            default_filter: Overrides the instance default tag
            trim: Overrides the instance trim setting

        Returns:
            New dict with cleaned values

        Raises:
            ConfigurationError: If a tag is not registered
        """
        default_tag = default_filter or self.default_filter
        should_trim = self.trim_values if trim is None else trim

        if fields:
            # Resolve every tag before touching any value
            resolved = {
                name: self.get_filter(tag, name) for name, tag in fields.items()
            }
        else:
            default = self.get_filter(default_tag)
            resolved = {name: default for name in inputs}

        data: Dict[str, Any] = dict(inputs)
        for name, sanitize_filter in resolved.items():
            if name in inputs:
                data[name] = self.apply(sanitize_filter, inputs[name], name)

        return self.trim(data) if should_trim else data

    def apply(
        self,
        sanitize_filter: SanitizeFilter,
        value: Any,
        field: Optional[str] = None,
    ) -> Any:
        """Apply one filter to a field value."""
        if value is None:
            return None

        if not sanitize_filter.accepts(value):
            logger.warning(
                "Rejected value with unexpected shape",
                field=field,
                tag=sanitize_filter.name,
                type=type(value).__name__,
            )
            return None

        if sanitize_filter.shape == ARRAY:
            return self._apply_items(sanitize_filter, value, field)

        return sanitize_filter.clean(to_text(value))

    def _apply_items(
        self,
        sanitize_filter: SanitizeFilter,
        items: Any,
        field: Optional[str],
    ) -> List[Any]:
        cleaned: List[Any] = []
        for item in items:
            if item is None:
                cleaned.append(None)
            elif isinstance(item, (list, tuple)):
                cleaned.append(self._apply_items(sanitize_filter, item, field))
            elif isinstance(item, dict):
                logger.warning(
                    "Rejected nested mapping in list value",
                    field=field,
                    tag=sanitize_filter.name,
                )
                cleaned.append(None)
            else:
                cleaned.append(sanitize_filter.clean(to_text(item)))
        return cleaned

    def trim(self, items: Any) -> Any:
        """Recursively strip whitespace from strings in dicts and lists."""
        if isinstance(items, str):
            return items.strip()
        if isinstance(items, dict):
            return {key: self.trim(value) for key, value in items.items()}
        if isinstance(items, (list, tuple)):
            return [self.trim(value) for value in items]
        return items


def sanitize(
    inputs: Mapping[str, Any],
    fields: Optional[Mapping[str, str]] = None,
    default_filter: str = DEFAULT_FILTER,
    filters: Mapping[str, SanitizeFilter] = FILTERS,
    trim: bool = True,
) -> Dict[str, Any]:
    """
    Sanitize input data (module-level shortcut).

    Example:
        sanitize({"age": " 42 "}, {"age": "int"})
        # {"age": "42"}
    """
    sanitizer = Sanitizer(filters=filters, default_filter=default_filter, trim=trim)
    return sanitizer.sanitize(inputs, fields)
