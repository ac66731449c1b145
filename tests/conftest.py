"""Pytest configuration and fixtures."""

from datetime import date

import pytest


@pytest.fixture
def sanitizer():
    """Sanitizer with default settings."""
    from simplevalidator.security.sanitizer import Sanitizer
    return Sanitizer()


@pytest.fixture
def validator():
    """Validator with the built-in rules."""
    from simplevalidator.validation.validator import Validator
    return Validator()


@pytest.fixture
def input_filter():
    """Filter facade with default settings."""
    from simplevalidator.input_filter import InputFilter
    return InputFilter()


@pytest.fixture
def fixed_today(monkeypatch):
    """Pin the date used by age checks to 2024-06-15."""
    from simplevalidator.validation import rules

    pinned = date(2024, 6, 15)
    monkeypatch.setattr(rules, "today", lambda: pinned)
    return pinned


@pytest.fixture
def signup_data():
    """Raw sign-up form as posted by a browser."""
    return {
        "username": "  annie99 ",
        "email": "annie@example.com",
        "password": "Sup3r$ecret",
        "password2": "Sup3r$ecret",
        "age": " 31 ",
        "website": "https://example.com/annie",
    }


@pytest.fixture
def signup_fields():
    """Rule declarations for the sign-up form."""
    return {
        "username": "string|required|alphanumeric|between:3,25",
        "email": "email|required|email",
        "password": "string|required|secure",
        "password2": "string|required|same:password",
        "age": "int|number",
        "website": "url|url",
    }
