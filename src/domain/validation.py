"""Attendee contact field validation and formatting."""

import re

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_NON_DIGITS = re.compile(r"\D")


def digits_only(phone: str) -> str:
    return _NON_DIGITS.sub("", phone)


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def is_valid_phone(phone: str) -> bool:
    """A phone number is valid when exactly 10 digits remain after stripping the rest."""
    return len(digits_only(phone)) == 10


def format_phone_number(phone: str) -> str:
    """Format 10-digit numbers as (XXX) XXX-XXXX; anything else is returned unchanged."""
    cleaned = digits_only(phone)
    if len(cleaned) == 10:
        return f"({cleaned[:3]}) {cleaned[3:6]}-{cleaned[6:]}"
    return phone
