"""
Unit tests for contact field validation and formatting.
"""

import pytest

from src.domain.validation import format_phone_number, is_valid_email, is_valid_phone


class TestPhone:
    @pytest.mark.parametrize(
        "phone",
        ["(555) 123-4567", "5551234567", "555.123.4567", "555-123-4567", " 555 123 4567 "],
    )
    def test_ten_digits_valid(self, phone: str) -> None:
        assert is_valid_phone(phone)

    @pytest.mark.parametrize("phone", ["12345", "", "+1 (555) 123-4567", "555-1234", "phone"])
    def test_other_lengths_invalid(self, phone: str) -> None:
        assert not is_valid_phone(phone)

    def test_format_ten_digits(self) -> None:
        assert format_phone_number("5551234567") == "(555) 123-4567"
        assert format_phone_number("555.123.4567") == "(555) 123-4567"

    def test_format_leaves_other_input_unchanged(self) -> None:
        assert format_phone_number("12345") == "12345"
        assert format_phone_number("+44 20 7946 0958") == "+44 20 7946 0958"


class TestEmail:
    @pytest.mark.parametrize("email", ["user@example.com", "a.b+tag@sub.example.co"])
    def test_valid(self, email: str) -> None:
        assert is_valid_email(email)

    @pytest.mark.parametrize(
        "email", ["", "user", "user@", "user@example", "@example.com", "us er@example.com"]
    )
    def test_invalid(self, email: str) -> None:
        assert not is_valid_email(email)
