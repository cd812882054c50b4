"""
Unit tests for the immutable multi-step RegistrationDraft.
"""

from dataclasses import FrozenInstanceError
from datetime import date
from uuid import uuid4

import pytest

from src.domain.draft import COMPLETE, RegistrationDraft
from src.domain.exceptions import InvalidRegistration


def step_one() -> RegistrationDraft:
    return RegistrationDraft(venue_id=uuid4(), event_date=date(2026, 10, 17))


def step_two() -> RegistrationDraft:
    return step_one().update(
        first_name="Jordan",
        last_name="Lee",
        email="jordan@example.com",
        phone="5551234567",
    )


class TestStepTransitions:
    """Step N -> N+1 only when step N validates."""

    def test_starts_at_step_one(self) -> None:
        assert RegistrationDraft().step == 1

    def test_advance_returns_new_draft(self) -> None:
        draft = step_one()
        advanced = draft.advance()

        assert advanced.step == 2
        assert draft.step == 1

    def test_draft_is_frozen(self) -> None:
        draft = step_one()
        with pytest.raises(FrozenInstanceError):
            draft.first_name = "x"  # type: ignore[misc]

    def test_update_cannot_change_step(self) -> None:
        with pytest.raises(TypeError):
            step_one().update(step=3)

    def test_complete_walks_all_steps(self) -> None:
        draft = step_two().complete()
        assert draft.step == COMPLETE
        assert draft.is_complete

    def test_advance_on_complete_is_noop(self) -> None:
        draft = step_two().complete()
        assert draft.advance() is draft

    def test_back(self) -> None:
        draft = step_one().advance()
        assert draft.back().step == 1
        assert draft.back().back().step == 1


class TestStepValidation:
    """Validation messages per step."""

    @pytest.mark.parametrize(
        "draft, message",
        [
            (RegistrationDraft(), "Please select a venue"),
            (RegistrationDraft(venue_id=uuid4()), "Please select an event date"),
        ],
    )
    def test_step_one(self, draft: RegistrationDraft, message: str) -> None:
        with pytest.raises(InvalidRegistration, match=message):
            draft.advance()

    @pytest.mark.parametrize(
        "changes, message",
        [
            ({"first_name": "  "}, "First name is required"),
            ({"last_name": ""}, "Last name is required"),
            ({"email": "not-an-email"}, "Please enter a valid email address"),
            ({"phone": "12345"}, "Please enter a valid 10-digit phone number"),
            ({"men_count": -1}, "Party counts cannot be negative"),
        ],
    )
    def test_step_two(self, changes: dict, message: str) -> None:
        draft = step_two().update(**changes).advance()  # step 1 passes
        with pytest.raises(InvalidRegistration, match=message):
            draft.advance()

    def test_step_two_failure_keeps_step(self) -> None:
        draft = step_two().update(phone="12345").advance()
        with pytest.raises(InvalidRegistration):
            draft.advance()
        assert draft.step == 2

    def test_step_three_rejects_unknown_budget(self) -> None:
        draft = step_two().update(bottle_service=True, bottle_budget="$1")
        with pytest.raises(InvalidRegistration, match="bottle service budget"):
            draft.complete()

    def test_step_three_rejects_unknown_celebration(self) -> None:
        draft = step_two().update(celebration_type="Graduation")
        with pytest.raises(InvalidRegistration, match="celebration type"):
            draft.complete()

    def test_complete_reports_first_failing_step(self) -> None:
        with pytest.raises(InvalidRegistration, match="Please select a venue"):
            RegistrationDraft(first_name="").complete()


class TestNormalized:
    """Submission-ready values."""

    def test_contact_fields_normalized(self) -> None:
        draft = step_two().update(
            first_name="  Jordan ", email=" Jordan@Example.COM ", phone="555.123.4567"
        )
        normalized = draft.normalized()

        assert normalized.first_name == "Jordan"
        assert normalized.email == "jordan@example.com"
        assert normalized.phone == "(555) 123-4567"

    def test_total_count(self) -> None:
        assert step_two().update(men_count=2, women_count=3).total_count == 5
        assert step_two().update(men_count=2).total_count == 2
        assert step_two().total_count is None
        assert step_two().update(men_count=0, women_count=0).total_count is None

    def test_zero_counts_become_none(self) -> None:
        normalized = step_two().update(men_count=0, women_count=2).normalized()
        assert normalized.men_count is None
        assert normalized.women_count == 2

    def test_celebration_other_only_kept_for_other(self) -> None:
        birthday = step_two().update(celebration_type="Birthday", celebration_other="x").normalized()
        other = step_two().update(celebration_type="Other", celebration_other=" Promotion ").normalized()

        assert birthday.celebration_other is None
        assert other.celebration_other == "Promotion"

    def test_budget_dropped_without_bottle_service(self) -> None:
        draft = step_two().update(bottle_service=False, bottle_budget="$5000+").normalized()
        assert draft.bottle_budget is None

    def test_blank_optional_text_becomes_none(self) -> None:
        draft = step_two().update(instagram="  ", celebration_type="").normalized()
        assert draft.instagram is None
        assert draft.celebration_type is None
