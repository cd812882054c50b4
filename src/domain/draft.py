"""
Registration draft - immutable multi-step form state.

The attendee form has three steps:

    1. venue and event date
    2. personal details (name, email, phone, party size)
    3. optional extras (bottle service, instagram, interests, celebration)

A RegistrationDraft never changes in place. update() returns a copy with
new field values and advance() returns a copy one step further on, only
after the current step's checks pass. A draft past step 3 is complete and
can be submitted.
"""

from dataclasses import dataclass, replace
from datetime import date
from uuid import UUID

from .exceptions import InvalidRegistration
from .validation import format_phone_number, is_valid_email, is_valid_phone

FIRST_STEP = 1
LAST_STEP = 3
COMPLETE = LAST_STEP + 1

BOTTLE_BUDGETS = ("$500-$1000", "$1000-$2500", "$2500-$5000", "$5000+")
CELEBRATION_TYPES = ("Birthday", "Bachelor/Bachelorette", "Anniversary", "Corporate Event", "Other")
OTHER_CELEBRATION = "Other"


@dataclass(frozen=True)
class RegistrationDraft:
    """Field bag for the registration form plus the step it has reached."""

    step: int = FIRST_STEP
    venue_id: UUID | None = None
    event_date: date | None = None
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    men_count: int | None = None
    women_count: int | None = None
    bottle_service: bool = False
    bottle_budget: str | None = None
    instagram: str | None = None
    interest_limo: bool = False
    interest_boat: bool = False
    celebration_type: str | None = None
    celebration_other: str | None = None

    @property
    def is_complete(self) -> bool:
        return self.step >= COMPLETE

    @property
    def total_count(self) -> int | None:
        total = (self.men_count or 0) + (self.women_count or 0)
        return total or None

    def update(self, **changes) -> "RegistrationDraft":
        """Return a copy with the given fields replaced; the step is left alone."""
        if "step" in changes:
            raise TypeError("step changes only through advance() or back()")
        return replace(self, **changes)

    def advance(self) -> "RegistrationDraft":
        """
        Move to the next step.

        Raises:
            InvalidRegistration: If the current step's checks fail
        """
        if self.is_complete:
            return self
        self.validate_step(self.step)
        return replace(self, step=self.step + 1)

    def back(self) -> "RegistrationDraft":
        return replace(self, step=max(FIRST_STEP, min(self.step, LAST_STEP + 1) - 1))

    def complete(self) -> "RegistrationDraft":
        """Advance through every remaining step; the result is complete."""
        draft = self
        while not draft.is_complete:
            draft = draft.advance()
        return draft

    def validate_step(self, step: int) -> None:
        if step == 1:
            self._validate_venue_and_date()
        elif step == 2:
            self._validate_personal_details()
        elif step == 3:
            self._validate_extras()

    def normalized(self) -> "RegistrationDraft":
        """
        Copy with submission-ready values.

        Strips names, lowercases email, formats the phone number, blanks
        optional text to None, and drops celebration_other unless the
        celebration type is Other.
        """
        celebration_other = None
        if self.celebration_type == OTHER_CELEBRATION:
            celebration_other = _blank_to_none(self.celebration_other)
        return replace(
            self,
            first_name=self.first_name.strip(),
            last_name=self.last_name.strip(),
            email=self.email.strip().lower(),
            phone=format_phone_number(self.phone.strip()),
            men_count=self.men_count or None,
            women_count=self.women_count or None,
            bottle_budget=_blank_to_none(self.bottle_budget) if self.bottle_service else None,
            instagram=_blank_to_none(self.instagram),
            celebration_type=_blank_to_none(self.celebration_type),
            celebration_other=celebration_other,
        )

    def _validate_venue_and_date(self) -> None:
        if self.venue_id is None:
            raise InvalidRegistration("Please select a venue")
        if self.event_date is None:
            raise InvalidRegistration("Please select an event date")

    def _validate_personal_details(self) -> None:
        if not self.first_name.strip():
            raise InvalidRegistration("First name is required")
        if not self.last_name.strip():
            raise InvalidRegistration("Last name is required")
        if not is_valid_email(self.email.strip()):
            raise InvalidRegistration("Please enter a valid email address")
        if not is_valid_phone(self.phone):
            raise InvalidRegistration("Please enter a valid 10-digit phone number")
        for count in (self.men_count, self.women_count):
            if count is not None and count < 0:
                raise InvalidRegistration("Party counts cannot be negative")

    def _validate_extras(self) -> None:
        budget = _blank_to_none(self.bottle_budget)
        if budget is not None and budget not in BOTTLE_BUDGETS:
            raise InvalidRegistration("Please select a valid bottle service budget")
        celebration = _blank_to_none(self.celebration_type)
        if celebration is not None and celebration not in CELEBRATION_TYPES:
            raise InvalidRegistration("Please select a valid celebration type")


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None
