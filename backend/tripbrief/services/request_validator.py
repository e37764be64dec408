"""Request validator — cheap heuristic checks run before any provider is called."""

import re
from dataclasses import dataclass
from enum import Enum

MIN_REQUEST_LENGTH = 10

TRAVELER_COUNT_RE = re.compile(r"\d+\s*(people|person|traveler|adult|child)", re.IGNORECASE)
TRAVELER_GROUP_RE = re.compile(r"(solo|alone|myself|family|couple|group)", re.IGNORECASE)
AGE_INFO_RE = re.compile(
    r"(age|years old|kid|child|adult|senior|teenager|toddler|infant)", re.IGNORECASE
)


class ValidationReason(str, Enum):
    MISSING_DESTINATION = "missing_destination"
    MISSING_TRAVELER_COUNT = "missing_traveler_count"
    MISSING_AGE_INFO = "missing_age_info"

    @property
    def message(self) -> str:
        return _REASON_MESSAGES[self]


_REASON_MESSAGES = {
    ValidationReason.MISSING_DESTINATION: "Please provide more details about your destination.",
    ValidationReason.MISSING_TRAVELER_COUNT: "Please tell us how many people are traveling.",
    ValidationReason.MISSING_AGE_INFO: "Please mention the age groups of travelers.",
}


@dataclass(frozen=True)
class ValidationOutcome:
    valid: bool
    reason: ValidationReason | None = None

    @property
    def message(self) -> str | None:
        return self.reason.message if self.reason else None


VALID = ValidationOutcome(valid=True)


class RequestValidator:
    """Checks a free-text request for destination, traveler-count and age signals."""

    def validate(self, text: str) -> ValidationOutcome:
        """Return the first missing signal, in check order, or VALID."""
        text = text or ""

        if len(text) <= MIN_REQUEST_LENGTH:
            return ValidationOutcome(False, ValidationReason.MISSING_DESTINATION)

        if not (TRAVELER_COUNT_RE.search(text) or TRAVELER_GROUP_RE.search(text)):
            return ValidationOutcome(False, ValidationReason.MISSING_TRAVELER_COUNT)

        if not AGE_INFO_RE.search(text):
            return ValidationOutcome(False, ValidationReason.MISSING_AGE_INFO)

        return VALID


request_validator = RequestValidator()
