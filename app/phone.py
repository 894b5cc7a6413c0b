"""
Indian mobile number normalization and validation.

Every phone number the app handles is stored and compared in the
E.164-like form ``+91XXXXXXXXXX``: the country prefix followed by ten
national digits, the first of which is 6, 7, 8 or 9.
"""
import re
from dataclasses import dataclass
from typing import Optional

COUNTRY_PREFIX = "+91"
COUNTRY_CODE = "91"
NATIONAL_NUMBER_LENGTH = 10
EXAMPLE_PHONE = "+919876543210"

PHONE_PATTERN = r"^\+91[6-9][0-9]{9}$"

_PHONE_RE = re.compile(PHONE_PATTERN)
_LEADING_DIGIT_RE = re.compile(r"^[6-9]")
_NON_PHONE_CHARS_RE = re.compile(r"[^0-9+]")

# Reasons a number can fail validation
REASON_DIGIT_COUNT = "digit_count"
REASON_LEADING_DIGIT = "leading_digit"
REASON_FORMAT = "format"


@dataclass(frozen=True)
class PhoneValidation:
    valid: bool
    normalized: str
    error: Optional[str] = None
    reason: Optional[str] = None

    @property
    def digits(self) -> str:
        return national_digits(self.normalized)


def _clean(phone: str) -> str:
    return _NON_PHONE_CHARS_RE.sub("", phone).strip()


def _with_prefix(national: str) -> str:
    return COUNTRY_PREFIX + national[:NATIONAL_NUMBER_LENGTH]


def national_digits(phone: str) -> str:
    """Return what follows a leading +91, or the input unchanged."""
    if phone.startswith(COUNTRY_PREFIX):
        return phone[len(COUNTRY_PREFIX):]
    return phone


def normalize_phone_number(phone):
    """
    Bring a user-typed phone number into ``+91XXXXXXXXXX`` form.

    Separators are dropped and anything past ten national digits is cut
    off. The result is not guaranteed to be valid; run it through
    validate_phone_number for that. Non-string and empty input is
    returned as-is.
    """
    if not phone or not isinstance(phone, str):
        return phone

    cleaned = _clean(phone)

    if cleaned.startswith(COUNTRY_PREFIX):
        return _with_prefix(cleaned[len(COUNTRY_PREFIX):])

    if cleaned.startswith(COUNTRY_CODE) and len(cleaned) > len(COUNTRY_CODE):
        return _with_prefix(cleaned[len(COUNTRY_CODE):])

    if cleaned.startswith("0"):
        return _with_prefix(cleaned[1:])

    return _with_prefix(cleaned)


def format_phone_input(value: str) -> str:
    """
    Reformat the phone field on every keystroke.

    Differs from normalize_phone_number only while the user is still typing
    a prefix: a value starting with ``+`` but not ``+91`` is left alone, and
    an empty field stays empty.
    """
    cleaned = _clean(value or "")

    if not cleaned:
        return cleaned
    if cleaned.startswith(COUNTRY_PREFIX):
        return _with_prefix(cleaned[len(COUNTRY_PREFIX):])
    if cleaned.startswith("+"):
        return cleaned
    return normalize_phone_number(cleaned)


def is_valid_phone(phone: str) -> bool:
    return bool(_PHONE_RE.match(phone or ""))


def invalid_reason(phone: str) -> Optional[str]:
    """Why an already-normalized number fails the pattern, or None if it passes."""
    if is_valid_phone(phone):
        return None
    digits = national_digits(phone)
    if len(digits) != NATIONAL_NUMBER_LENGTH:
        return REASON_DIGIT_COUNT
    if not _LEADING_DIGIT_RE.match(digits):
        return REASON_LEADING_DIGIT
    return REASON_FORMAT


def validate_phone_number(phone: str) -> PhoneValidation:
    normalized = normalize_phone_number(phone) or ""
    reason = invalid_reason(normalized)

    if reason is None:
        return PhoneValidation(valid=True, normalized=normalized)

    if reason == REASON_DIGIT_COUNT:
        error = (
            f"Phone number must have exactly {NATIONAL_NUMBER_LENGTH} digits after {COUNTRY_PREFIX}. "
            f"You have {len(national_digits(normalized))} digits."
        )
    elif reason == REASON_LEADING_DIGIT:
        error = f"Phone number must start with 6, 7, 8, or 9 after {COUNTRY_PREFIX}"
    else:
        error = f"Invalid phone number format. Expected: {EXAMPLE_PHONE}"

    return PhoneValidation(valid=False, normalized=normalized, error=error, reason=reason)


def mask_phone(phone: str) -> str:
    """Hide all but the last four digits, for logs."""
    if not phone or len(phone) <= 4:
        return phone
    return "*" * (len(phone) - 4) + phone[-4:]
