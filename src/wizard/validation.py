"""Shared validation for wizard screen submissions.

Each screen submits its fields as a dictionary. Validators accumulate
human-readable messages into an ``errors`` mapping (field -> message) so the
screen can show them inline and block navigation.

Callers that prefer an exception can use `raise_if_errors`, which raises
`FormValidationError` with the structured `field_errors`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, Mapping, Optional

PROVINCES = {
    "AB": "Alberta",
    "BC": "British Columbia",
    "MB": "Manitoba",
    "NB": "New Brunswick",
    "NL": "Newfoundland and Labrador",
    "NS": "Nova Scotia",
    "NT": "Northwest Territories",
    "NU": "Nunavut",
    "ON": "Ontario",
    "PE": "Prince Edward Island",
    "QC": "Quebec",
    "SK": "Saskatchewan",
    "YT": "Yukon",
}

GENDERS = ("male", "female", "other", "prefer-not-to-say")
MARITAL_STATUSES = ("single", "married", "common-law", "separated", "divorced", "widowed")
YEARS_LICENSED_OPTIONS = ("0-1", "1-3", "3-5", "5-10", "10+")
CLAIM_COUNT_OPTIONS = ("1", "2", "3", "4", "5+")
USAGE_OPTIONS = ("pleasure", "commute", "business")
ANNUAL_KM_OPTIONS = ("0-5000", "5000-10000", "10000-15000", "15000-20000", "20000+")
LIABILITY_OPTIONS = ("1000000", "2000000", "5000000")
CONTACT_METHODS = ("email", "phone", "text")
YES_NO = ("yes", "no")

VIN_LENGTH = 17
MIN_DRIVER_AGE = 16
MAX_DRIVER_AGE = 120

# has* flag -> detail fields that only apply when the flag is "yes"
CONDITIONAL_DETAILS: Dict[str, tuple] = {
    "hasPreviousClaims": ("numberOfClaims", "claimDetails"),
    "hasViolations": ("violationDetails",),
    "hasSuspensions": ("suspensionDetails",),
    "hasTickets": ("ticketDetails",),
}


@dataclass
class FormValidationError(Exception):
    """Exception raised for form validation failures.

    Attributes:
        field_errors: mapping of field name -> human-readable error message.
        message: optional top-level message.
    """

    field_errors: Dict[str, str]
    message: str = "Validation failed"

    def __str__(self) -> str:  # pragma: no cover
        return self.message


def _strip(v: Any) -> str:
    return "" if v is None else str(v).strip()


def add_error(errors: Dict[str, str], field: str, message: str) -> None:
    if field not in errors:
        errors[field] = message


def require_str(payload: Mapping[str, Any], field: str, errors: Dict[str, str], *, label: Optional[str] = None) -> str:
    value = _strip(payload.get(field))
    if not value:
        add_error(errors, field, f"{label or field} is required")
    return value


def validate_min_length(
    payload: Mapping[str, Any],
    field: str,
    errors: Dict[str, str],
    *,
    label: str,
    min_len: int,
    message: Optional[str] = None,
) -> str:
    value = require_str(payload, field, errors, label=label)
    if value and len(value) < min_len:
        add_error(errors, field, message or f"{label} must be at least {min_len} characters")
    return value


def validate_in(
    value: Any,
    allowed: Iterable[str],
    errors: Dict[str, str],
    field: str,
    *,
    label: Optional[str] = None,
    required: bool = True,
) -> str:
    raw = _strip(value)
    if not raw:
        if required:
            add_error(errors, field, f"{label or field} is required")
        return raw
    if raw not in set(allowed):
        add_error(errors, field, f"{label or field} has an invalid value")
    return raw


_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_email(value: str) -> bool:
    return bool(_EMAIL_RE.match(_strip(value)))


def validate_email(value: Any, errors: Dict[str, str], field: str = "email") -> str:
    value = _strip(value)
    if not value:
        add_error(errors, field, "Email is required")
        return value
    if not is_valid_email(value):
        add_error(errors, field, "Please enter a valid email address")
    return value


_PHONE_RE = re.compile(r"^\(?([0-9]{3})\)?[-. ]?([0-9]{3})[-. ]?([0-9]{4})$")


def validate_phone(value: Any, errors: Dict[str, str], field: str = "phone") -> str:
    """North American 10-digit phone, e.g. (416) 555-0199 or 416-555-0199."""
    raw = _strip(value)
    if not raw:
        add_error(errors, field, "Phone number is required")
        return raw
    if not _PHONE_RE.match(raw):
        add_error(errors, field, "Please enter a valid phone number")
    return raw


_POSTAL_CODE_RE = re.compile(r"^[A-Za-z]\d[A-Za-z][ -]?\d[A-Za-z]\d$")


def validate_postal_code(value: Any, errors: Dict[str, str], field: str = "postalCode") -> str:
    raw = _strip(value)
    if not raw:
        add_error(errors, field, "Postal code is required")
        return raw
    if not _POSTAL_CODE_RE.match(raw):
        add_error(errors, field, "Please enter a valid Canadian postal code")
    return raw


def validate_vin(value: Any, errors: Dict[str, str], field: str = "vin") -> str:
    raw = _strip(value)
    if not raw:
        add_error(errors, field, "VIN is required")
        return raw
    if len(raw) != VIN_LENGTH:
        add_error(errors, field, f"VIN must be exactly {VIN_LENGTH} characters")
    return raw


def validate_date_of_birth(
    value: Any, errors: Dict[str, str], field: str = "dateOfBirth", *, today: Optional[date] = None
) -> str:
    raw = _strip(value)
    if not raw:
        add_error(errors, field, "Date of birth is required")
        return raw
    try:
        born = date.fromisoformat(raw[:10])
    except ValueError:
        add_error(errors, field, "Please enter a valid date of birth")
        return raw
    # Calendar-year age, as shown on the driver screen
    age = (today or date.today()).year - born.year
    if age < MIN_DRIVER_AGE:
        add_error(errors, field, f"You must be at least {MIN_DRIVER_AGE} years old")
    elif age > MAX_DRIVER_AGE:
        add_error(errors, field, "Please enter a valid date of birth")
    return raw


def validate_demerit_points(value: Any, errors: Dict[str, str], field: str = "demeritPoints") -> str:
    raw = _strip(value)
    if not raw:
        return raw
    try:
        float(raw)
    except ValueError:
        add_error(errors, field, "Demerit points must be a number")
    return raw


_SCANNED_YEARS_RE = re.compile(r"^\d+\+?$")


def validate_years_licensed(value: Any, errors: Dict[str, str], field: str = "yearsLicensed") -> str:
    """Dropdown bucket, or the "N+" form filled in from a scanned licence."""
    raw = _strip(value)
    if not raw:
        add_error(errors, field, "Years licensed is required")
        return raw
    if raw not in YEARS_LICENSED_OPTIONS and not _SCANNED_YEARS_RE.match(raw):
        add_error(errors, field, "Years licensed has an invalid value")
    return raw


_CARD_NUMBER_RE = re.compile(r"^\d{16}$")
_EXPIRY_RE = re.compile(r"^(0[1-9]|1[0-2])/?([0-9]{2})$")
_CVV_RE = re.compile(r"^\d{3}$")


def validate_card(payload: Mapping[str, Any], errors: Dict[str, str]) -> Dict[str, str]:
    """Card details for the payment screen. Nothing is charged; this only checks shape."""
    number = require_str(payload, "cardNumber", errors, label="Card number")
    expiry = require_str(payload, "expiryDate", errors, label="Expiry date")
    cvv = require_str(payload, "cvv", errors, label="CVV")
    holder = require_str(payload, "cardholderName", errors, label="Cardholder name")

    if number and not _CARD_NUMBER_RE.match(re.sub(r"\s", "", number)):
        add_error(errors, "cardNumber", "Please enter a valid 16-digit card number")
    if expiry and not _EXPIRY_RE.match(expiry):
        add_error(errors, "expiryDate", "Please enter a valid expiry date (MM/YY)")
    if cvv and not _CVV_RE.match(cvv):
        add_error(errors, "cvv", "Please enter a valid 3-digit CVV")

    return {"cardNumber": number, "expiryDate": expiry, "cvv": cvv, "cardholderName": holder}


# ---------------------------------------------------------------------------
# Screen validators
# ---------------------------------------------------------------------------


def validate_driver_info(payload: Mapping[str, Any], *, today: Optional[date] = None) -> Dict[str, str]:
    errors: Dict[str, str] = {}

    validate_min_length(payload, "firstName", errors, label="First name", min_len=2)
    validate_min_length(payload, "lastName", errors, label="Last name", min_len=2)
    validate_date_of_birth(payload.get("dateOfBirth"), errors, today=today)
    validate_in(payload.get("gender"), GENDERS, errors, "gender", label="Gender")
    validate_in(payload.get("maritalStatus"), MARITAL_STATUSES, errors, "maritalStatus", label="Marital status")
    validate_min_length(
        payload, "licenseNumber", errors, label="License number", min_len=5,
        message="Please enter a valid license number",
    )
    validate_years_licensed(payload.get("yearsLicensed"), errors)
    validate_min_length(payload, "address", errors, label="Address", min_len=5, message="Please enter a valid address")
    validate_min_length(payload, "city", errors, label="City", min_len=2, message="Please enter a valid city")
    validate_in(payload.get("province"), PROVINCES, errors, "province", label="Province")
    validate_postal_code(payload.get("postalCode"), errors)

    for flag in CONDITIONAL_DETAILS:
        validate_in(payload.get(flag), YES_NO, errors, flag, required=False)

    if _strip(payload.get("hasPreviousClaims")) == "yes":
        validate_in(payload.get("numberOfClaims"), CLAIM_COUNT_OPTIONS, errors, "numberOfClaims", label="Number of claims")
        if not _strip(payload.get("claimDetails")):
            add_error(errors, "claimDetails", "Claim details are required")
    if _strip(payload.get("hasViolations")) == "yes" and not _strip(payload.get("violationDetails")):
        add_error(errors, "violationDetails", "Violation details are required")
    if _strip(payload.get("hasSuspensions")) == "yes" and not _strip(payload.get("suspensionDetails")):
        add_error(errors, "suspensionDetails", "Suspension details are required")
    if _strip(payload.get("hasTickets")) == "yes" and not _strip(payload.get("ticketDetails")):
        add_error(errors, "ticketDetails", "Ticket details are required")

    validate_demerit_points(payload.get("demeritPoints"), errors)
    return errors


def validate_vehicle_info(payload: Mapping[str, Any]) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    validate_vin(payload.get("vin"), errors)
    require_str(payload, "year", errors, label="Vehicle year")
    validate_min_length(payload, "make", errors, label="Vehicle make", min_len=2, message="Please enter a valid make")
    require_str(payload, "model", errors, label="Vehicle model")
    validate_in(payload.get("usage"), USAGE_OPTIONS, errors, "usage", label="Vehicle usage")
    validate_in(payload.get("annualKilometers"), ANNUAL_KM_OPTIONS, errors, "annualKilometers", label="Annual kilometers")
    return errors


def validate_personal_details(payload: Mapping[str, Any]) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    validate_email(payload.get("email"), errors)
    validate_phone(payload.get("phone"), errors)
    validate_in(payload.get("preferredContact"), CONTACT_METHODS, errors, "preferredContact", label="Preferred contact method")
    return errors


def validate_coverage(payload: Mapping[str, Any]) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    validate_in(payload.get("liability"), LIABILITY_OPTIONS, errors, "liability", label="Liability coverage")
    for flag in ("collision", "comprehensive", "accidentForgiveness"):
        if flag in payload and not isinstance(payload[flag], bool):
            add_error(errors, flag, f"{flag} must be true/false")
    return errors


def raise_if_errors(errors: Dict[str, str], message: str = "Please correct the highlighted fields") -> None:
    if errors:
        raise FormValidationError(field_errors=errors, message=message)
