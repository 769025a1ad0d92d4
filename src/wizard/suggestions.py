"""
Smart field suggestions for the wizard screens.

All suggestions are computed locally from the value being typed and the rest
of the applicant record; nothing leaves the process.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from src.risk.scoring import parse_iso_date
from src.wizard.validation import is_valid_email

COMMON_EMAIL_DOMAINS = ("gmail.com", "yahoo.com", "hotmail.com", "outlook.com")

# First letter of a Canadian postal code -> province
POSTAL_PREFIX_PROVINCES = {
    "A": "NL",
    "B": "NS",
    "C": "PE",
    "E": "NB",
    "G": "QC",
    "H": "QC",
    "J": "QC",
    "K": "ON",
    "L": "ON",
    "M": "ON",
    "N": "ON",
    "P": "ON",
    "R": "MB",
    "S": "SK",
    "T": "AB",
    "V": "BC",
    "X": "NT",  # also Nunavut
    "Y": "YT",
}

_MDY_RE = re.compile(r"^(0[1-9]|1[0-2])/(0[1-9]|[12][0-9]|3[01])/\d{4}$")


def levenshtein(a: str, b: str) -> int:
    if not a:
        return len(b)
    if not b:
        return len(a)
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def suggest_email_correction(email: str) -> Optional[str]:
    parts = email.split("@")
    if len(parts) != 2:
        return None
    local, domain = parts
    for candidate in COMMON_EMAIL_DOMAINS:
        if levenshtein(domain.lower(), candidate) <= 2:
            return f"{local}@{candidate}"
    return None


def format_phone_number(phone: str) -> str:
    digits = re.sub(r"\D", "", phone)
    if len(digits) == 10:
        return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
    return phone


def format_vin(vin: str) -> str:
    return re.sub(r"[^A-Z0-9]", "", vin.upper())[:17]


def format_address(address: str) -> str:
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), address)


def format_date_mdy(value: str) -> str:
    digits = re.sub(r"\D", "", value)
    if len(digits) >= 8:
        return f"{digits[:2]}/{digits[2:4]}/{digits[4:8]}"
    return value


def _suggestion(value: Any, label: str, confidence: float) -> Dict[str, Any]:
    return {"value": value, "label": label, "confidence": confidence}


def generate_field_suggestions(field: str, value: str, record: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
    """Suggestions for the field currently being edited."""
    value = value or ""
    suggestions: List[Dict[str, Any]] = []

    if field in ("firstName", "lastName"):
        if value:
            suggestions.append(_suggestion(value[:1].upper() + value[1:].lower(), "Correct capitalization", 0.8))

    elif field == "dateOfBirth":
        if value and not _MDY_RE.match(value) and parse_iso_date(value) is None:
            suggestions.append(_suggestion(format_date_mdy(value), "Format as MM/DD/YYYY", 0.9))

    elif field == "email":
        if value and not is_valid_email(value):
            corrected = suggest_email_correction(value)
            if corrected:
                suggestions.append(_suggestion(corrected, "Did you mean?", 0.95))
        elif value:
            # Well-formed but possibly mistyped domain, e.g. jane@gmial.com
            corrected = suggest_email_correction(value)
            if corrected and corrected != value:
                suggestions.append(_suggestion(corrected, "Did you mean?", 0.95))

    elif field == "phone":
        formatted = format_phone_number(value) if value else value
        if value and formatted != value:
            suggestions.append(_suggestion(formatted, "Format phone number", 0.9))

    elif field == "address":
        if len(value) > 10:
            suggestions.append(_suggestion(format_address(value), "Format address", 0.7))

    elif field == "vin":
        if value:
            formatted = format_vin(value)
            if formatted != value:
                suggestions.append(_suggestion(formatted, "Format VIN", 0.9))
            if len(value) == 17:
                suggestions.append(_suggestion(value.upper(), "Standardize VIN", 0.8))

    return suggestions


def predict_form_values(record: Mapping[str, Any], today: Optional[date] = None) -> Dict[str, Dict[str, Any]]:
    """Predict likely values for empty fields from what the applicant already entered."""
    predictions: Dict[str, Dict[str, Any]] = {}

    first = str(record.get("firstName") or "").strip()
    last = str(record.get("lastName") or "").strip()
    if first and last:
        predictions["email"] = {
            "value": f"{first.lower()}.{last.lower()}@example.com",
            "confidence": 0.7,
            "source": "name_based_prediction",
        }

    born = parse_iso_date(record.get("dateOfBirth"))
    if born is not None:
        today = today or date.today()
        age = today.year - born.year - ((today.month, today.day) < (born.month, born.day))
        if 16 <= age < 25:
            predictions["yearsLicensed"] = {
                "value": max(0, age - 16),
                "confidence": 0.9,
                "source": "age_based_prediction",
            }

    postal = str(record.get("postalCode") or "").strip()
    province = POSTAL_PREFIX_PROVINCES.get(postal[:1].upper()) if postal else None
    if province:
        predictions["province"] = {"value": province, "confidence": 0.85, "source": "postal_code_prediction"}

    return predictions
