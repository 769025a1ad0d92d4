"""
Driver and vehicle risk scoring.

Both scorers are pure: the same applicant record (and reference date) always
produces the same assessment. Blank or malformed fields simply skip their
contribution, so a fully empty record is a valid input.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from src.risk.models import RiskAssessment, RiskFactor, risk_level_for

MIN_SCORE = 0
MAX_SCORE = 100

# Explicit mapping for the yearsLicensed dropdown; anything else falls back to
# its leading integer ("12+" -> 12).
YEARS_LICENSED_BUCKETS: Dict[str, int] = {
    "0-1": 0,
    "1-3": 1,
    "3-5": 3,
    "5-10": 5,
    "10+": 10,
}

PERFORMANCE_KEYWORDS = ("sports", "mustang", "camaro")
LARGE_VEHICLE_KEYWORDS = ("truck", "suv")

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def parse_int_prefix(value: Any) -> Optional[int]:
    """Leading integer of a value ("5+" -> 5, "3-5" -> 3); None when there isn't one."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    match = _LEADING_INT_RE.match(str(value))
    return int(match.group(1)) if match else None


def parse_iso_date(value: Any) -> Optional[date]:
    s = "" if value is None else str(value).strip()
    if not s:
        return None
    try:
        return date.fromisoformat(s[:10])
    except ValueError:
        return None


def age_in_years(date_of_birth: Any, today: Optional[date] = None) -> Optional[int]:
    """Whole years elapsed since date_of_birth, counting a year as 365.25 days."""
    born = parse_iso_date(date_of_birth)
    if born is None:
        return None
    today = today or date.today()
    return int((today - born).days // 365.25)


def years_licensed(value: Any) -> Optional[int]:
    s = "" if value is None else str(value).strip()
    if not s:
        return None
    if s in YEARS_LICENSED_BUCKETS:
        return YEARS_LICENSED_BUCKETS[s]
    return parse_int_prefix(s)


def _is_yes(value: Any) -> bool:
    return str(value or "").strip().lower() == "yes"


def _clamp(score: int) -> int:
    return max(MIN_SCORE, min(MAX_SCORE, score))


def _assessment(score: int, factors: List[RiskFactor]) -> RiskAssessment:
    score = _clamp(score)
    return RiskAssessment(score=score, risk_level=risk_level_for(score), factors=factors)


def score_driver(record: Mapping[str, Any], today: Optional[date] = None) -> RiskAssessment:
    """Score the driver half of an applicant record."""
    score = 0
    factors: List[RiskFactor] = []

    # Age: younger and older drivers are higher risk
    age = age_in_years(record.get("dateOfBirth"), today)
    if age is not None:
        if age < 25:
            score += 20
            factors.append(RiskFactor("Young Driver", "high", "Drivers under 25 are statistically higher risk"))
        elif age > 65:
            score += 15
            factors.append(RiskFactor("Experienced Driver", "medium", "Drivers over 65 may have slower reaction times"))
        else:
            factors.append(RiskFactor("Prime Age", "low", "Drivers aged 25-65 are generally lower risk"))

    years = years_licensed(record.get("yearsLicensed"))
    if years is not None:
        if years < 2:
            score += 15
            factors.append(RiskFactor("Limited Experience", "high", "New drivers have higher accident rates"))
        elif years < 5:
            score += 10
            factors.append(RiskFactor("Moderate Experience", "medium", "Some driving experience reduces risk"))
        else:
            score -= 5
            factors.append(RiskFactor("Experienced Driver", "low", "Extensive driving experience reduces risk"))

    if _is_yes(record.get("hasPreviousClaims")):
        claims = max(1, parse_int_prefix(record.get("numberOfClaims")) or 1)
        score += claims * 10
        plural = "s" if claims > 1 else ""
        factors.append(
            RiskFactor("Claims History", "high", f"Previous claims indicate higher risk ({claims} claim{plural})")
        )
    else:
        score -= 5
        factors.append(RiskFactor("Clean Record", "low", "No previous claims indicate lower risk"))

    if _is_yes(record.get("hasViolations")):
        score += 15
        factors.append(RiskFactor("Traffic Violations", "high", "Traffic violations indicate higher risk behavior"))

    points = parse_int_prefix(record.get("demeritPoints")) if str(record.get("demeritPoints") or "").strip() else None
    if points is not None:
        if points > 5:
            score += points * 2
            factors.append(RiskFactor("Demerit Points", "high", f"High demerit points ({points}) indicate risky driving"))
        elif points > 0:
            score += points
            factors.append(
                RiskFactor("Demerit Points", "medium", f"Some demerit points ({points}) indicate minor infractions")
            )

    if _is_yes(record.get("hasSuspensions")):
        score += 25
        factors.append(RiskFactor("License Suspensions", "very high", "Previous suspensions indicate serious risk"))

    if _is_yes(record.get("hasTickets")):
        score += 10
        factors.append(RiskFactor("Traffic Tickets", "medium", "Multiple tickets indicate higher risk"))

    return _assessment(score, factors)


def score_vehicle(record: Mapping[str, Any], today: Optional[date] = None) -> RiskAssessment:
    """Score the vehicle half of an applicant record."""
    score = 0
    factors: List[RiskFactor] = []

    model_year = parse_int_prefix(record.get("year")) if str(record.get("year") or "").strip() else None
    if model_year is not None:
        vehicle_age = (today or date.today()).year - model_year
        if vehicle_age > 15:
            score += 15
            factors.append(RiskFactor("Old Vehicle", "medium", f"Vehicle is {vehicle_age} years old"))
        elif vehicle_age > 10:
            score += 10
            factors.append(RiskFactor("Aged Vehicle", "low", f"Vehicle is {vehicle_age} years old"))
        else:
            score -= 5
            factors.append(RiskFactor("New Vehicle", "low", f"Vehicle is {vehicle_age} years old"))

    make = str(record.get("make") or "").strip()
    model = str(record.get("model") or "").strip()
    if make and model:
        vehicle_name = f"{make} {model}".lower()
        if any(k in vehicle_name for k in PERFORMANCE_KEYWORDS):
            score += 20
            factors.append(RiskFactor("Performance Vehicle", "high", "Sports cars are statistically higher risk"))
        elif any(k in vehicle_name for k in LARGE_VEHICLE_KEYWORDS):
            score += 10
            factors.append(RiskFactor("Large Vehicle", "medium", "Larger vehicles may have higher repair costs"))
        else:
            factors.append(RiskFactor("Standard Vehicle", "low", "Standard passenger vehicle"))

    return _assessment(score, factors)
