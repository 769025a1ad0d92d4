"""
Premium estimation.

Two formulas live here and are intentionally kept apart:

- ``estimate_premium``: the risk-based estimate shown on the quote summary.
- ``calculate_payment_premium``: the simplified figure shown on the payment
  screen (age / vehicle age / flat coverage additions).

They produce different numbers for the same applicant; unifying them is a
product decision.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Mapping, Optional

from src.risk.models import PremiumBreakdown, PremiumEstimate
from src.risk.scoring import parse_int_prefix, parse_iso_date

logger = logging.getLogger(__name__)

BASE_ANNUAL_PREMIUM = Decimal("1200")

DRIVER_RISK_WEIGHT = Decimal("2")      # up to 3x for the highest driver risk
VEHICLE_RISK_WEIGHT = Decimal("1.5")   # up to 2.5x for the highest vehicle risk

COLLISION_FACTOR = Decimal("1.2")
COMPREHENSIVE_FACTOR = Decimal("1.15")
ACCIDENT_FORGIVENESS_FACTOR = Decimal("1.1")

# Payment screen (simplified) formula
YOUNG_DRIVER_FACTOR = Decimal("1.5")
SENIOR_DRIVER_FACTOR = Decimal("1.2")
NEW_VEHICLE_FACTOR = Decimal("1.3")
OLD_VEHICLE_FACTOR = Decimal("0.8")
COLLISION_FLAT = Decimal("300")
COMPREHENSIVE_FLAT = Decimal("200")
ACCIDENT_FORGIVENESS_FLAT = Decimal("100")


def _round(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _flag(coverage: Mapping[str, Any], key: str) -> bool:
    return bool(coverage.get(key, False))


def estimate_premium(driver_score: float, vehicle_score: float, coverage: Mapping[str, Any]) -> PremiumEstimate:
    """
    Annual and monthly premium from the two risk scores and the selected coverage.

    The breakdown is indicative: its parts are rounded independently and the
    coverage factors compound, so they do not sum exactly to ``annual``.
    """
    driver_multiplier = 1 + (Decimal(str(driver_score)) / 100) * DRIVER_RISK_WEIGHT
    vehicle_multiplier = 1 + (Decimal(str(vehicle_score)) / 100) * VEHICLE_RISK_WEIGHT

    collision = _flag(coverage, "collision")
    comprehensive = _flag(coverage, "comprehensive")
    accident_forgiveness = _flag(coverage, "accidentForgiveness")

    premium = BASE_ANNUAL_PREMIUM * driver_multiplier * vehicle_multiplier
    if collision:
        premium *= COLLISION_FACTOR
    if comprehensive:
        premium *= COMPREHENSIVE_FACTOR
    if accident_forgiveness:
        premium *= ACCIDENT_FORGIVENESS_FACTOR

    annual = _round(premium)
    monthly = _round(Decimal(annual) / 12)

    coverage_share = (
        (COLLISION_FACTOR - 1 if collision else 0)
        + (COMPREHENSIVE_FACTOR - 1 if comprehensive else 0)
        + (ACCIDENT_FORGIVENESS_FACTOR - 1 if accident_forgiveness else 0)
    )
    breakdown = PremiumBreakdown(
        base=int(BASE_ANNUAL_PREMIUM),
        driver_risk_adjustment=_round(BASE_ANNUAL_PREMIUM * (driver_multiplier - 1)),
        vehicle_risk_adjustment=_round(BASE_ANNUAL_PREMIUM * driver_multiplier * (vehicle_multiplier - 1)),
        coverage_adjustments=_round(BASE_ANNUAL_PREMIUM * driver_multiplier * vehicle_multiplier * coverage_share),
    )
    logger.debug(
        "[Premium] estimate driver_score=%s vehicle_score=%s annual=%s monthly=%s",
        driver_score, vehicle_score, annual, monthly,
    )
    return PremiumEstimate(monthly=monthly, annual=annual, breakdown=breakdown)


def calculate_payment_premium(record: Mapping[str, Any], today: Optional[date] = None) -> int:
    """Simplified annual premium shown at the payment step."""
    today = today or date.today()
    rate = BASE_ANNUAL_PREMIUM

    # Age by calendar year only
    born = parse_iso_date(record.get("dateOfBirth"))
    if born is not None:
        age = today.year - born.year
        if age < 25:
            rate *= YOUNG_DRIVER_FACTOR
        if age > 65:
            rate *= SENIOR_DRIVER_FACTOR

    # A blank model year counts as the current year
    raw_year = str(record.get("year") or "").strip()
    model_year = parse_int_prefix(raw_year) if raw_year else today.year
    if model_year is not None:
        vehicle_age = today.year - model_year
        if vehicle_age < 2:
            rate *= NEW_VEHICLE_FACTOR
        if vehicle_age > 10:
            rate *= OLD_VEHICLE_FACTOR

    if record.get("collision"):
        rate += COLLISION_FLAT
    if record.get("comprehensive"):
        rate += COMPREHENSIVE_FLAT
    if record.get("accidentForgiveness"):
        rate += ACCIDENT_FORGIVENESS_FLAT

    return _round(rate)
