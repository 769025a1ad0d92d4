"""
Risk scoring, recommendations and premium estimation.

Everything in this package is a pure function of the applicant record.
"""

from .scoring import score_driver, score_vehicle
from .recommendations import recommend
from .premium import estimate_premium, calculate_payment_premium

__all__ = [
    "score_driver",
    "score_vehicle",
    "recommend",
    "estimate_premium",
    "calculate_payment_premium",
]
