"""
Quotation flow - Score the applicant and present the quote summary
"""

import logging
from datetime import date
from typing import Any, Dict, Mapping, Optional

from src.risk.models import risk_level_for
from src.risk.premium import estimate_premium
from src.risk.recommendations import recommend
from src.risk.scoring import score_driver, score_vehicle

logger = logging.getLogger(__name__)

COVERAGE_FIELDS = ("liability", "collision", "comprehensive", "accidentForgiveness")


def build_quote(record: Mapping[str, Any], today: Optional[date] = None) -> Dict[str, Any]:
    """Run scoring, recommendations and the premium estimate for one applicant record."""
    driver_risk = score_driver(record, today)
    vehicle_risk = score_vehicle(record, today)
    advice = recommend(driver_risk, vehicle_risk)
    premium = estimate_premium(driver_risk.score, vehicle_risk.score, record)

    overall = risk_level_for(max(driver_risk.score, vehicle_risk.score))
    return {
        "driverRisk": driver_risk.to_dict(),
        "vehicleRisk": vehicle_risk.to_dict(),
        "overallRisk": {"riskLevel": overall.value, "riskDescription": overall.description},
        "recommendations": [r.to_dict() for r in advice.recommendations],
        "suggestedCoverage": advice.coverage.to_dict(),
        "selectedCoverage": {k: record.get(k) for k in COVERAGE_FIELDS},
        "premium": premium.to_dict(),
    }


class QuotationFlow:
    def __init__(self, store, today: Optional[date] = None):
        self.store = store
        self.today = today

    async def start(self) -> Dict:
        """Present the quote for the stored applicant"""
        quote = build_quote(self.store.record, self.today)
        logger.info(
            "[Quotation] quote: driver_score=%s vehicle_score=%s annual=%s monthly=%s",
            quote["driverRisk"]["score"], quote["vehicleRisk"]["score"],
            quote["premium"]["annual"], quote["premium"]["monthly"],
        )

        return {
            "response": {
                "type": "quote",
                "message": "Here's your personalized quote",
                "quote_details": quote,
                "actions": [
                    {"type": "accept", "label": "Purchase Policy"},
                    {"type": "apply_suggestion", "label": "Use Recommended Coverage"},
                    {"type": "modify", "label": "Modify Coverage"},
                ],
            },
            "next_screen": "quote-summary",
        }

    async def process_step(self, payload: Mapping[str, Any]) -> Dict:
        """Handle the user's choice on the summary screen"""
        action = str(payload.get("action") or "").strip().lower()
        logger.info("[Quotation] User action: %s", action)

        if action == "accept":
            return {
                "response": {"type": "quote_accepted", "message": "Great! Let's complete your purchase."},
                "next_screen": "payment",
            }

        if action == "apply_suggestion":
            suggested = self.apply_suggested_coverage()
            out = await self.start()
            out["response"]["applied_coverage"] = suggested
            return out

        if action == "modify":
            return {
                "response": {"type": "modification", "message": "Adjust your coverage selections."},
                "next_screen": "coverage",
            }

        return await self.start()

    def apply_suggested_coverage(self) -> Dict[str, Any]:
        """Copy the recommended coverage into the applicant record."""
        record = self.store.record
        advice = recommend(score_driver(record, self.today), score_vehicle(record, self.today))
        suggested = advice.coverage.to_dict()
        self.store.update_many(suggested)
        logger.info("[Quotation] Applied suggested coverage: %s", suggested)
        return suggested
