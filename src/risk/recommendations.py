"""
Personalized coverage suggestions and advisory recommendations.
"""

from __future__ import annotations

from typing import List

from src.risk.models import (
    InsuranceRecommendations,
    Recommendation,
    RiskAssessment,
    RiskLevel,
    SuggestedCoverage,
    risk_level_for,
)

# Only factors with exactly this impact produce an improvement tip; "very high" does not.
IMPROVEMENT_IMPACT = "high"


def _tier_recommendations(level: RiskLevel, coverage: SuggestedCoverage) -> List[Recommendation]:
    if level is RiskLevel.HIGH:
        coverage.accident_forgiveness = True
        return [
            Recommendation(
                type="coverage",
                priority="high",
                title="Accident Forgiveness Recommended",
                description=(
                    "Given your risk profile, accident forgiveness can protect your rates "
                    "after your first at-fault accident."
                ),
                benefit="Protects your premium from rate increases after first accident",
            ),
            Recommendation(
                type="discount",
                priority="medium",
                title="Safe Driver Course Discount",
                description="Consider taking a defensive driving course to reduce your premiums.",
                benefit="Up to 10% discount on your premium",
            ),
        ]

    if level is RiskLevel.MEDIUM:
        return [
            Recommendation(
                type="discount",
                priority="medium",
                title="Loyalty Discount",
                description="Stay with us for multiple policies to receive loyalty discounts.",
                benefit="Up to 15% discount for multiple policies",
            )
        ]

    # Higher liability for low-risk drivers
    coverage.liability = "2000000"
    return [
        Recommendation(
            type="coverage",
            priority="low",
            title="Higher Liability Coverage",
            description="As a low-risk driver, consider increasing your liability coverage.",
            benefit="Better protection in case of major accidents",
        ),
        Recommendation(
            type="discount",
            priority="high",
            title="Paperless Billing Discount",
            description="Switch to paperless billing to save money and help the environment.",
            benefit="5% discount on your premium",
        ),
    ]


def recommend(driver_risk: RiskAssessment, vehicle_risk: RiskAssessment) -> InsuranceRecommendations:
    """Suggest a coverage configuration and ranked recommendations from both assessments."""
    overall = risk_level_for(max(driver_risk.score, vehicle_risk.score))
    coverage = SuggestedCoverage()

    recommendations = _tier_recommendations(overall, coverage)

    for factor in driver_risk.factors:
        if factor.impact == IMPROVEMENT_IMPACT:
            recommendations.append(
                Recommendation(
                    type="improvement",
                    priority="high",
                    title=f"Improve Your {factor.factor}",
                    description=factor.description,
                    benefit="Reducing risk factors can lower your insurance costs",
                )
            )

    for factor in vehicle_risk.factors:
        if factor.impact == IMPROVEMENT_IMPACT:
            recommendations.append(
                Recommendation(
                    type="improvement",
                    priority="medium",
                    title=f"Vehicle {factor.factor}",
                    description=factor.description,
                    benefit="Safer vehicles or driving habits can reduce your premiums",
                )
            )

    return InsuranceRecommendations(coverage=coverage, recommendations=recommendations, overall_risk_level=overall)
