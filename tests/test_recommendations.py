"""Tests for coverage suggestions and recommendations."""

from src.risk.models import RiskAssessment, RiskFactor, RiskLevel, risk_level_for
from src.risk.recommendations import recommend


def _assessment(score, factors=()):
    return RiskAssessment(score=score, risk_level=risk_level_for(score), factors=list(factors))


def _titles(result):
    return [r.title for r in result.recommendations]


def test_low_overall_risk_raises_liability():
    result = recommend(_assessment(0), _assessment(0))

    assert result.overall_risk_level is RiskLevel.LOW
    assert result.coverage.liability == "2000000"
    assert result.coverage.accident_forgiveness is False
    assert _titles(result) == ["Higher Liability Coverage", "Paperless Billing Discount"]
    assert [r.priority for r in result.recommendations] == ["low", "high"]


def test_medium_overall_risk_offers_loyalty_discount_only():
    result = recommend(_assessment(40), _assessment(10))

    assert result.overall_risk_level is RiskLevel.MEDIUM
    assert result.coverage.liability == "1000000"
    assert _titles(result) == ["Loyalty Discount"]


def test_high_overall_risk_uses_max_of_both_scores():
    result = recommend(_assessment(5), _assessment(70))

    assert result.overall_risk_level is RiskLevel.HIGH
    assert result.coverage.accident_forgiveness is True
    assert result.coverage.collision is True
    assert result.coverage.comprehensive is True
    assert _titles(result) == ["Accident Forgiveness Recommended", "Safe Driver Course Discount"]
    assert [r.priority for r in result.recommendations] == ["high", "medium"]


def test_improvements_follow_tier_recommendations_in_factor_order():
    driver = _assessment(
        45,
        [
            RiskFactor("Young Driver", "high", "Drivers under 25 are statistically higher risk"),
            RiskFactor("Clean Record", "low", "No previous claims indicate lower risk"),
            RiskFactor("Traffic Violations", "high", "Traffic violations indicate higher risk behavior"),
        ],
    )
    vehicle = _assessment(20, [RiskFactor("Performance Vehicle", "high", "Sports cars are statistically higher risk")])

    result = recommend(driver, vehicle)

    assert _titles(result) == [
        "Loyalty Discount",
        "Improve Your Young Driver",
        "Improve Your Traffic Violations",
        "Vehicle Performance Vehicle",
    ]
    driver_tip, vehicle_tip = result.recommendations[1], result.recommendations[3]
    assert (driver_tip.type, driver_tip.priority) == ("improvement", "high")
    assert driver_tip.description == "Drivers under 25 are statistically higher risk"
    assert (vehicle_tip.type, vehicle_tip.priority) == ("improvement", "medium")


def test_very_high_impact_factor_gets_no_improvement_tip():
    driver = _assessment(25, [RiskFactor("License Suspensions", "very high", "Previous suspensions indicate serious risk")])
    result = recommend(driver, _assessment(0))
    assert _titles(result) == ["Higher Liability Coverage", "Paperless Billing Discount"]


def test_to_dict_coverage_matches_record_fields():
    out = recommend(_assessment(80), _assessment(0)).to_dict()
    assert out["coverage"] == {
        "liability": "1000000",
        "collision": True,
        "comprehensive": True,
        "accidentForgiveness": True,
    }
    assert out["overallRiskLevel"] == "high"
