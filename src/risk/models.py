"""
Derived risk/quote data models.

None of these are persisted: they are recomputed from the applicant record
whenever a quote is shown.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def description(self) -> str:
        return f"{self.value.capitalize()} Risk"


# Score thresholds shared by the driver, vehicle and overall tiers.
HIGH_RISK_THRESHOLD = 70
MEDIUM_RISK_THRESHOLD = 40


def risk_level_for(score: float) -> RiskLevel:
    if score >= HIGH_RISK_THRESHOLD:
        return RiskLevel.HIGH
    if score >= MEDIUM_RISK_THRESHOLD:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


@dataclass
class RiskFactor:
    factor: str
    impact: str                          # low / medium / high / very high
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {"factor": self.factor, "impact": self.impact, "description": self.description}


@dataclass
class RiskAssessment:
    score: int
    risk_level: RiskLevel
    factors: List[RiskFactor] = field(default_factory=list)

    @property
    def risk_description(self) -> str:
        return self.risk_level.description

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "riskLevel": self.risk_level.value,
            "riskDescription": self.risk_description,
            "factors": [f.to_dict() for f in self.factors],
        }


@dataclass
class Recommendation:
    type: str                            # coverage / discount / improvement
    priority: str                        # low / medium / high
    title: str
    description: str
    benefit: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "priority": self.priority,
            "title": self.title,
            "description": self.description,
            "benefit": self.benefit,
        }


@dataclass
class SuggestedCoverage:
    liability: str = "1000000"
    collision: bool = True
    comprehensive: bool = True
    accident_forgiveness: bool = False

    def to_dict(self) -> Dict[str, Any]:
        # Keys match the applicant record so the suggestion can be applied directly.
        return {
            "liability": self.liability,
            "collision": self.collision,
            "comprehensive": self.comprehensive,
            "accidentForgiveness": self.accident_forgiveness,
        }


@dataclass
class InsuranceRecommendations:
    coverage: SuggestedCoverage
    recommendations: List[Recommendation] = field(default_factory=list)
    overall_risk_level: RiskLevel = RiskLevel.LOW

    def to_dict(self) -> Dict[str, Any]:
        return {
            "coverage": self.coverage.to_dict(),
            "recommendations": [r.to_dict() for r in self.recommendations],
            "overallRiskLevel": self.overall_risk_level.value,
        }


@dataclass
class PremiumBreakdown:
    base: int
    driver_risk_adjustment: int
    vehicle_risk_adjustment: int
    coverage_adjustments: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "base": self.base,
            "driverRiskAdjustment": self.driver_risk_adjustment,
            "vehicleRiskAdjustment": self.vehicle_risk_adjustment,
            "coverageAdjustments": self.coverage_adjustments,
        }


@dataclass
class PremiumEstimate:
    monthly: int
    annual: int
    breakdown: PremiumBreakdown

    def to_dict(self) -> Dict[str, Any]:
        return {"monthly": self.monthly, "annual": self.annual, "breakdown": self.breakdown.to_dict()}
