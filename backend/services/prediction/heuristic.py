"""Heuristic and minimal-default scoring for the fallback chain.

Heuristic tier: small fixed weighted formulas over the feature vector. No
external dependency, deterministic, always available.

Minimal tier: context-free population averages. Never fails.

Also derives the secondary outputs attached to every prediction: hire
probability, salary positioning and the per-stage hiring timeline.
"""

import logging

from models.schemas.feature_vector import FeatureVector
from models.schemas.prediction import Dimension, PredictorOutput, StageBreakdown
from services.prediction.predictors.salary import salary_output

logger = logging.getLogger(__name__)

# Interview: weights sum to 1.0
W_SKILL_OVERLAP = 0.35
W_EXPERIENCE_RELEVANCE = 0.20
W_SENIORITY_MATCH = 0.15
W_EDUCATION_MATCH = 0.10
W_MARKET_DEMAND = 0.10
W_ENGAGEMENT = 0.10

INTERVIEW_TO_OFFER = 0.35  # interview -> offer conversion
BASE_SALARY = 60000.0
EXPERIENCE_PREMIUM = 5000.0  # per year, capped at 20 years
BASE_DAYS_TO_HIRE = 21.0
HIRE_GIVEN_OFFER = 0.8  # offers that end in a hire
REFERENCE_SALARY = 70000.0  # population median before market adjustment
# Share of a 21-day process spent in each stage
STAGE_DAYS = {
    "application_review": 3,
    "initial_screening": 5,
    "interviews": 7,
    "decision_making": 4,
    "offer_negotiation": 2,
}

MINIMAL_DEFAULTS: dict[Dimension, PredictorOutput] = {
    Dimension.INTERVIEW: PredictorOutput(value=0.15),
    Dimension.OFFER: PredictorOutput(value=0.05),
    Dimension.SALARY: PredictorOutput(value=70000, low=56000, high=91000),
    Dimension.TIME_TO_HIRE: PredictorOutput(value=30),
    Dimension.COMPETITIVENESS: PredictorOutput(value=50.0),
}


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class HeuristicPredictor:
    """Rule-based scorer used when the model-backed tier is unavailable."""

    def __init__(self, confidence: float = 0.5) -> None:
        self.confidence = confidence
        self._scorers = {
            Dimension.INTERVIEW: self._interview,
            Dimension.OFFER: self._offer,
            Dimension.SALARY: self._salary,
            Dimension.TIME_TO_HIRE: self._time_to_hire,
            Dimension.COMPETITIVENESS: self._competitiveness,
        }

    def predict(self, dimension: Dimension, vector: FeatureVector) -> PredictorOutput:
        return self._scorers[dimension](vector)

    def interview_probability(self, vector: FeatureVector) -> float:
        m = vector.matching
        raw = (
            W_SKILL_OVERLAP * m.skill_overlap
            + W_EXPERIENCE_RELEVANCE * m.experience_relevance
            + W_SENIORITY_MATCH * m.seniority_match
            + W_EDUCATION_MATCH * m.education_match
            + W_MARKET_DEMAND * vector.market.demand_index
            + W_ENGAGEMENT * vector.behavior.platform_engagement
        )
        return _clamp(raw, 0.05, 0.9)

    def _interview(self, vector: FeatureVector) -> PredictorOutput:
        return PredictorOutput(value=round(self.interview_probability(vector), 4), confidence=self.confidence)

    def _offer(self, vector: FeatureVector) -> PredictorOutput:
        fit = 1.0 - 0.5 * vector.derived.underqualification - 0.3 * vector.derived.overqualification
        raw = self.interview_probability(vector) * INTERVIEW_TO_OFFER * _clamp(fit + 0.3, 0.3, 1.3)
        return PredictorOutput(value=round(_clamp(raw, 0.01, 0.6), 4), confidence=self.confidence)

    def _salary(self, vector: FeatureVector) -> PredictorOutput:
        years = min(vector.cv.experience_years, 20.0)
        education_bonus = max(0.0, vector.cv.education_level - 3) * 0.05
        median = (BASE_SALARY + years * EXPERIENCE_PREMIUM) * vector.market.salary_index * (1 + education_bonus)
        return salary_output(median, None, None, self.confidence)

    def _time_to_hire(self, vector: FeatureVector) -> PredictorOutput:
        market = vector.market
        # Slow seasons stretch the process, tight candidate supply shortens it
        days = BASE_DAYS_TO_HIRE / market.seasonality / _clamp(market.demand_supply_ratio, 0.5, 2.0) ** 0.5
        days *= 1.0 + 0.3 * market.competition_level
        return PredictorOutput(value=round(_clamp(days, 7, 90)), confidence=self.confidence)

    def _competitiveness(self, vector: FeatureVector) -> PredictorOutput:
        score = (
            vector.matching.skill_overlap * 30
            + min(vector.cv.experience_years / 10, 1.0) * 25
            + (vector.cv.education_level / 5) * 20
            + min(vector.market.demand_supply_ratio / 2, 1.0) * 15
            + _clamp(0.5 + vector.derived.career_trajectory_slope, 0.0, 1.0) * 10
        )
        return PredictorOutput(value=round(_clamp(score, 0, 100), 1), confidence=self.confidence)


def minimal_default(dimension: Dimension, confidence: float = 0.2) -> PredictorOutput:
    return MINIMAL_DEFAULTS[dimension].model_copy(update={"confidence": confidence})


def hire_probability(offer_probability: float) -> float:
    return round(_clamp(offer_probability * HIRE_GIVEN_OFFER, 0.0, 1.0), 4)


def salary_insights(vector: FeatureVector, median: float) -> dict:
    """Market percentile, negotiation potential and experience premium for a salary median."""
    market = vector.market
    reference = REFERENCE_SALARY * market.salary_index
    percentile = 50 * median / reference if reference > 0 else 50
    negotiation = 0.3 + 0.4 * (market.demand_index - market.competition_level)
    if vector.matching.skill_overlap >= 0.8:
        negotiation += 0.1
    experience_bonus = min(vector.cv.experience_years, 20.0) * EXPERIENCE_PREMIUM
    return {
        "market_percentile": int(round(_clamp(percentile, 1, 99))),
        "negotiation_potential": round(_clamp(negotiation, 0.0, 1.0), 3),
        "experience_premium": round(experience_bonus / median * 100, 1) if median > 0 else 0.0,
    }


def stage_breakdown(days: int) -> StageBreakdown:
    """Split a time-to-hire estimate over the hiring stages; the remainder goes to interviews."""
    total = sum(STAGE_DAYS.values())
    days = max(0, days)
    stages = {name: days * share // total for name, share in STAGE_DAYS.items()}
    stages["interviews"] += days - sum(stages.values())
    return StageBreakdown(**stages)
