"""
deepscan.forensic.explainability – risk tier and recommendation text.

Maps a final confidence score to a discrete risk tier and a human-readable
recommendation suitable for display next to the upload.
"""
from __future__ import annotations

from deepscan.config import DEFAULT_SCORING, ScoringConfig
from deepscan.models import RiskLevel

_RISK_ORDER: dict[str, int] = {"low": 0, "medium": 1, "high": 2}

AUTHENTIC_RECOMMENDATION = (
    "Content appears authentic based on our analysis. Safe to proceed."
)

_RECOMMENDATIONS: dict[tuple[bool, str], str] = {
    (True, "high"): (
        "High probability of manipulation detected. "
        "Manual review strongly recommended before publishing."
    ),
    (True, "medium"): (
        "Potential signs of manipulation found. Consider additional verification."
    ),
    (True, "low"): (
        "Some suspicious patterns detected but confidence is low. "
        "Proceed with caution."
    ),
    (False, "high"):   AUTHENTIC_RECOMMENDATION,
    (False, "medium"): AUTHENTIC_RECOMMENDATION,
    (False, "low"):    AUTHENTIC_RECOMMENDATION,
}


def classify_risk(
    confidence: float, config: ScoringConfig = DEFAULT_SCORING
) -> RiskLevel:
    """``> high_risk_threshold`` → high, ``> deepfake_threshold`` → medium, else low."""
    if confidence > config.high_risk_threshold:
        return "high"
    if confidence > config.deepfake_threshold:
        return "medium"
    return "low"


def risk_order(risk_level: str) -> int:
    """Sort key for risk tiers: low < medium < high."""
    return _RISK_ORDER[risk_level]


def build_recommendation(is_deepfake: bool, risk_level: str) -> str:
    """
    Recommendation text for a (flagged, tier) pair.

    Unflagged content always gets the authentic message, whatever the tier.

    Raises:
        KeyError  Unknown risk tier.
    """
    return _RECOMMENDATIONS[(is_deepfake, risk_level)]
