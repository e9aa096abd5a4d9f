"""
deepscan.ai.synthesizer – blend base, filename and metadata signals.

    confidence = (base + filename_score) / 2 + metadata_score * metadata_weight

clamped to [0, 100].  Metadata is weighted down: it corroborates the other
signals rather than leading them.
"""
from __future__ import annotations

from deepscan.config import DEFAULT_SCORING, ScoringConfig


def clamp_score(value: float) -> float:
    return max(0.0, min(100.0, value))


def synthesize_confidence(
    base: float,
    filename_score: float,
    metadata_score: float,
    config: ScoringConfig = DEFAULT_SCORING,
) -> float:
    confidence = (base + filename_score) / 2
    confidence += metadata_score * config.metadata_weight
    return clamp_score(confidence)


def is_deepfake(confidence: float, config: ScoringConfig = DEFAULT_SCORING) -> bool:
    """Strictly above the threshold; exactly 50 is not flagged."""
    return confidence > config.deepfake_threshold
