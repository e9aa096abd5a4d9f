"""deepscan.ai – base-score detectors and signal synthesis."""
from .detector import (
    DETECTORS,
    Detector,
    EntropyDetector,
    HeuristicDetector,
    build_detector,
    declared_digest,
)
from .synthesizer import clamp_score, is_deepfake, synthesize_confidence

__all__ = [
    "DETECTORS",
    "Detector",
    "EntropyDetector",
    "HeuristicDetector",
    "build_detector",
    "clamp_score",
    "declared_digest",
    "is_deepfake",
    "synthesize_confidence",
]
