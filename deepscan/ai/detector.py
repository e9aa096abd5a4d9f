"""
deepscan.ai.detector – base-score detectors.

A ``Detector`` turns a submission into a base proxy confidence in [0, 100]
which the synthesizer then blends with the heuristic findings.

The detectors shipped here are deterministic stand-ins that need no GPU or
model weights.  ``HeuristicDetector`` is the pluggable default; drop in a real
model by implementing the ``Detector`` protocol and registering it in
``DETECTORS`` (or passing an instance to ``ScoringEngine``).
"""
from __future__ import annotations

import hashlib
import math
from collections import Counter
from typing import Callable, Protocol, runtime_checkable

from deepscan.errors import ConfigurationError
from deepscan.models import MediaSubmission

# Base scores land in this band, matching the range the original random
# proxy drew from.
BASE_SCORE_FLOOR = 30.0
BASE_SCORE_SPAN = 40.0

ENTROPY_SAMPLE_BYTES = 8192


def declared_digest(submission: MediaSubmission) -> bytes:
    """SHA-256 over the declared inputs only (name, MIME type, size)."""
    key = f"{submission.filename}|{submission.content_type}|{submission.size}"
    return hashlib.sha256(key.encode("utf-8")).digest()


def _unit_interval(digest: bytes) -> float:
    """Map the first 8 digest bytes to [0, 1)."""
    pseudo_seed = int.from_bytes(digest[:8], byteorder="big")
    return (pseudo_seed % 1000) / 1000.0


# ---------------------------------------------------------------------------
# Capability
# ---------------------------------------------------------------------------

@runtime_checkable
class Detector(Protocol):
    """Anything that can produce a base manipulation score for a submission."""

    name: str

    def score(self, submission: MediaSubmission) -> float:
        ...


# ---------------------------------------------------------------------------
# Implementations
# ---------------------------------------------------------------------------

class HeuristicDetector:
    """
    Default detector: a pseudo-deterministic score from declared inputs.

    Identical (filename, MIME type, size) triples always yield the same score,
    so results are reproducible and explainable.  This is a placeholder for
    real model inference, not a detection method in its own right.
    """

    name = "heuristic"

    def score(self, submission: MediaSubmission) -> float:
        base = _unit_interval(declared_digest(submission))
        return round(BASE_SCORE_FLOOR + BASE_SCORE_SPAN * base, 4)


class EntropyDetector:
    """
    Blends a content-seeded pseudo score with byte entropy.

    High-entropy payloads (heavily compressed or generated textures) nudge the
    score up.  Deterministic for identical content and file name.
    """

    name = "entropy"

    def score(self, submission: MediaSubmission) -> float:
        digest = hashlib.sha256(
            submission.content[:2048] + submission.filename.encode("utf-8")
        ).digest()
        base = _unit_interval(digest)

        entropy = self._byte_entropy(submission.content[:ENTROPY_SAMPLE_BYTES])
        entropy_signal = max(0.0, min(1.0, (entropy - 5.0) / 3.0))

        blended = 0.65 * base + 0.35 * entropy_signal
        return round(BASE_SCORE_FLOOR + BASE_SCORE_SPAN * blended, 4)

    @staticmethod
    def _byte_entropy(data: bytes) -> float:
        """Shannon entropy of a byte sequence (0–8 bits/symbol scale)."""
        if not data:
            return 0.0
        total = len(data)
        return -sum(
            (count / total) * math.log2(count / total)
            for count in Counter(data).values()
        )


DETECTORS: dict[str, Callable[[], Detector]] = {
    HeuristicDetector.name: HeuristicDetector,
    EntropyDetector.name:   EntropyDetector,
}


def build_detector(name: str) -> Detector:
    """
    Instantiate the detector registered under *name*.

    Raises:
        ConfigurationError  No detector with that name.
    """
    try:
        factory = DETECTORS[name]
    except KeyError as exc:
        known = ", ".join(sorted(DETECTORS))
        raise ConfigurationError(
            f"Unknown detector {name!r} (expected one of: {known})"
        ) from exc
    return factory()
