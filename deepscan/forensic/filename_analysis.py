"""
deepscan.forensic.filename_analysis – lexical suspicion score for a file name.

Authors and generation tools tend to leave tell-tale words in file names
("deepfake", "face_swap") while camera exports carry others ("photo",
"selfie").  Hash-like or bare-timestamp names are typical of
machine-generated artifacts and earn a small extra penalty.
"""
from __future__ import annotations

import re

from deepscan.config import DEFAULT_SCORING, ScoringConfig
from deepscan.models import FilenameFinding

_HASH_NAME_RE = re.compile(r"^[a-f0-9]{8,}$", re.IGNORECASE)
_TIMESTAMP_NAME_RE = re.compile(r"^\d{10,}$")
_EXTENSION_RE = re.compile(r"\.[^/.]+$")


def looks_generated(filename: str) -> bool:
    """True when the name (without extension) is hash-like or timestamp-like."""
    stem = _EXTENSION_RE.sub("", filename)
    return bool(_HASH_NAME_RE.match(stem) or _TIMESTAMP_NAME_RE.match(stem))


def analyze_filename(
    filename: str,
    caption: str = "",
    config: ScoringConfig = DEFAULT_SCORING,
) -> FilenameFinding:
    """
    Score a file name and optional caption for manipulation hints.

    Args:
        filename  Declared upload file name.
        caption   Free-text caption supplied with the upload.
        config    Term lists and weights.

    Returns:
        FilenameFinding with the clamped score, the suspicious flag and the
        matched patterns (suspicious terms first, then authentic ones).
    """
    haystacks = (filename.lower(), caption.lower())

    found_suspicious = [
        term for term in config.suspicious_terms
        if any(term in text for text in haystacks)
    ]
    found_authentic = [
        term for term in config.authentic_terms
        if any(term in text for text in haystacks)
    ]

    score = config.filename_baseline
    score += len(found_suspicious) * config.suspicious_term_increment
    score -= len(found_authentic) * config.authentic_term_decrement

    if looks_generated(filename):
        score += config.generated_name_penalty

    score = max(0.0, min(100.0, score))

    return FilenameFinding(
        score=score,
        suspicious=score > config.filename_suspicious_threshold,
        patterns=tuple(found_suspicious + found_authentic),
    )
