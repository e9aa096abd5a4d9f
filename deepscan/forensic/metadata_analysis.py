"""
deepscan.forensic.metadata_analysis – suspicion score from declared file metadata.

Each rule is independent and additive; every rule that fires appends a flag
so callers can see why the score moved.
"""
from __future__ import annotations

from deepscan.config import DEFAULT_SCORING, ScoringConfig
from deepscan.models import MetadataFinding


def _extension_of(filename: str) -> str | None:
    if "." not in filename:
        return None
    return filename.rsplit(".", 1)[1].lower() or None


def analyze_metadata(
    size: int,
    filename: str,
    content_type: str | None,
    config: ScoringConfig = DEFAULT_SCORING,
) -> MetadataFinding:
    """
    Score size, extension and MIME type.

    Args:
        size          Declared byte length.
        filename      Declared file name (extension source).
        content_type  Declared MIME type; empty or None skips the MIME rule.
        config        Thresholds and penalties.
    """
    flags: list[str] = []
    score = 0.0

    if size < config.small_file_bytes:
        flags.append("unusually_small_file")
        score += config.small_file_penalty
    elif size > config.large_file_bytes:
        flags.append("unusually_large_file")
        score += config.large_file_penalty

    extension = _extension_of(filename)
    if not extension or extension not in config.allowed_extensions:
        flags.append("suspicious_extension")
        score += config.extension_penalty

    if content_type and not content_type.startswith(("image/", "video/")):
        flags.append("mime_type_mismatch")
        score += config.mime_mismatch_penalty

    return MetadataFinding(score=max(0.0, score), flags=tuple(flags))
