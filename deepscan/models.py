"""
deepscan.models – value objects passed between the scoring stages.

Every model is immutable once created.  JSON output uses camelCase field
names (``isDeepfake``, ``riskLevel`` …) so existing front-end consumers can
read the payload unchanged; Python code uses the snake_case attributes.
"""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

RiskLevel = Literal["low", "medium", "high"]
FileType = Literal["image", "video"]


class _Model(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        protected_namespaces=(),
    )


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------

class MediaSubmission(_Model):
    """One uploaded media item as declared by the client."""

    content:      bytes = Field(repr=False)
    filename:     str
    content_type: str
    size:         int
    caption:      str = ""

    @classmethod
    def from_bytes(
        cls,
        content: bytes,
        filename: str,
        content_type: str,
        caption: str = "",
    ) -> MediaSubmission:
        return cls(
            content=content,
            filename=filename,
            content_type=content_type,
            size=len(content),
            caption=caption,
        )

    @property
    def filetype(self) -> FileType:
        return "image" if self.content_type.startswith("image/") else "video"


# ---------------------------------------------------------------------------
# Heuristic findings
# ---------------------------------------------------------------------------

class HeuristicFinding(_Model):
    """A score in [0, 100] plus the labels that produced it."""

    score: float

    @property
    def labels(self) -> tuple[str, ...]:
        return ()


class FilenameFinding(HeuristicFinding):
    suspicious: bool
    patterns:   tuple[str, ...] = ()

    @property
    def labels(self) -> tuple[str, ...]:
        return self.patterns


class MetadataFinding(HeuristicFinding):
    flags: tuple[str, ...] = ()

    @property
    def labels(self) -> tuple[str, ...]:
        return self.flags

    @property
    def suspicious(self) -> bool:
        return bool(self.flags)


# ---------------------------------------------------------------------------
# External providers
# ---------------------------------------------------------------------------

class ProviderOutcome(_Model):
    """Score from one external detector, or an explicit absence."""

    provider: str
    score:    float | None = None
    error:    str | None = None

    @property
    def succeeded(self) -> bool:
        return self.score is not None

    @classmethod
    def absent(cls, provider: str, error: str) -> ProviderOutcome:
        return cls(provider=provider, score=None, error=error)


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------

class AnalysisDetails(_Model):
    """Named sub-scores, each an integer in [0, 100]."""

    face_consistency:      int
    temporal_consistency:  int
    artifact_detection:    int
    lighting_analysis:     int
    compression_artifacts: int
    metadata_analysis:     int
    pixel_patterns:        int
    # video only
    motion_analysis:       int | None = None
    audio_visual_sync:     int | None = None

    def scores(self) -> dict[str, int]:
        """All populated sub-scores keyed by their JSON name."""
        return self.model_dump(by_alias=True, exclude_none=True)


class AnalysisResult(_Model):
    confidence:      int
    is_deepfake:     bool
    risk_level:      RiskLevel
    details:         AnalysisDetails
    processing_time: str
    model_version:   str
    recommendation:  str
    filename:        str
    filesize:        str
    filetype:        FileType
    external_apis:   dict[str, float] | None = Field(default=None, alias="externalAPIs")


class AnalysisDebug(_Model):
    filename_analysis: FilenameFinding
    metadata_analysis: MetadataFinding
    detected_patterns: tuple[str, ...]
    metadata_flags:    tuple[str, ...]
    detector:          str
    base_score:        float


class AnalysisReport(_Model):
    """What the scoring engine hands back for one submission."""

    analysis: AnalysisResult
    debug:    AnalysisDebug


# ---------------------------------------------------------------------------
# HTTP envelopes
# ---------------------------------------------------------------------------

class AnalyzeResponse(_Model):
    success:  Literal[True] = True
    analysis: AnalysisResult
    debug:    AnalysisDebug


class ErrorResponse(_Model):
    success: Literal[False] = False
    error:   str
    details: str | None = None
