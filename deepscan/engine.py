"""
deepscan.engine – end-to-end scoring for one media submission.

Pipeline:
    1. Validate size / MIME type (fail fast, nothing else runs on rejection)
    2. Filename and metadata heuristics
    3. Detector base score
    4. Synthesize confidence
    5. External ensemble fan-out (awaited in full, failures become absences)
    6. Risk tier + recommendation
    7. Sub-score breakdown, timing, result assembly
"""
from __future__ import annotations

import logging
import math
import time
from typing import Callable

from deepscan.ai.detector import Detector, build_detector, declared_digest
from deepscan.ai.synthesizer import clamp_score, is_deepfake, synthesize_confidence
from deepscan.config import Settings
from deepscan.errors import AnalysisError, MediaValidationError
from deepscan.forensic.explainability import build_recommendation, classify_risk
from deepscan.forensic.filename_analysis import analyze_filename
from deepscan.forensic.metadata_analysis import analyze_metadata
from deepscan.models import (
    AnalysisDebug,
    AnalysisDetails,
    AnalysisReport,
    AnalysisResult,
    FileType,
    MediaSubmission,
)
from deepscan.monitor.ensemble import DetectorEnsemble, collect_scores

logger = logging.getLogger(__name__)


def validate_submission(
    submission: MediaSubmission | None, settings: Settings
) -> MediaSubmission:
    """
    Reject missing, empty, oversized or unsupported uploads.

    Raises:
        MediaValidationError  With the message returned to the caller.
    """
    if submission is None or submission.size <= 0:
        raise MediaValidationError("No file provided")
    if submission.size > settings.max_upload_bytes:
        raise MediaValidationError("File size too large")
    if submission.content_type not in settings.allowed_content_types:
        raise MediaValidationError("Unsupported file type")
    return submission


def _to_score(value: float) -> int:
    """Clamp, then round halves up (50.5 -> 51)."""
    return int(math.floor(clamp_score(value) + 0.5))


def build_details(
    confidence: float,
    metadata_score: float,
    filetype: FileType,
    jitter: bytes,
) -> AnalysisDetails:
    """
    Derive the per-signal breakdown from the final confidence.

    *jitter* supplies one byte per sub-score; each byte becomes a fixed
    offset in [0, 1) so the breakdown varies between files but never between
    two runs over the same file.
    """
    j = [byte / 256.0 for byte in jitter]
    c = confidence
    is_video = filetype == "video"

    return AnalysisDetails(
        face_consistency=_to_score(100 - c + j[0] * 20),
        temporal_consistency=_to_score(100 - c + j[1] * (20 if is_video else 15)),
        artifact_detection=_to_score(c + j[2] * 15),
        lighting_analysis=_to_score(90 - c * 0.5 + j[3] * 20),
        compression_artifacts=_to_score(c * 0.8 + j[4] * 20),
        metadata_analysis=_to_score(metadata_score),
        pixel_patterns=_to_score(c * 0.9 + j[5] * 10),
        motion_analysis=_to_score(100 - c + j[6] * 15) if is_video else None,
        audio_visual_sync=_to_score(95 - c * 0.3 + j[7] * 10) if is_video else None,
    )


def format_filesize(size: int) -> str:
    return f"{size / 1024 / 1024:.2f} MB"


class ScoringEngine:
    """
    Stateless scorer; one instance can serve concurrent requests.

    Args:
        settings  Service configuration.
        detector  Base-score detector; defaults to ``settings.detector``.
        ensemble  External provider ensemble; defaults to the enabled
                  providers in *settings*.
        clock     Monotonic clock used for ``processingTime``.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        detector: Detector | None = None,
        ensemble: DetectorEnsemble | None = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.settings = settings or Settings()
        self.detector = detector or build_detector(self.settings.detector)
        self.ensemble = ensemble or DetectorEnsemble(self.settings.enabled_providers)
        self._clock = clock

    async def analyze(self, submission: MediaSubmission | None) -> AnalysisReport:
        """
        Score one submission.

        Raises:
            MediaValidationError  Upload rejected before analysis.
            AnalysisError         Unexpected failure while scoring.
        """
        start = self._clock()
        submission = validate_submission(submission, self.settings)
        logger.info(
            "Analysing %s (%s, %d bytes)",
            submission.filename, submission.content_type, submission.size,
        )

        try:
            return await self._score(submission, start)
        except Exception as exc:
            raise AnalysisError(str(exc) or type(exc).__name__) from exc

    async def _score(self, submission: MediaSubmission, start: float) -> AnalysisReport:
        scoring = self.settings.scoring

        filename_finding = analyze_filename(
            submission.filename, submission.caption, scoring
        )
        metadata_finding = analyze_metadata(
            submission.size, submission.filename, submission.content_type, scoring
        )

        base_score = self.detector.score(submission)
        raw_confidence = synthesize_confidence(
            base_score, filename_finding.score, metadata_finding.score, scoring
        )

        outcomes = await self.ensemble.run(submission)
        external_scores = collect_scores(outcomes)

        confidence = _to_score(raw_confidence)
        flagged = is_deepfake(confidence, scoring)
        risk_level = classify_risk(confidence, scoring)

        details = build_details(
            raw_confidence,
            metadata_finding.score,
            submission.filetype,
            declared_digest(submission)[8:16],
        )

        elapsed = self._clock() - start
        analysis = AnalysisResult(
            confidence=confidence,
            is_deepfake=flagged,
            risk_level=risk_level,
            details=details,
            processing_time=f"{elapsed:.1f}s",
            model_version=self.settings.model_version,
            recommendation=build_recommendation(flagged, risk_level),
            filename=submission.filename,
            filesize=format_filesize(submission.size),
            filetype=submission.filetype,
            external_apis=external_scores or None,
        )
        debug = AnalysisDebug(
            filename_analysis=filename_finding,
            metadata_analysis=metadata_finding,
            detected_patterns=filename_finding.patterns,
            metadata_flags=metadata_finding.flags,
            detector=self.detector.name,
            base_score=base_score,
        )

        logger.info(
            "Analysis of %s finished: confidence=%d risk=%s providers=%d/%d in %s",
            submission.filename, confidence, risk_level,
            len(external_scores), len(outcomes), analysis.processing_time,
        )
        return AnalysisReport(analysis=analysis, debug=debug)
