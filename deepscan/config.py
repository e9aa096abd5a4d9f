"""
deepscan.config – static configuration for the scoring engine.

All thresholds, weights and term lists live in ``ScoringConfig`` and are
passed explicitly to the analyzers.  Service-level options (upload limits,
detector selection, external providers) live in ``Settings``.

Settings are read once from the environment (and an optional ``.env`` file)
by :func:`load_settings`:

    DEEPSCAN_MAX_UPLOAD_BYTES      int, default 100 MiB
    DEEPSCAN_DETECTOR              "heuristic" | "entropy"
    DEEPSCAN_MODEL_VERSION         reported model version string
    DEEPSCAN_PROVIDERS             JSON list of provider objects
    DEEPSCAN_EXPOSE_ERROR_DETAILS  "true" / "false"
    DEEPSCAN_LOG_LEVEL             logging level name
"""
from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from deepscan.errors import ConfigurationError

MAX_UPLOAD_BYTES = 100 * 1024 * 1024  # 100 MB hard cap

ALLOWED_CONTENT_TYPES: tuple[str, ...] = (
    "image/jpeg",
    "image/png",
    "image/webp",
    "image/gif",
    "video/mp4",
    "video/webm",
    "video/quicktime",
    "video/avi",
)

_ENV_FILE = Path(__file__).resolve().parent.parent / ".env"


# ---------------------------------------------------------------------------
# Scoring tables
# ---------------------------------------------------------------------------

class ScoringConfig(BaseModel):
    """Term lists, thresholds and weights used by the heuristic analyzers."""

    model_config = ConfigDict(frozen=True)

    suspicious_terms: tuple[str, ...] = (
        "fake", "deepfake", "ai_generated", "synthetic", "generated",
        "face_swap", "faceswap", "manipulated", "edited", "modified",
        "artificial", "computer_generated", "cg", "vfx", "sfx",
    )
    authentic_terms: tuple[str, ...] = (
        "real", "original", "authentic", "genuine", "unedited",
        "raw", "camera", "phone", "selfie", "photo", "live",
        "candid", "natural", "spontaneous",
    )

    # filename analyzer
    filename_baseline:            float = 50.0
    suspicious_term_increment:    float = 20.0
    authentic_term_decrement:     float = 15.0
    generated_name_penalty:       float = 10.0
    filename_suspicious_threshold: float = 60.0

    # metadata analyzer
    small_file_bytes:        int = 10_000
    small_file_penalty:      float = 15.0
    large_file_bytes:        int = 100_000_000
    large_file_penalty:      float = 5.0
    allowed_extensions: tuple[str, ...] = (
        "jpg", "jpeg", "png", "mp4", "mov", "avi", "webm",
    )
    extension_penalty:       float = 20.0
    mime_mismatch_penalty:   float = 25.0

    # synthesizer / classifier
    metadata_weight:     float = 0.3
    deepfake_threshold:  float = 50.0
    high_risk_threshold: float = 75.0


DEFAULT_SCORING = ScoringConfig()


# ---------------------------------------------------------------------------
# External providers
# ---------------------------------------------------------------------------

class ProviderConfig(BaseModel):
    """One external detector endpoint."""

    model_config = ConfigDict(frozen=True)

    name:            str
    endpoint:        str
    timeout_seconds: float = Field(default=5.0, gt=0)
    enabled:         bool = True
    api_key:         str | None = None


DEFAULT_PROVIDERS: tuple[ProviderConfig, ...] = (
    ProviderConfig(name="deepware",  endpoint="https://api.deepware.ai/v1/analyze",  enabled=False),
    ProviderConfig(name="sensity",   endpoint="https://api.sensity.ai/v2/detect",    enabled=False),
    ProviderConfig(
        name="microsoft",
        endpoint="https://api.cognitive.microsoft.com/vision/v3.2/analyze",
        enabled=False,
    ),
)


# ---------------------------------------------------------------------------
# Service settings
# ---------------------------------------------------------------------------

class Settings(BaseModel):
    """Read-only service configuration shared by every request."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    max_upload_bytes:      int = Field(default=MAX_UPLOAD_BYTES, gt=0)
    allowed_content_types: tuple[str, ...] = ALLOWED_CONTENT_TYPES
    detector:              str = "heuristic"
    model_version:         str = "v3.2.1"
    providers:             tuple[ProviderConfig, ...] = DEFAULT_PROVIDERS
    expose_error_details:  bool = True
    log_level:             str = "INFO"
    scoring:               ScoringConfig = DEFAULT_SCORING

    @property
    def enabled_providers(self) -> tuple[ProviderConfig, ...]:
        return tuple(p for p in self.providers if p.enabled)


def _parse_bool(raw: str) -> bool:
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise ConfigurationError(f"Expected a boolean value, got {raw!r}")


def _parse_providers(raw: str) -> tuple[ProviderConfig, ...]:
    try:
        items = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"DEEPSCAN_PROVIDERS is not valid JSON: {exc}") from exc
    if not isinstance(items, list):
        raise ConfigurationError("DEEPSCAN_PROVIDERS must be a JSON list")
    try:
        return tuple(ProviderConfig.model_validate(item) for item in items)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid provider entry: {exc}") from exc


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """
    Build ``Settings`` from environment variables.

    Args:
        env  Mapping to read from.  Defaults to ``os.environ`` after loading
             the project ``.env`` file (existing variables are not overridden).

    Raises:
        ConfigurationError  A variable is present but malformed.
    """
    if env is None:
        if _ENV_FILE.exists():
            load_dotenv(_ENV_FILE)
        env = os.environ

    overrides: dict[str, object] = {}

    if raw := env.get("DEEPSCAN_MAX_UPLOAD_BYTES"):
        try:
            overrides["max_upload_bytes"] = int(raw)
        except ValueError as exc:
            raise ConfigurationError(
                f"DEEPSCAN_MAX_UPLOAD_BYTES must be an integer, got {raw!r}"
            ) from exc
    if raw := env.get("DEEPSCAN_DETECTOR"):
        overrides["detector"] = raw.strip().lower()
    if raw := env.get("DEEPSCAN_MODEL_VERSION"):
        overrides["model_version"] = raw.strip()
    if raw := env.get("DEEPSCAN_PROVIDERS"):
        overrides["providers"] = _parse_providers(raw)
    if raw := env.get("DEEPSCAN_EXPOSE_ERROR_DETAILS"):
        overrides["expose_error_details"] = _parse_bool(raw)
    if raw := env.get("DEEPSCAN_LOG_LEVEL"):
        overrides["log_level"] = raw.strip().upper()

    try:
        return Settings(**overrides)
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc
