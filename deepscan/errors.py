"""
deepscan.errors – error taxonomy for the scoring service.

    MediaValidationError  rejected upload, surfaced to the caller (HTTP 400)
    ProviderError         external detector failure, always recovered locally
    AnalysisError         unexpected failure during scoring (HTTP 500)
    ConfigurationError    invalid settings, raised at start-up
"""
from __future__ import annotations


class DeepScanError(Exception):
    """Base class for all DeepScan errors."""


class MediaValidationError(DeepScanError):
    """The submission failed size / type validation; analysis never started."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ProviderError(DeepScanError):
    """An external detector returned an unusable response."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class AnalysisError(DeepScanError):
    """Unexpected failure while synthesising or assembling a result."""

    status_code = 500


class ConfigurationError(DeepScanError):
    """Settings could not be loaded or are inconsistent."""
