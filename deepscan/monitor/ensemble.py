"""
deepscan.monitor.ensemble – fan-out to external deepfake detectors.

Each enabled provider receives the upload concurrently.  Every call is
isolated: a timeout, transport error, bad status or malformed body turns into
an absent ``ProviderOutcome`` and never aborts the request or cancels the
sibling calls.  Ensemble scores are advisory; an empty result is valid.

Provider wire contract (the only thing assumed about a provider):
    POST <endpoint>   multipart field ``file``
    200 JSON body     {"score": 0-100} | {"confidence": 0-100}
                      | {"fake_probability": 0.0-1.0}
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Sequence
from numbers import Real

import httpx

from deepscan.config import ProviderConfig
from deepscan.errors import ProviderError
from deepscan.models import MediaSubmission, ProviderOutcome

logger = logging.getLogger(__name__)

USER_AGENT = "DeepScan/1.0"

# (key, multiplier to bring the value onto the 0-100 scale)
_SCORE_KEYS: tuple[tuple[str, float], ...] = (
    ("score", 1.0),
    ("confidence", 1.0),
    ("fake_probability", 100.0),
)


def parse_provider_score(provider: str, payload: object) -> float:
    """
    Extract a 0–100 score from a provider's decoded JSON body.

    Raises:
        ProviderError  Body is not an object, has no usable score, or the
                       score is outside [0, 100].
    """
    if not isinstance(payload, dict):
        raise ProviderError(provider, "response body is not a JSON object")

    for key, multiplier in _SCORE_KEYS:
        if key not in payload:
            continue
        value = payload[key]
        if isinstance(value, bool) or not isinstance(value, Real):
            raise ProviderError(provider, f"{key!r} is not numeric")
        score = float(value) * multiplier
        if not 0.0 <= score <= 100.0:
            raise ProviderError(provider, f"score {score} outside [0, 100]")
        return round(score, 2)

    raise ProviderError(provider, "response carries no score")


def collect_scores(outcomes: Iterable[ProviderOutcome]) -> dict[str, float]:
    """Provider → score for successful outcomes only."""
    return {
        outcome.provider: outcome.score
        for outcome in outcomes
        if outcome.score is not None
    }


class DetectorEnsemble:
    """
    Concurrent, failure-isolated client for a set of external detectors.

    Usage::

        ensemble = DetectorEnsemble(settings.enabled_providers)
        outcomes = await ensemble.run(submission)
        scores   = collect_scores(outcomes)
    """

    def __init__(
        self,
        providers: Sequence[ProviderConfig],
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.providers = tuple(p for p in providers if p.enabled)
        self._transport = transport

    # ------------------------------------------------------------------
    # Public
    # ------------------------------------------------------------------

    async def run(self, submission: MediaSubmission) -> list[ProviderOutcome]:
        """Call every provider concurrently and wait for all of them to settle."""
        if not self.providers:
            return []

        limits = httpx.Limits(
            max_keepalive_connections=len(self.providers),
            max_connections=len(self.providers),
        )
        async with httpx.AsyncClient(
            transport=self._transport, limits=limits, follow_redirects=True
        ) as client:
            outcomes = await asyncio.gather(
                *(self._call(client, provider, submission) for provider in self.providers)
            )

        succeeded = sum(1 for outcome in outcomes if outcome.succeeded)
        logger.debug(
            "Ensemble settled: %d/%d providers succeeded", succeeded, len(outcomes)
        )
        return list(outcomes)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _call(
        self,
        client: httpx.AsyncClient,
        provider: ProviderConfig,
        submission: MediaSubmission,
    ) -> ProviderOutcome:
        try:
            score = await asyncio.wait_for(
                self._request(client, provider, submission),
                timeout=provider.timeout_seconds,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            logger.warning(
                "Provider %s timed out after %.1fs",
                provider.name, provider.timeout_seconds,
            )
            return ProviderOutcome.absent(provider.name, "timeout")
        except ProviderError as exc:
            logger.warning("Provider %s returned an unusable response: %s", provider.name, exc)
            return ProviderOutcome.absent(provider.name, str(exc))
        except Exception as exc:
            logger.warning("Provider %s call failed: %s", provider.name, exc)
            return ProviderOutcome.absent(provider.name, str(exc) or type(exc).__name__)

        return ProviderOutcome(provider=provider.name, score=score)

    @staticmethod
    async def _request(
        client: httpx.AsyncClient,
        provider: ProviderConfig,
        submission: MediaSubmission,
    ) -> float:
        headers = {"User-Agent": USER_AGENT}
        if provider.api_key:
            headers["Authorization"] = f"Bearer {provider.api_key}"

        response = await client.post(
            provider.endpoint,
            headers=headers,
            files={
                "file": (
                    submission.filename,
                    submission.content,
                    submission.content_type,
                )
            },
            timeout=httpx.Timeout(provider.timeout_seconds),
        )
        if not response.is_success:
            raise ProviderError(provider.name, f"HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise ProviderError(provider.name, "response body is not JSON") from exc

        return parse_provider_score(provider.name, payload)
