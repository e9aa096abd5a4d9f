"""
Tests for the external detector ensemble.

Provider endpoints are served by ``httpx.MockTransport`` so no network access
is needed.
"""
import asyncio
import time

import httpx
import pytest

from deepscan.config import ProviderConfig
from deepscan.errors import ProviderError
from deepscan.models import ProviderOutcome
from deepscan.monitor.ensemble import (
    DetectorEnsemble,
    collect_scores,
    parse_provider_score,
)

from conftest import make_submission


def provider(name, timeout=1.0, enabled=True, api_key=None):
    return ProviderConfig(
        name=name,
        endpoint=f"https://{name}.example.test/analyze",
        timeout_seconds=timeout,
        enabled=enabled,
        api_key=api_key,
    )


def routed(responses):
    """Mock transport dispatching on the provider host name."""

    async def handler(request):
        name = request.url.host.split(".")[0]
        result = responses[name]
        if callable(result):
            return await result(request)
        if isinstance(result, Exception):
            raise result
        return result

    return httpx.MockTransport(handler)


def run(ensemble, submission=None):
    return asyncio.run(ensemble.run(submission or make_submission()))


class TestParseProviderScore:

    def test_score_key(self):
        assert parse_provider_score("p", {"score": 42}) == 42

    def test_confidence_key(self):
        assert parse_provider_score("p", {"confidence": 12.5}) == 12.5

    def test_fake_probability_is_rescaled(self):
        assert parse_provider_score("p", {"fake_probability": 0.73}) == 73

    @pytest.mark.parametrize(
        "payload",
        [
            [1, 2, 3],
            {"verdict": "fake"},
            {"score": "high"},
            {"score": True},
            {"score": 140},
            {"score": -1},
            {"fake_probability": 1.5},
        ],
    )
    def test_malformed(self, payload):
        with pytest.raises(ProviderError):
            parse_provider_score("p", payload)


class TestDetectorEnsemble:

    def test_no_providers(self):
        assert run(DetectorEnsemble([])) == []

    def test_disabled_providers_are_skipped(self):
        calls = []

        async def record(request):
            calls.append(request.url.host)
            return httpx.Response(200, json={"score": 10})

        ensemble = DetectorEnsemble(
            [provider("alpha"), provider("beta", enabled=False)],
            transport=routed({"alpha": record, "beta": record}),
        )
        outcomes = run(ensemble)

        assert [o.provider for o in outcomes] == ["alpha"]
        assert calls == ["alpha.example.test"]

    def test_all_succeed(self):
        ensemble = DetectorEnsemble(
            [provider("alpha"), provider("beta")],
            transport=routed({
                "alpha": httpx.Response(200, json={"score": 81}),
                "beta":  httpx.Response(200, json={"fake_probability": 0.2}),
            }),
        )
        outcomes = run(ensemble)

        assert collect_scores(outcomes) == {"alpha": 81, "beta": 20}
        assert all(o.succeeded for o in outcomes)

    def test_failures_are_isolated(self):
        ensemble = DetectorEnsemble(
            [provider("alpha"), provider("beta"), provider("gamma"), provider("delta")],
            transport=routed({
                "alpha": httpx.Response(200, json={"score": 64}),
                "beta":  httpx.Response(503),
                "gamma": httpx.Response(200, content=b"<html>oops</html>"),
                "delta": httpx.ConnectError("connection refused"),
            }),
        )
        outcomes = run(ensemble)

        assert collect_scores(outcomes) == {"alpha": 64}
        failed = {o.provider: o.error for o in outcomes if not o.succeeded}
        assert set(failed) == {"beta", "gamma", "delta"}
        assert "503" in failed["beta"]

    def test_timeout_becomes_absence(self):
        async def slow(request):
            await asyncio.sleep(2)
            return httpx.Response(200, json={"score": 99})

        async def fast(request):
            return httpx.Response(200, json={"score": 30})

        ensemble = DetectorEnsemble(
            [provider("slow", timeout=0.05), provider("fast")],
            transport=routed({"slow": slow, "fast": fast}),
        )
        outcomes = run(ensemble)

        assert collect_scores(outcomes) == {"fast": 30}
        assert ProviderOutcome.absent("slow", "timeout") in outcomes

    def test_providers_are_called_concurrently(self):
        async def slow(request):
            await asyncio.sleep(0.3)
            return httpx.Response(200, json={"score": 40})

        ensemble = DetectorEnsemble(
            [provider("alpha"), provider("beta"), provider("gamma")],
            transport=routed({"alpha": slow, "beta": slow, "gamma": slow}),
        )
        started = time.perf_counter()
        outcomes = run(ensemble)
        elapsed = time.perf_counter() - started

        assert collect_scores(outcomes) == {"alpha": 40, "beta": 40, "gamma": 40}
        # three sequential calls would need at least 0.9s
        assert elapsed < 0.75

    def test_timed_out_sibling_does_not_cancel_running_calls(self):
        async def stuck(request):
            await asyncio.sleep(5)
            return httpx.Response(200, json={"score": 99})

        async def steady(request):
            # still in flight when the stuck provider times out
            await asyncio.sleep(0.3)
            return httpx.Response(200, json={"score": 55})

        ensemble = DetectorEnsemble(
            [provider("stuck", timeout=0.1), provider("alpha"), provider("beta")],
            transport=routed({"stuck": stuck, "alpha": steady, "beta": steady}),
        )
        started = time.perf_counter()
        outcomes = run(ensemble)
        elapsed = time.perf_counter() - started

        assert collect_scores(outcomes) == {"alpha": 55, "beta": 55}
        assert ProviderOutcome.absent("stuck", "timeout") in outcomes
        assert elapsed < 1.0

    def test_everything_fails(self):
        ensemble = DetectorEnsemble(
            [provider("alpha"), provider("beta")],
            transport=routed({
                "alpha": httpx.Response(500),
                "beta":  httpx.ReadTimeout("read timed out"),
            }),
        )
        outcomes = run(ensemble)

        assert len(outcomes) == 2
        assert collect_scores(outcomes) == {}

    def test_request_carries_upload_and_key(self):
        seen = {}

        async def inspect(request):
            seen["auth"] = request.headers.get("authorization")
            seen["body"] = request.content
            return httpx.Response(200, json={"score": 1})

        ensemble = DetectorEnsemble(
            [provider("alpha", api_key="secret")],
            transport=routed({"alpha": inspect}),
        )
        run(ensemble, make_submission("clip.jpg", content=b"JPEGDATA" * 2000))

        assert seen["auth"] == "Bearer secret"
        assert b'name="file"; filename="clip.jpg"' in seen["body"]
        assert b"JPEGDATA" in seen["body"]


class TestCollectScores:

    def test_only_successes(self):
        outcomes = [
            ProviderOutcome(provider="a", score=10.0),
            ProviderOutcome.absent("b", "timeout"),
            ProviderOutcome(provider="c", score=0.0),
        ]

        assert collect_scores(outcomes) == {"a": 10.0, "c": 0.0}
