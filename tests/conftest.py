"""
Pytest configuration and shared fixtures for the DeepScan test-suite.
"""
import pytest
from fastapi.testclient import TestClient

from deepscan.config import Settings
from deepscan.engine import ScoringEngine
from deepscan.main import create_app
from deepscan.models import MediaSubmission


def make_submission(
    filename="clip.jpg",
    content_type="image/jpeg",
    size=50_000,
    caption="",
    content=None,
):
    """Build a submission with filler bytes of the requested size."""
    if content is None:
        content = bytes(i % 251 for i in range(size))
    return MediaSubmission.from_bytes(
        content=content,
        filename=filename,
        content_type=content_type,
        caption=caption,
    )


class FixedClock:
    """Clock that always reports the same instant."""

    def __call__(self):
        return 100.0


class FailingDetector:
    name = "failing"

    def score(self, submission):
        raise RuntimeError("detector exploded")


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def engine(settings):
    return ScoringEngine(settings, clock=FixedClock())


@pytest.fixture
def client(settings, engine):
    """Test client around an app with no external providers enabled."""
    return TestClient(create_app(settings=settings, engine=engine))


@pytest.fixture
def submission_factory():
    return make_submission
