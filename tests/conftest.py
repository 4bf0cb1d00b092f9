"""Shared pytest fixtures and configuration."""

import asyncio
import json

import pytest
import requests

from dashboard.data_sources import DataSource
from models.data_models import DashboardStats, Review


@pytest.fixture
def test_env(monkeypatch):
    """
    Set up valid dashboard environment variables.

    This fixture sets environment variables so config can be loaded during
    tests without depending on a local .env file.
    """
    monkeypatch.setenv("REVIEWS_API_URL", "https://reviews.example.com/api/")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("DASHBOARD_DEMO_FALLBACK", "false")

    return {
        "api_base_url": "https://reviews.example.com/api",
        "log_level": "DEBUG",
        "demo_fallback": False,
    }


@pytest.fixture
def empty_env(monkeypatch):
    """Remove all dashboard variables so defaults apply."""
    for name in ("REVIEWS_API_URL", "LOG_LEVEL", "DASHBOARD_DEMO_FALLBACK"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def invalid_env(monkeypatch):
    """
    Set up invalid environment variables for testing validation.
    """
    monkeypatch.setenv("REVIEWS_API_URL", "ftp://reviews.example.com")
    monkeypatch.setenv("LOG_LEVEL", "LOUD")


@pytest.fixture
def make_response():
    """Factory for real requests.Response objects (so raise_for_status works)."""
    def _make(status_code=200, json_body=None, text="", url="http://backend.test/api/reviews"):
        response = requests.Response()
        response.status_code = status_code
        response.url = url
        response.encoding = "utf-8"
        if json_body is not None:
            response._content = json.dumps(json_body).encode("utf-8")
        else:
            response._content = text.encode("utf-8")
        return response
    return _make


@pytest.fixture
def sample_stats_payload():
    return {"totalReviews": 247, "activePRs": 12, "avgQualityScore": 8.4, "issuesFound": 89}


@pytest.fixture
def sample_reviews_payload():
    """Five backend reviews in camelCase, newest first."""
    return [
        {
            "id": 100 + n,
            "prNumber": n,
            "prTitle": f"Change number {n}",
            "repositoryOwner": "acme",
            "repositoryName": "widgets",
            "status": status,
            "qualityScore": score,
            "createdAt": "2025-01-15T10:30:00Z",
            "prUrl": f"https://github.com/acme/widgets/pull/{n}",
        }
        for n, status, score in [
            (7, "COMPLETED", 9.1),
            (6, "COMPLETED", 7.2),
            (5, "PENDING", None),
            (4, "FAILED", None),
            (3, "COMPLETED", 5.5),
        ]
    ]


class StubDataSource(DataSource):
    """
    In-memory DataSource driven by a script of cycles.

    Each script entry is (stats, reviews, delay_seconds, error). The n-th
    get_stats() and n-th get_recent() call both use entry n (the last entry
    repeats once the script runs out).
    """

    def __init__(self, script):
        self.script = list(script)
        self.stats_calls = 0
        self.recent_calls = 0
        self.closed = False

    def _entry(self, index):
        return self.script[min(index, len(self.script) - 1)]

    async def get_stats(self):
        stats, _, delay, error = self._entry(self.stats_calls)
        self.stats_calls += 1
        await asyncio.sleep(delay)
        if error is not None:
            raise error
        return stats

    async def get_recent(self):
        _, reviews, delay, _ = self._entry(self.recent_calls)
        self.recent_calls += 1
        await asyncio.sleep(delay)
        return reviews

    def close(self):
        self.closed = True


class BlockingDataSource(DataSource):
    """DataSource whose calls never complete (until cancelled)."""

    async def get_stats(self):
        await asyncio.Event().wait()

    async def get_recent(self):
        await asyncio.Event().wait()


@pytest.fixture
def sample_stats(sample_stats_payload):
    return DashboardStats.model_validate(sample_stats_payload)


@pytest.fixture
def sample_reviews(sample_reviews_payload):
    return [Review.model_validate(item) for item in sample_reviews_payload]


@pytest.fixture
def stub_source_factory():
    """Build StubDataSource instances from (stats, reviews, delay, error) tuples."""
    return StubDataSource


@pytest.fixture
def blocking_source():
    return BlockingDataSource()
