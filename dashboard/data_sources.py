"""Data sources for the dashboard view.

The view depends on DataSource, not on a concrete backend, so the live
client and the demonstration dataset are interchangeable. The caller picks
which one is primary and which (if any) is the fallback.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Optional

from fetchers.reviews_api import ReviewsAPI
from models.data_models import DashboardStats, Review


class DataSource(ABC):
    """Where the dashboard's stats and recent reviews come from."""

    @abstractmethod
    async def get_stats(self) -> DashboardStats:
        """Return aggregate dashboard statistics."""

    @abstractmethod
    async def get_recent(self) -> list[Review]:
        """Return recent reviews in display order."""

    def close(self) -> None:
        """Release any resources held by the source.

        Default is a no-op so callers can always call close() safely.
        """


class LiveDataSource(DataSource):
    """Reads from the reviews backend through ReviewsAPI."""

    def __init__(self, api: ReviewsAPI):
        self.api = api

    async def get_stats(self) -> DashboardStats:
        return await self.api.get_stats()

    async def get_recent(self) -> list[Review]:
        return await self.api.get_recent()

    def close(self) -> None:
        self.api.close()


DEMO_STATS = {
    "totalReviews": 247,
    "activePRs": 12,
    "avgQualityScore": 8.4,
    "issuesFound": 89,
}

# (id, prNumber, title, repositoryName, status, qualityScore, age)
DEMO_REVIEWS = [
    (1, 42, "Fix authentication bug in login flow", "backend", "COMPLETED", 8.5, timedelta(hours=2)),
    (2, 38, "Add user profile management feature", "frontend", "COMPLETED", 9.2, timedelta(hours=5)),
    (3, 35, "Optimize database queries for analytics", "backend", "COMPLETED", 7.8, timedelta(days=1)),
    (4, 31, "Implement real-time notifications", "backend", "PENDING", None, timedelta(days=2)),
    (5, 28, "Update dependencies and fix vulnerabilities", "backend", "COMPLETED", 9.5, timedelta(days=3)),
]
DEMO_OWNER = "codesage"


class FallbackDataSource(DataSource):
    """Fixed demonstration dataset shown when the backend is unreachable.

    Review timestamps are relative to the moment of each fetch, so the
    table always reads "2 hours ago", "5 hours ago", ... regardless of
    when the dashboard was started.
    """

    def __init__(self, clock=None):
        """
        Args:
            clock: Callable returning the current aware datetime (default: UTC now)
        """
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def get_stats(self) -> DashboardStats:
        return DashboardStats.model_validate(DEMO_STATS)

    async def get_recent(self) -> list[Review]:
        now = self._clock()
        return [
            Review(
                id=review_id,
                pr_number=pr_number,
                pr_title=title,
                repository_owner=DEMO_OWNER,
                repository_name=repo_name,
                status=status,
                quality_score=score,
                created_at=now - age,
                pr_url=f"https://github.com/{DEMO_OWNER}/{repo_name}/pull/{pr_number}",
            )
            for review_id, pr_number, title, repo_name, status, score, age in DEMO_REVIEWS
        ]


def build_data_sources(api: ReviewsAPI, demo_fallback: bool = True) -> tuple[DataSource, Optional[DataSource]]:
    """Return (primary, fallback) sources for a dashboard backed by ``api``."""
    fallback = FallbackDataSource() if demo_fallback else None
    return LiveDataSource(api), fallback
