"""
Dashboard view: state, refresh cycle and render model.

The view holds the only copy of the dashboard state. Each refresh fetches
stats and recent reviews concurrently from the primary data source and
replaces both snapshots together. When the primary source fails and a
fallback source is configured, the fallback's snapshot is shown instead and
no error is surfaced; without a fallback the error is kept and the previous
snapshot stays on screen.

Refresh cycles may overlap (manual refresh while the timer fires). Each
cycle takes a sequence number and a snapshot is only applied if it is newer
than the one already shown.
"""

import asyncio
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from dashboard.data_sources import DataSource
from dashboard.polling import IntervalSubscription
from models.data_models import DashboardStats, Review, SystemStatus
from utils.formatting import (
    format_score,
    format_time_ago,
    get_score_color,
    get_status_badge,
    quality_trend_label,
)

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_INTERVAL_SECONDS = 30.0


class ViewState(str, Enum):
    """What the dashboard is currently able to show."""
    LOADING = "loading"
    READY = "ready"
    ERROR_WITH_STALE_DATA = "error_with_stale_data"


def _error_message(error: BaseException) -> str:
    return getattr(error, "message", None) or str(error) or error.__class__.__name__


class DashboardView:
    """Stateful dashboard view with a lifecycle-scoped polling timer."""

    def __init__(
        self,
        source: DataSource,
        fallback: Optional[DataSource] = None,
        refresh_interval_seconds: float = DEFAULT_REFRESH_INTERVAL_SECONDS,
        system_status: Optional[SystemStatus] = None
    ):
        """
        Args:
            source: Primary data source (normally the live backend)
            fallback: Source used when the primary fails; None surfaces the error
            refresh_interval_seconds: Polling interval while active
            system_status: Static service descriptors for the status panel
        """
        self.source = source
        self.fallback = fallback
        self.refresh_interval_seconds = refresh_interval_seconds
        self.system_status = system_status or SystemStatus()

        self.stats = DashboardStats()
        self.recent_reviews: list[Review] = []
        self.loading = True
        self.error: Optional[str] = None
        self.using_fallback = False
        self.last_updated: Optional[datetime] = None

        self._issued_seq = 0
        self._applied_seq = 0
        self._in_flight = 0
        self._subscription: Optional[IntervalSubscription] = None

    @property
    def state(self) -> ViewState:
        if self.loading and not self.recent_reviews:
            return ViewState.LOADING
        if self.error:
            return ViewState.ERROR_WITH_STALE_DATA
        return ViewState.READY

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def active(self) -> bool:
        return self._subscription is not None and self._subscription.active

    def activate(self) -> None:
        """Start polling: refresh now, then every refresh_interval_seconds."""
        if self.active:
            return
        self._subscription = IntervalSubscription(self.refresh, self.refresh_interval_seconds)
        self._subscription.start()
        logger.info(f"Dashboard polling every {self.refresh_interval_seconds:g}s")

    async def deactivate(self) -> None:
        """Stop polling. In-flight requests are left to finish on their own."""
        subscription, self._subscription = self._subscription, None
        if subscription is not None:
            await subscription.stop()
            logger.info("Dashboard polling stopped")

    async def __aenter__(self) -> "DashboardView":
        self.activate()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.deactivate()

    # ------------------------------------------------------------------
    # Refresh cycle
    # ------------------------------------------------------------------

    async def _fetch(self, source: DataSource) -> tuple[DashboardStats, list[Review]]:
        """Fetch stats and recent reviews concurrently; fail if either fails."""
        results = await asyncio.gather(
            source.get_stats(),
            source.get_recent(),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result
        stats, reviews = results
        return stats, list(reviews or [])

    async def refresh(self) -> bool:
        """
        Run one fetch cycle and update the view state.

        The error flag is left alone while the cycle is in flight, so a
        banner over stale data does not flicker during background refreshes;
        it is cleared only when a snapshot is applied.

        Returns:
            True if this cycle's snapshot is now displayed, False if it
            failed without a fallback or was superseded by a newer cycle
        """
        self._issued_seq += 1
        seq = self._issued_seq
        self._in_flight += 1
        self.loading = True

        try:
            try:
                stats, reviews = await self._fetch(self.source)
                from_fallback = False
            except Exception as e:
                logger.error(f"Failed to fetch dashboard data: {e}")
                if self.fallback is None:
                    if seq > self._applied_seq:
                        self.error = _error_message(e)
                    return False
                logger.warning("Using fallback data for demonstration")
                stats, reviews = await self._fetch(self.fallback)
                from_fallback = True

            return self._apply(seq, stats, reviews, from_fallback)
        finally:
            self._in_flight -= 1
            self.loading = self._in_flight > 0

    def _apply(self, seq: int, stats: DashboardStats, reviews: list[Review], from_fallback: bool) -> bool:
        if seq <= self._applied_seq:
            logger.debug(f"Discarding stale snapshot #{seq} (showing #{self._applied_seq})")
            return False

        self._applied_seq = seq
        self.stats = stats
        self.recent_reviews = reviews
        self.error = None
        self.using_fallback = from_fallback
        self.last_updated = datetime.now(timezone.utc)

        source = "fallback" if from_fallback else "live"
        logger.info(f"Dashboard updated from {source} data: {len(reviews)} recent reviews")
        return True

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self, now: Optional[datetime] = None) -> dict[str, Any]:
        """
        Build the view model for templates and the JSON endpoint.

        Relative times are computed against ``now`` (default: the wall
        clock at call time), never against the fetch time.
        """
        now = now or datetime.now(timezone.utc)
        stats = self.stats
        avg_score = f"{stats.avg_quality_score:.1f}"

        return {
            "state": self.state.value,
            "loading": self.loading,
            "error": self.error,
            "using_fallback": self.using_fallback,
            "last_updated": self.last_updated.isoformat() if self.last_updated else None,
            "last_updated_label": format_time_ago(self.last_updated, now) if self.last_updated else None,
            "status_indicator": (
                {"css": "error", "label": "Connection Error"} if self.error
                else {"css": "success", "label": "System Online"}
            ),
            "hero": {
                "total_reviews": stats.total_reviews,
                "active_prs": stats.active_prs,
                "avg_quality_score": avg_score,
            },
            "stat_cards": [
                {
                    "value": str(stats.total_reviews),
                    "label": "Pull Requests Analyzed",
                    "icon": "📊",
                    "note": "Updating..." if self.loading else "Live data",
                    "positive": True,
                },
                {
                    "value": avg_score,
                    "label": "Average Code Quality",
                    "icon": "⭐",
                    "note": quality_trend_label(stats.avg_quality_score),
                    "positive": True,
                },
                {
                    "value": str(stats.issues_found),
                    "label": "Issues Detected",
                    "icon": "🐛",
                    "note": "Total across all reviews",
                    "positive": False,
                },
                {
                    "value": str(stats.active_prs),
                    "label": "Active Pull Requests",
                    "icon": "🔄",
                    "note": "Currently in queue",
                    "positive": False,
                },
            ],
            "issues_by_severity": {
                "critical": stats.critical_issues,
                "high": stats.high_issues,
                "medium": stats.medium_issues,
                "low": stats.low_issues,
            },
            "refresh_label": "Refreshing..." if self.loading else "Refresh",
            "reviews": [self._review_row(review, now) for review in self.recent_reviews],
            "system_status": [
                {"key": key, "label": svc.label, "status": svc.status, "message": svc.message}
                for key, svc in self.system_status.items()
            ],
        }

    @staticmethod
    def _review_row(review: Review, now: datetime) -> dict[str, Any]:
        badge = get_status_badge(review.status)
        score = review.quality_score
        return {
            "id": review.id,
            "pr_number": review.pr_number,
            "title": review.pr_title,
            "repository": review.repository,
            "badge": {"label": badge.label, "style": badge.style},
            "score": format_score(score),
            "score_color": get_score_color(score) if score is not None else None,
            "time_ago": format_time_ago(review.created_at, now),
            "pr_url": review.pr_url,
        }
