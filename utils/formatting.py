"""Pure formatting helpers used when rendering the dashboard.

Every function here is stateless; anything time-dependent takes an optional
``now`` so callers (and tests) can pin the clock.
"""

import math
from datetime import datetime, timezone
from typing import NamedTuple, Optional, Union

SCORE_GREEN = "#10b981"
SCORE_AMBER = "#f59e0b"
SCORE_RED = "#ef4444"

SCORE_PLACEHOLDER = "-"


class StatusBadge(NamedTuple):
    """Label and CSS style for a review status badge."""
    label: str
    style: str  # success | warning | danger | neutral


_STATUS_BADGES = {
    "COMPLETED": StatusBadge("✓ Reviewed", "success"),
    "PENDING": StatusBadge("⏳ Pending", "warning"),
    "FAILED": StatusBadge("✗ Failed", "danger"),
}
_UNKNOWN_BADGE = StatusBadge("Unknown", "neutral")


def get_status_badge(status: Optional[str]) -> StatusBadge:
    """Map a review status to its badge; unrecognized values get "Unknown"."""
    return _STATUS_BADGES.get(status or "", _UNKNOWN_BADGE)


def get_score_color(score: float) -> str:
    """Background color for a quality score: green >= 9, amber >= 7, else red."""
    if score >= 9:
        return SCORE_GREEN
    if score >= 7:
        return SCORE_AMBER
    return SCORE_RED


def format_score(score: Optional[float]) -> str:
    """Format a quality score to one decimal, or the placeholder when unscored."""
    if score is None:
        return SCORE_PLACEHOLDER
    return f"{score:.1f}"


def quality_trend_label(avg_quality_score: float) -> str:
    """Trend text shown under the average quality stat card."""
    if avg_quality_score >= 8:
        return "↑ Excellent"
    if avg_quality_score >= 6:
        return "→ Good"
    return "↓ Needs improvement"


def parse_timestamp(value: Union[str, datetime]) -> datetime:
    """
    Parse an ISO-8601 timestamp into a timezone-aware datetime.

    Accepts a trailing "Z" for UTC. Naive values are assumed to be UTC.

    Raises:
        ValueError: If the string is not ISO-8601
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        normalized = value[:-1] + "+00:00" if value.endswith("Z") else value
        parsed = datetime.fromisoformat(normalized)

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_time_ago(
    timestamp: Optional[Union[str, datetime]],
    now: Optional[datetime] = None
) -> str:
    """
    Format a timestamp relative to now.

    Args:
        timestamp: ISO-8601 string or datetime; None/empty yields "Unknown"
        now: Reference time (default: current wall clock)

    Returns:
        "just now", "N minutes ago", "N hours ago" or "N days ago"
        (N is always floored)
    """
    if not timestamp:
        return "Unknown"

    moment = parse_timestamp(timestamp)
    reference = parse_timestamp(now) if now is not None else datetime.now(timezone.utc)
    seconds = math.floor((reference - moment).total_seconds())

    if seconds < 60:
        return "just now"
    if seconds < 3600:
        return f"{seconds // 60} minutes ago"
    if seconds < 86400:
        return f"{seconds // 3600} hours ago"
    return f"{seconds // 86400} days ago"
