"""Data models for the review dashboard."""

from models.config_models import DashboardConfig
from models.data_models import (
    DashboardStats,
    HealthStatus,
    Review,
    ReviewIssue,
    ReviewPage,
    ServiceStatus,
    SystemStatus,
)

__all__ = [
    "DashboardConfig",
    "DashboardStats",
    "HealthStatus",
    "Review",
    "ReviewIssue",
    "ReviewPage",
    "ServiceStatus",
    "SystemStatus",
]
