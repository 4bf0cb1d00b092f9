"""Data models for review records served by the reviews backend.

The backend speaks camelCase JSON; every model accepts those keys through
field aliases and also accepts the snake_case field names directly.
"""

from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _BackendModel(BaseModel):
    """Base for read-only records received from the backend."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")


class DashboardStats(_BackendModel):
    """Aggregate numbers shown in the hero and stat cards.

    Absent or null counters fall back to zero.
    """
    total_reviews: int = Field(0, ge=0, alias="totalReviews")
    active_prs: int = Field(0, ge=0, alias="activePRs")
    avg_quality_score: float = Field(0.0, alias="avgQualityScore")  # 0-10
    issues_found: int = Field(0, ge=0, alias="issuesFound")

    # Severity breakdown; only in the /api/dashboard view model, not the HTML page
    critical_issues: int = Field(0, ge=0, alias="criticalIssues")
    high_issues: int = Field(0, ge=0, alias="highIssues")
    medium_issues: int = Field(0, ge=0, alias="mediumIssues")
    low_issues: int = Field(0, ge=0, alias="lowIssues")

    @field_validator(
        "total_reviews", "active_prs", "avg_quality_score", "issues_found",
        "critical_issues", "high_issues", "medium_issues", "low_issues",
        mode="before",
    )
    @classmethod
    def null_to_zero(cls, v: Any) -> Any:
        """Treat null counters the same as missing ones."""
        return 0 if v is None else v


class ReviewIssue(_BackendModel):
    """A single finding attached to a review."""
    id: Optional[int] = None
    type: Optional[str] = None
    severity: Optional[str] = None
    file_path: Optional[str] = Field(None, alias="filePath")
    line_number: Optional[int] = Field(None, alias="lineNumber")
    title: Optional[str] = None
    description: Optional[str] = None
    suggestion: Optional[str] = None
    code_snippet: Optional[str] = Field(None, alias="codeSnippet")


class Review(_BackendModel):
    """Pull request review record.

    quality_score is None until the review has been scored; it is only
    meaningful when status is COMPLETED.
    """
    id: Union[int, str]
    pr_number: int = Field(alias="prNumber")
    pr_title: str = Field("", alias="prTitle")
    repository_owner: str = Field("", alias="repositoryOwner")
    repository_name: str = Field("", alias="repositoryName")
    status: Optional[str] = None  # COMPLETED | PENDING | FAILED | anything else
    quality_score: Optional[float] = Field(None, alias="qualityScore")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    pr_url: Optional[str] = Field(None, alias="prUrl")

    # Detail fields, present on full review payloads
    pr_author: Optional[str] = Field(None, alias="prAuthor")
    analysis_summary: Optional[str] = Field(None, alias="analysisSummary")
    ai_provider: Optional[str] = Field(None, alias="aiProvider")
    ai_model: Optional[str] = Field(None, alias="aiModel")
    issues: list[ReviewIssue] = Field(default_factory=list)
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")
    error_message: Optional[str] = Field(None, alias="errorMessage")

    @field_validator("issues", mode="before")
    @classmethod
    def null_issues_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @property
    def repository(self) -> str:
        """Repository in owner/name form."""
        return f"{self.repository_owner}/{self.repository_name}"


class ReviewPage(_BackendModel):
    """One page of reviews (Spring Data page shape)."""
    content: list[Review] = Field(default_factory=list)
    total_elements: int = Field(0, alias="totalElements")
    total_pages: int = Field(0, alias="totalPages")
    number: int = 0  # 0-indexed page number
    size: int = 0


class HealthStatus(_BackendModel):
    """Liveness payload returned by the backend health endpoint."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")

    status: str = "UNKNOWN"
    service: Optional[str] = None
    timestamp: Optional[str] = None
    total_reviews: Optional[int] = Field(None, alias="totalReviews")


class ServiceStatus(BaseModel):
    """Static descriptor for one entry in the system-status panel."""

    model_config = ConfigDict(frozen=True)

    label: str
    status: str
    message: str


class SystemStatus(BaseModel):
    """The four services shown in the system-status panel.

    Hard-coded at startup and never refreshed from a live source.
    """

    model_config = ConfigDict(frozen=True)

    backend: ServiceStatus = ServiceStatus(label="Backend API", status="online", message="Running on port 8080")
    database: ServiceStatus = ServiceStatus(label="PostgreSQL", status="online", message="PostgreSQL 15.2")
    queue: ServiceStatus = ServiceStatus(label="RabbitMQ", status="online", message="RabbitMQ 3.13.7")
    ai: ServiceStatus = ServiceStatus(label="AI Service", status="ready", message="GPT-4 / Claude")

    def items(self) -> list[tuple[str, ServiceStatus]]:
        """Services in display order."""
        return [
            ("backend", self.backend),
            ("database", self.database),
            ("queue", self.queue),
            ("ai", self.ai),
        ]
