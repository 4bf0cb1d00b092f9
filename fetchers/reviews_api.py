"""Reviews backend API client used by the dashboard.

Wraps the backend's /reviews endpoints behind named async operations.
All HTTP failures are normalized in one place (``ReviewsAPI._request``) so
every caller sees the same error vocabulary:

- 404 -> NotFoundError("Resource not found")
- 500 -> ServerError("Server error. Please try again later.")
- error body with a "message" field -> ValidationMessageError(message)
- no response at all -> NetworkUnreachableError("Unable to connect ...")
- 2xx body that is not valid JSON or not the expected record
  -> MalformedResponseError("Malformed backend response")
- anything else -> the original requests exception, re-raised unchanged
"""

import asyncio
import logging
from typing import Any, Optional, Type, TypeVar
from urllib.parse import quote

import requests
from pydantic import BaseModel, ValidationError

from models.config_models import DashboardConfig
from models.data_models import DashboardStats, HealthStatus, Review, ReviewPage

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

NOT_FOUND_MESSAGE = "Resource not found"
SERVER_ERROR_MESSAGE = "Server error. Please try again later."
NETWORK_ERROR_MESSAGE = "Unable to connect to server. Please check your connection."
MALFORMED_RESPONSE_MESSAGE = "Malformed backend response"


class ReviewsAPIError(Exception):
    """Normalized failure from the reviews backend, carrying a readable message."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NotFoundError(ReviewsAPIError):
    """Backend answered 404."""


class ServerError(ReviewsAPIError):
    """Backend answered 500."""


class ValidationMessageError(ReviewsAPIError):
    """Backend rejected the request and explained why in its error body."""


class NetworkUnreachableError(ReviewsAPIError):
    """No response was received (connection refused, DNS failure, timeout)."""


class MalformedResponseError(ReviewsAPIError):
    """Backend answered 2xx but the body is not the expected record."""


def _error_body(response: requests.Response) -> Any:
    """Best-effort decode of an error response body for logging and messages."""
    try:
        return response.json()
    except ValueError:
        return response.text


class ReviewsAPI:
    """Client for the reviews REST backend.

    Blocking requests run in a worker thread so each operation can be
    awaited from the dashboard's event loop without stalling it.
    """

    def __init__(self, config: Optional[DashboardConfig] = None):
        """Initialize the reviews API client.

        Args:
            config: Dashboard configuration (default: localhost backend, 10s timeout)
        """
        config = config or DashboardConfig()
        self.base_url = config.api_base_url
        self.timeout = config.request_timeout_seconds

        self.session = requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def close(self) -> None:
        """Release the underlying HTTP session."""
        self.session.close()

    def _request(self, method: str, path: str, params: Optional[dict] = None) -> Any:
        """Send a request and return the decoded JSON body.

        Args:
            method: HTTP method
            path: Path below the base URL (e.g. "/reviews/stats")
            params: Optional query parameters

        Returns:
            Decoded JSON payload, or None for an empty body

        Raises:
            ReviewsAPIError: Normalized backend or network failure
            requests.RequestException: Any failure that has no normalized form
        """
        url = f"{self.base_url}{path}"
        logger.info(f"[API] {method.upper()} {url}")

        try:
            response = self.session.request(method, url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.HTTPError as e:
            body = _error_body(e.response)
            logger.error(f"[API] Response error: {body or e}")
            normalized = self._normalize_http_error(e.response.status_code, body)
            if normalized is None:
                raise
            raise normalized from e
        except (requests.ConnectionError, requests.Timeout) as e:
            logger.error(f"[API] Response error: {e}")
            raise NetworkUnreachableError(NETWORK_ERROR_MESSAGE) from e

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"[API] Response is not JSON: {e}")
            raise MalformedResponseError(MALFORMED_RESPONSE_MESSAGE, response.status_code) from e

    @staticmethod
    def _normalize_http_error(status_code: int, body: Any) -> Optional[ReviewsAPIError]:
        """Translate an error response into a ReviewsAPIError, or None to re-raise."""
        if status_code == 404:
            return NotFoundError(NOT_FOUND_MESSAGE, status_code)
        if status_code == 500:
            return ServerError(SERVER_ERROR_MESSAGE, status_code)
        if isinstance(body, dict) and body.get("message"):
            return ValidationMessageError(str(body["message"]), status_code)
        return None

    @staticmethod
    def _parse(model: Type[M], data: Any) -> M:
        """Validate a response body, treating a mismatch as a malformed response."""
        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.error(f"[API] Unexpected {model.__name__} payload: {e.error_count()} validation error(s)")
            raise MalformedResponseError(MALFORMED_RESPONSE_MESSAGE) from e

    async def _get(self, path: str, params: Optional[dict] = None) -> Any:
        return await asyncio.to_thread(self._request, "GET", path, params)

    async def get_all(self, page: int = 0, size: int = 10) -> ReviewPage:
        """Get all reviews with pagination (page is 0-indexed)."""
        data = await self._get("/reviews", {"page": page, "size": size})
        return self._parse(ReviewPage, data or {})

    async def get_by_id(self, review_id: Any) -> Review:
        """Get a single review.

        Raises:
            NotFoundError: If no review has this id
        """
        data = await self._get(f"/reviews/{quote(str(review_id), safe='')}")
        return self._parse(Review, data)

    async def get_by_repository(self, owner: str, name: str, page: int = 0, size: int = 10) -> ReviewPage:
        """Get reviews for one repository, newest first."""
        path = f"/reviews/repo/{quote(owner, safe='')}/{quote(name, safe='')}"
        data = await self._get(path, {"page": page, "size": size})
        return self._parse(ReviewPage, data or {})

    async def get_recent(self) -> list[Review]:
        """Get reviews from the last 7 days (window applied by the backend)."""
        data = await self._get("/reviews/recent")
        if data is None:
            return []
        if not isinstance(data, list):
            logger.error(f"[API] Expected a list of reviews, got {type(data).__name__}")
            raise MalformedResponseError(MALFORMED_RESPONSE_MESSAGE)
        return [self._parse(Review, item) for item in data]

    async def get_stats(self) -> DashboardStats:
        """Get dashboard statistics."""
        data = await self._get("/reviews/stats")
        return self._parse(DashboardStats, data or {})

    async def health_check(self) -> HealthStatus:
        """Get the backend liveness payload."""
        data = await self._get("/reviews/health")
        return self._parse(HealthStatus, data or {})
