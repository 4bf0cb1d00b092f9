"""Tests for the reviews backend API client."""

import asyncio
import logging
from unittest.mock import patch

import pytest
import requests

from fetchers.reviews_api import (
    MALFORMED_RESPONSE_MESSAGE,
    NETWORK_ERROR_MESSAGE,
    MalformedResponseError,
    NotFoundError,
    NetworkUnreachableError,
    ReviewsAPI,
    ReviewsAPIError,
    ServerError,
    ValidationMessageError,
)
from models.config_models import DashboardConfig
from models.data_models import DashboardStats, HealthStatus, Review, ReviewPage

BASE_URL = "http://backend.test/api"


@pytest.fixture
def api():
    client = ReviewsAPI(DashboardConfig(api_base_url=BASE_URL))
    yield client
    client.close()


class TestReviewsAPIInit:
    """Tests for ReviewsAPI initialization."""

    def test_defaults_to_local_backend(self):
        """Verify default base URL and timeout."""
        client = ReviewsAPI()

        assert client.base_url == "http://localhost:8080/api"
        assert client.timeout == 10.0

    def test_sets_json_content_type(self, api):
        """Verify every request carries the JSON content type."""
        assert api.session.headers["Content-Type"] == "application/json"

    def test_uses_configured_base_url(self, api):
        assert api.base_url == BASE_URL


class TestOperations:
    """Tests for the URL, params and parsing of each operation."""

    def test_get_all_paginates(self, api, make_response, sample_reviews_payload):
        """Verify get_all sends page/size and parses a Spring page."""
        page_body = {
            "content": sample_reviews_payload[:2],
            "totalElements": 25,
            "totalPages": 13,
            "number": 1,
            "size": 2,
        }
        with patch.object(api.session, "request", return_value=make_response(200, page_body)) as mock_request:
            page = asyncio.run(api.get_all(page=1, size=2))

        mock_request.assert_called_once_with(
            "GET", f"{BASE_URL}/reviews", params={"page": 1, "size": 2}, timeout=10.0
        )
        assert isinstance(page, ReviewPage)
        assert page.total_elements == 25
        assert page.number == 1
        assert [r.pr_number for r in page.content] == [7, 6]

    def test_get_all_default_params(self, api, make_response):
        with patch.object(api.session, "request", return_value=make_response(200, {"content": []})) as mock_request:
            asyncio.run(api.get_all())

        assert mock_request.call_args[1]["params"] == {"page": 0, "size": 10}

    def test_get_by_id(self, api, make_response, sample_reviews_payload):
        with patch.object(api.session, "request", return_value=make_response(200, sample_reviews_payload[0])) as mock_request:
            review = asyncio.run(api.get_by_id(107))

        assert mock_request.call_args[0] == ("GET", f"{BASE_URL}/reviews/107")
        assert isinstance(review, Review)
        assert review.pr_number == 7

    def test_get_by_repository_quotes_path(self, api, make_response):
        """Verify owner/name are path-escaped and pagination is forwarded."""
        with patch.object(api.session, "request", return_value=make_response(200, {"content": []})) as mock_request:
            asyncio.run(api.get_by_repository("acme", "widgets", page=2, size=5))

        args, kwargs = mock_request.call_args
        assert args[1] == f"{BASE_URL}/reviews/repo/acme/widgets"
        assert kwargs["params"] == {"page": 2, "size": 5}

        with patch.object(api.session, "request", return_value=make_response(200, {"content": []})) as mock_request:
            asyncio.run(api.get_by_repository("my org", "a/b"))

        assert mock_request.call_args[0][1] == f"{BASE_URL}/reviews/repo/my%20org/a%2Fb"

    def test_get_recent_preserves_order(self, api, make_response, sample_reviews_payload):
        with patch.object(api.session, "request", return_value=make_response(200, sample_reviews_payload)) as mock_request:
            reviews = asyncio.run(api.get_recent())

        assert mock_request.call_args[0][1] == f"{BASE_URL}/reviews/recent"
        assert [r.pr_number for r in reviews] == [7, 6, 5, 4, 3]

    def test_get_recent_null_body_is_empty(self, api, make_response):
        with patch.object(api.session, "request", return_value=make_response(200, text="")):
            assert asyncio.run(api.get_recent()) == []

    def test_get_stats(self, api, make_response, sample_stats_payload):
        with patch.object(api.session, "request", return_value=make_response(200, sample_stats_payload)) as mock_request:
            stats = asyncio.run(api.get_stats())

        assert mock_request.call_args[0][1] == f"{BASE_URL}/reviews/stats"
        assert isinstance(stats, DashboardStats)
        assert stats.total_reviews == 247
        assert stats.avg_quality_score == 8.4

    def test_health_check(self, api, make_response):
        body = {"status": "UP", "service": "CodeSage Review API", "timestamp": "2025-01-15T10:30:00Z", "totalReviews": 3}
        with patch.object(api.session, "request", return_value=make_response(200, body)) as mock_request:
            health = asyncio.run(api.health_check())

        assert mock_request.call_args[0][1] == f"{BASE_URL}/reviews/health"
        assert isinstance(health, HealthStatus)
        assert health.status == "UP"
        assert health.total_reviews == 3

    def test_timeout_is_configurable(self, make_response):
        client = ReviewsAPI(DashboardConfig(api_base_url=BASE_URL, request_timeout_seconds=2.5))
        with patch.object(client.session, "request", return_value=make_response(200, {})) as mock_request:
            asyncio.run(client.get_stats())

        assert mock_request.call_args[1]["timeout"] == 2.5


class TestErrorNormalization:
    """Tests for the centralized error vocabulary."""

    def test_404_becomes_not_found(self, api, make_response):
        with patch.object(api.session, "request", return_value=make_response(404, {"message": "no such review"})):
            with pytest.raises(NotFoundError) as exc_info:
                asyncio.run(api.get_by_id(999))

        assert exc_info.value.message == "Resource not found"
        assert exc_info.value.status_code == 404

    def test_500_becomes_server_error(self, api, make_response):
        """500 wins over any message in the body."""
        body = {"message": "An unexpected error occurred. Please try again later."}
        with patch.object(api.session, "request", return_value=make_response(500, body)):
            with pytest.raises(ServerError) as exc_info:
                asyncio.run(api.get_stats())

        assert str(exc_info.value) == "Server error. Please try again later."

    def test_structured_message_is_surfaced(self, api, make_response):
        with patch.object(api.session, "request", return_value=make_response(400, {"message": "size must be <= 100"})):
            with pytest.raises(ValidationMessageError) as exc_info:
                asyncio.run(api.get_all(size=500))

        assert exc_info.value.message == "size must be <= 100"
        assert exc_info.value.status_code == 400

    def test_connection_error_becomes_network_unreachable(self, api):
        with patch.object(api.session, "request", side_effect=requests.ConnectionError("refused")):
            with pytest.raises(NetworkUnreachableError) as exc_info:
                asyncio.run(api.get_recent())

        assert exc_info.value.message == NETWORK_ERROR_MESSAGE

    def test_timeout_becomes_network_unreachable(self, api):
        with patch.object(api.session, "request", side_effect=requests.ReadTimeout("slow")):
            with pytest.raises(NetworkUnreachableError):
                asyncio.run(api.get_stats())

    def test_unrecognized_status_reraises_original(self, api, make_response):
        """A 503 with no message body is not normalized."""
        with patch.object(api.session, "request", return_value=make_response(503, text="upstream down")):
            with pytest.raises(requests.HTTPError) as exc_info:
                asyncio.run(api.get_stats())

        assert not isinstance(exc_info.value, ReviewsAPIError)
        assert exc_info.value.response.status_code == 503

    def test_other_request_errors_pass_through(self, api):
        with patch.object(api.session, "request", side_effect=requests.TooManyRedirects("loop")):
            with pytest.raises(requests.TooManyRedirects):
                asyncio.run(api.get_stats())

    def test_empty_record_body_is_malformed(self, api, make_response):
        """A 200 with no body where a single review is expected."""
        with patch.object(api.session, "request", return_value=make_response(200, text="")):
            with pytest.raises(MalformedResponseError) as exc_info:
                asyncio.run(api.get_by_id(5))

        assert exc_info.value.message == MALFORMED_RESPONSE_MESSAGE

    def test_invalid_record_is_malformed(self, api, make_response):
        with patch.object(api.session, "request", return_value=make_response(200, {"id": 5, "prNumber": None})):
            with pytest.raises(MalformedResponseError):
                asyncio.run(api.get_by_id(5))

    def test_non_json_body_is_malformed(self, api, make_response):
        with patch.object(api.session, "request", return_value=make_response(200, text="<html>proxy login</html>")):
            with pytest.raises(MalformedResponseError) as exc_info:
                asyncio.run(api.get_stats())

        assert exc_info.value.status_code == 200

    def test_recent_must_be_a_list(self, api, make_response):
        with patch.object(api.session, "request", return_value=make_response(200, {"content": []})):
            with pytest.raises(MalformedResponseError):
                asyncio.run(api.get_recent())

    def test_all_normalized_errors_share_base_type(self):
        for error_type in (NotFoundError, ServerError, ValidationMessageError, NetworkUnreachableError, MalformedResponseError):
            assert issubclass(error_type, ReviewsAPIError)


class TestRequestLogging:
    """Tests for request/response logging."""

    def test_logs_method_and_url_before_dispatch(self, api, make_response, caplog):
        caplog.set_level(logging.INFO, logger="fetchers.reviews_api")
        with patch.object(api.session, "request", return_value=make_response(200, [])):
            asyncio.run(api.get_recent())

        assert f"[API] GET {BASE_URL}/reviews/recent" in caplog.text

    def test_logs_response_errors(self, api, make_response, caplog):
        caplog.set_level(logging.INFO, logger="fetchers.reviews_api")
        with patch.object(api.session, "request", return_value=make_response(404, {"message": "gone"})):
            with pytest.raises(NotFoundError):
                asyncio.run(api.get_by_id(1))

        assert "[API] Response error:" in caplog.text
        assert "gone" in caplog.text
