"""
Routes for the review dashboard.

The HTML page and /api/dashboard render the in-memory view; the /api/reviews
endpoints proxy the reviews backend and translate its normalized errors
into HTTP status codes.
"""

import logging
from pathlib import Path
from typing import Any, Awaitable, Dict, TypeVar

import requests
from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from dashboard.view import ViewState
from fetchers.reviews_api import NotFoundError, ReviewsAPIError
from models.data_models import Review, ReviewPage

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

router = APIRouter(tags=["dashboard"])

# Page reload while the first snapshot is still loading
LOADING_RELOAD_SECONDS = 2

T = TypeVar("T")


async def _call_backend(call: Awaitable[T]) -> T:
    """Await a backend call, mapping client errors to HTTP errors."""
    try:
        return await call
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except ReviewsAPIError as e:
        raise HTTPException(status_code=502, detail=e.message)
    except requests.RequestException as e:
        logger.error(f"Backend request failed: {e}")
        raise HTTPException(status_code=502, detail=f"Backend request failed: {e}")


@router.get("/", response_class=HTMLResponse)
async def dashboard_page(request: Request):
    """Render the dashboard page from the current view state."""
    view = request.app.state.view
    dashboard = view.render()
    reload_seconds = max(1, int(view.refresh_interval_seconds))
    if dashboard["state"] == ViewState.LOADING.value:
        reload_seconds = min(reload_seconds, LOADING_RELOAD_SECONDS)

    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {"dashboard": dashboard, "reload_seconds": reload_seconds},
    )


@router.post("/refresh")
async def refresh_dashboard(request: Request):
    """
    Manually re-run the fetch cycle, then go back to the dashboard.

    Used by both the Refresh button and the error banner's Retry button.
    """
    await request.app.state.view.refresh()
    return RedirectResponse(url="/", status_code=303)


@router.get("/api/dashboard")
async def dashboard_state(request: Request) -> Dict[str, Any]:
    """Current dashboard view model as JSON."""
    return request.app.state.view.render()


@router.get("/api/reviews", response_model=ReviewPage)
async def list_reviews(
    request: Request,
    page: int = Query(0, ge=0, description="Page number (0-indexed)"),
    size: int = Query(10, ge=1, le=100, description="Reviews per page (max 100)")
):
    """List reviews with pagination."""
    return await _call_backend(request.app.state.reviews_api.get_all(page=page, size=size))


@router.get("/api/reviews/repo/{owner}/{name}", response_model=ReviewPage)
async def list_repository_reviews(
    request: Request,
    owner: str,
    name: str,
    page: int = Query(0, ge=0, description="Page number (0-indexed)"),
    size: int = Query(10, ge=1, le=100, description="Reviews per page (max 100)")
):
    """List reviews for one repository."""
    api = request.app.state.reviews_api
    return await _call_backend(api.get_by_repository(owner, name, page=page, size=size))


@router.get("/api/reviews/{review_id}", response_model=Review)
async def get_review(request: Request, review_id: str):
    """Get a single review with its issues."""
    return await _call_backend(request.app.state.reviews_api.get_by_id(review_id))


@router.get("/api/health")
async def health(request: Request) -> Dict[str, Any]:
    """
    Dashboard liveness plus the backend's own health payload.

    The dashboard is UP even when the backend is not; backend failures are
    reported in backendError.
    """
    backend = None
    backend_error = None
    try:
        result = await request.app.state.reviews_api.health_check()
        backend = result.model_dump(by_alias=True)
    except ReviewsAPIError as e:
        backend_error = e.message
    except requests.RequestException as e:
        backend_error = str(e)

    return {"status": "UP", "backend": backend, "backendError": backend_error}
