import httpx

from screener.core.config import get_settings


def get_http_client() -> httpx.AsyncClient:
    """Create the HTTP client used to reach the scoring service."""
    settings = get_settings()
    return httpx.AsyncClient(timeout=settings.scoring_timeout_ms / 1000)
