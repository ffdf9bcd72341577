"""HTTP client for the events REST API."""

import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import requests
from pydantic import BaseModel, Field

from songjog.config.loader import load_config
from songjog.parsing.normalizer import unwrap_payload
from songjog.utils.logging import get_logger

logger = get_logger(__name__)


class FetchResult(BaseModel):
    """Result of one call to the events API."""

    url: str
    fetched_at_utc: str  # ISO 8601
    status: str  # SUCCESS | FAILURE
    status_code: Optional[int] = None
    error: Optional[str] = None
    duration_seconds: Optional[float] = None
    items: List[Dict[str, Any]] = Field(default_factory=list)
    bytes_downloaded: int = 0


class EventsClient:
    """Fetches raw event payloads; failures are reported in FetchResult, not raised."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout_seconds: Optional[float] = None,
        user_agent: Optional[str] = None,
        config: Optional[Dict] = None,
    ):
        """
        Initialize client.

        Args:
            base_url: API root, e.g. "http://localhost:5000". Defaults to config api.base_url.
            timeout_seconds: Per-request timeout. Defaults to config api.timeout_seconds.
            user_agent: User-Agent header. Defaults to config api.user_agent.
            config: Optional songjog config dict. If None, loads from default path.
        """
        if config is None:
            config = load_config()
        api_config = config.get("api", {})

        self.base_url = (base_url or api_config.get("base_url", "")).rstrip("/")
        self.events_path = api_config.get("events_path", "/api/events")
        self.timeout_seconds = timeout_seconds or api_config.get("timeout_seconds", 10)
        self.user_agent = user_agent or api_config.get("user_agent", "songjog")

    def _headers(self) -> Dict[str, str]:
        return {
            "User-Agent": self.user_agent,
            "Accept": "application/json",
        }

    def _url(self, path: Optional[str]) -> str:
        path = path if path is not None else self.events_path
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    def _request(self, method: str, url: str, json_body: Optional[Dict] = None) -> FetchResult:
        fetched_at_utc = datetime.now(timezone.utc).isoformat()
        start_time = time.monotonic()
        status_code = None
        error = None
        items: List[Dict[str, Any]] = []
        status = "SUCCESS"
        bytes_downloaded = 0

        try:
            response = requests.request(
                method,
                url,
                headers=self._headers(),
                json=json_body,
                timeout=self.timeout_seconds,
            )
            status_code = response.status_code
            bytes_downloaded = len(response.content or b"")
            response.raise_for_status()
            items = unwrap_payload(response.json())
            logger.info(f"{method} {url}: {len(items)} events")
        except requests.JSONDecodeError as e:
            # Body was not JSON; must precede RequestException, its base class
            error = f"Invalid JSON response: {e}"
            status = "FAILURE"
            logger.error(f"{method} {url} failed: {error}")
        except requests.RequestException as req_e:
            if getattr(req_e, "response", None) is not None:
                status_code = req_e.response.status_code
            error = str(req_e)
            status = "FAILURE"
            logger.error(f"{method} {url} failed: {error}")

        return FetchResult(
            url=url,
            fetched_at_utc=fetched_at_utc,
            status=status,
            status_code=status_code,
            error=error,
            duration_seconds=time.monotonic() - start_time,
            items=items if status == "SUCCESS" else [],
            bytes_downloaded=bytes_downloaded,
        )

    def fetch_events(self, path: Optional[str] = None) -> FetchResult:
        """
        GET the event collection.

        Args:
            path: Path relative to base_url, or an absolute URL. Defaults to api.events_path.

        Returns:
            FetchResult whose items are the unwrapped raw event records
        """
        return self._request("GET", self._url(path))

    def create_event(self, payload: Dict[str, Any], path: Optional[str] = None) -> FetchResult:
        """POST a new event (see songjog.events.draft.build_event_payload)."""
        return self._request("POST", self._url(path), json_body=payload)
