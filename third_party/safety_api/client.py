from typing import Any, Dict, List, Optional

import requests

from app.config import Settings, get_settings
from utils.logger import get_logger, kv_message as kv

logger = get_logger(__name__)


class SafetyApiError(RuntimeError):
    """Transport or HTTP-status failure talking to the safety backend."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SafetyApiClient:
    """Thin client for the incident backend: per-year summaries and the occurrence listing."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.base_url = self.settings.safety_api_base_url.rstrip("/")
        self.timeout = self.settings.safety_api_timeout
        self.session = session or requests.Session()

    def _http_get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            raise SafetyApiError(f"GET {path} failed with status {status}", status_code=status) from exc
        except requests.RequestException as exc:
            raise SafetyApiError(f"GET {path} failed: {exc}") from exc
        except ValueError as exc:
            raise SafetyApiError(f"GET {path} returned invalid JSON") from exc

    def fetch_year_summary(self, year: int) -> Dict[str, Any]:
        path = self.settings.summary_path.format(year=int(year))
        logger.debug(kv("fetch_summary", year=year, path=path))
        return self._http_get(path)

    def list_accident_codes(self) -> List[str]:
        params = {"page": 1, "limit": self.settings.occurrence_page_size}
        data = self._http_get(self.settings.occurrence_path, params=params)
        reports = (data.get("reports") if isinstance(data, dict) else None) or []
        codes = [r.get("global_accident_no") for r in reports if isinstance(r, dict)]
        return [c for c in codes if c]
