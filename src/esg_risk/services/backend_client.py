"""HTTP client for the portfolio backend.

The analytics only need three read operations (breakdown, ESG total,
stressed value). Report and upload endpoints are exposed as thin
pass-through methods for callers that need them.

Every failure (transport error, non-2xx status, unexpected payload) is
raised as `BackendError`. The client never retries.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional
import logging

import requests

from esg_risk.config.settings import BackendSettings
from esg_risk.data_models.breakdown import BreakdownDimension


logger = logging.getLogger(__name__)

REPORT_FORMATS = ("csv", "xlsx")


class BackendError(RuntimeError):
    """A backend call failed or returned something unusable."""

    def __init__(self, message: str, path: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.path = path
        self.status_code = status_code


class PortfolioBackendClient:
    """Thin wrapper around the `/api/portfolios` REST API."""

    def __init__(self, settings: BackendSettings, session: Optional[requests.Session] = None):
        self.base_url = settings.base_url.rstrip("/")
        self.timeout = settings.timeout
        self.session = session if session is not None else requests.Session()

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "PortfolioBackendClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ---- transport ----

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            raise BackendError(f"{method} {path} failed: {e}", path) from e

        if not 200 <= resp.status_code < 300:
            raise BackendError(
                f"{method} {path} returned HTTP {resp.status_code}: {resp.text[:200]}",
                path,
                status_code=resp.status_code,
            )
        logger.debug("%s %s -> %d", method, path, resp.status_code)
        return resp

    def _request_json(self, method: str, path: str, **kwargs) -> Any:
        resp = self._request(method, path, **kwargs)
        try:
            return resp.json()
        except ValueError as e:
            raise BackendError(f"{method} {path} returned a non-JSON body", path, resp.status_code) from e

    def _get_json(self, path: str) -> Any:
        return self._request_json("GET", path)

    @staticmethod
    def _as_number(data: Any, path: str) -> float:
        # bool is an int subclass but never a valid aggregate
        if isinstance(data, bool) or not isinstance(data, (int, float)):
            raise BackendError(f"GET {path} returned {type(data).__name__}, expected a number", path)
        return float(data)

    # ---- analytics reads ----

    def get_breakdown(self, portfolio_id: int, dimension: BreakdownDimension | str) -> Dict[str, float]:
        """Category -> exposure map for `dimension`, in backend order."""
        dim = BreakdownDimension(dimension)
        path = f"/{portfolio_id}/breakdown/{dim.value}"
        data = self._get_json(path)
        if not isinstance(data, dict):
            raise BackendError(f"GET {path} returned {type(data).__name__}, expected an object", path)
        return {str(name): self._as_number(value, path) for name, value in data.items()}

    def get_esg_score(self, portfolio_id: int) -> float:
        path = f"/{portfolio_id}/esg"
        return self._as_number(self._get_json(path), path)

    def get_stressed_value(self, portfolio_id: int, scenario_id: str) -> float:
        """Total portfolio exposure after applying `scenario_id`."""
        path = f"/{portfolio_id}/stress/{scenario_id}"
        return self._as_number(self._get_json(path), path)

    # ---- reports and upload ----

    def generate_report(self, portfolio_id: int, report_format: str = "csv") -> Dict[str, Any]:
        if report_format not in REPORT_FORMATS:
            raise ValueError(f"Unsupported report format {report_format!r}; expected one of {REPORT_FORMATS}")
        path = f"/{portfolio_id}/report/{report_format}"
        return self._request_json("POST", path)

    def list_reports(self, portfolio_id: int) -> List[Dict[str, Any]]:
        return self._get_json(f"/{portfolio_id}/reports")

    def download_report(self, report_id: int) -> bytes:
        return self._request("GET", f"/reports/{report_id}/download").content

    def upload_portfolio(self, csv_path: Path | str) -> Dict[str, Any]:
        path = Path(csv_path)
        if not path.exists():
            raise FileNotFoundError(f"Portfolio file not found: {path}")
        with path.open("rb") as fh:
            return self._request_json("POST", "/upload", files={"file": (path.name, fh, "text/csv")})
