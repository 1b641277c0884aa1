"""
REST store client for FloodDataSync

Talks to a json-server style store exposing ``/reports`` and ``/sensors``.
Every transport failure, timeout, or non-2xx answer surfaces as
StoreUnavailable; there is no retry.
"""

import logging
from typing import Any, List, Optional

import httpx

from src.core.exceptions import ReportNotFound, StaleReport, StoreUnavailable
from src.crowdsource.report_handler import FloodReport
from src.ingestion.sensors import SensorReading

logger = logging.getLogger(__name__)


def _current_version(response: httpx.Response) -> int:
    """Stored version from a conflict answer, or -1 when the store does not say."""
    try:
        body = response.json()
    except ValueError:
        return -1
    if isinstance(body, dict) and isinstance(body.get("version"), int):
        return body["version"]
    return -1


class _StoreClient:
    """Shared HTTP plumbing for the store clients."""

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ):
        """
        Args:
            base_url: Store address
            timeout: HTTP request timeout in seconds
            client: Preconfigured httpx client (tests pass one with a mock transport)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client or httpx.Client(timeout=timeout)

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def close(self) -> None:
        self._client.close()

    def _request(self, operation: str, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"Store {operation} failed: HTTP {e.response.status_code} from {url}")
            raise StoreUnavailable(operation, e) from e
        except httpx.HTTPError as e:
            logger.error(f"Store {operation} failed: {e}")
            raise StoreUnavailable(operation, e) from e

        try:
            return response.json()
        except ValueError as e:
            raise StoreUnavailable(operation, e) from e


class ReportStoreClient(_StoreClient):
    """
    Report store over HTTP.

    Usage:
        with ReportStoreClient("http://localhost:3000") as store:
            reports = store.list()
    """

    def list(self) -> List[FloodReport]:
        data = self._request("list reports", "GET", "/reports")
        reports = [FloodReport.from_dict(item) for item in data]
        logger.debug(f"Fetched {len(reports)} reports")
        return reports

    def get(self, report_id: str) -> FloodReport:
        try:
            data = self._request("get report", "GET", f"/reports/{report_id}")
        except StoreUnavailable as e:
            if isinstance(e.cause, httpx.HTTPStatusError) and e.cause.response.status_code == 404:
                raise ReportNotFound(report_id) from e
            raise
        return FloodReport.from_dict(data)

    def create(self, report: FloodReport) -> FloodReport:
        payload = report.to_dict()
        payload.pop("id", None)
        data = self._request("create report", "POST", "/reports", json=payload)
        created = FloodReport.from_dict(data)
        logger.info(f"Report {created.id} created at {created.location}")
        return created

    def update(self, report_id: str, report: FloodReport) -> FloodReport:
        payload = report.to_dict()
        payload["id"] = report_id
        try:
            data = self._request("update report", "PUT", f"/reports/{report_id}", json=payload)
        except StoreUnavailable as e:
            if isinstance(e.cause, httpx.HTTPStatusError) and e.cause.response.status_code == 404:
                raise ReportNotFound(report_id) from e
            if isinstance(e.cause, httpx.HTTPStatusError) and e.cause.response.status_code == 409:
                raise StaleReport(report_id, report.version, _current_version(e.cause.response)) from e
            raise
        return FloodReport.from_dict(data)


class SensorStoreClient(_StoreClient):
    """Sensor store over HTTP (read-only)."""

    def list(self) -> List[SensorReading]:
        data = self._request("list sensors", "GET", "/sensors")
        return [SensorReading.from_dict(item) for item in data]
