"""HTTP client for a running hiring service."""

from typing import Any, Dict, List, Optional

import requests

from .logger import get_logger
from .retry import RetryableStatus, exponential_backoff, should_retry_http_status


class ApiError(Exception):
    """Raised for a non-2xx response; carries the service's error body."""

    def __init__(self, status_code: int, error: str, details: Optional[List[str]] = None):
        message = f"{status_code} {error}"
        if details:
            message += ": " + "; ".join(details)
        super().__init__(message)
        self.status_code = status_code
        self.error = error
        self.details = details or []


class HiringApiClient:
    """
    Thin wrapper over the REST API.

    GET requests are retried on connection errors, timeouts and retryable
    status codes. POST requests are only retried when the connection could
    not be made, so a submission is never stored twice.
    """

    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
        max_retries: int = 3,
        base_delay: float = 0.5,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

        self._get = exponential_backoff(
            max_retries=max_retries,
            base_delay=base_delay,
            exceptions=(requests.exceptions.ConnectionError, requests.exceptions.Timeout, RetryableStatus),
            on_retry=self._log_retry,
        )(self._send_checked)
        self._post = exponential_backoff(
            max_retries=max_retries,
            base_delay=base_delay,
            exceptions=(requests.exceptions.ConnectionError,),
            on_retry=self._log_retry,
        )(self._send)

    @staticmethod
    def _log_retry(attempt: int, exc: Exception, delay: float):
        get_logger().warning("Retrying request", attempt=attempt, error=str(exc), delay=delay)

    def _send(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}{path}"
        return self.session.request(method, url, timeout=self.timeout, **kwargs)

    def _send_checked(self, method: str, path: str, **kwargs) -> requests.Response:
        resp = self._send(method, path, **kwargs)
        if should_retry_http_status(resp.status_code):
            raise RetryableStatus(resp.status_code, resp.url)
        return resp

    @staticmethod
    def _decode(resp: requests.Response) -> Any:
        try:
            body = resp.json()
        except ValueError:
            body = None
        if resp.ok:
            return body
        if isinstance(body, dict):
            raise ApiError(resp.status_code, str(body.get("error", resp.reason)), body.get("details"))
        raise ApiError(resp.status_code, resp.reason or "Request failed")

    def create_job(self, job: Dict[str, Any]) -> Dict[str, Any]:
        return self._decode(self._post("POST", "/api/jobs", json=job))

    def list_jobs(self) -> List[Dict[str, Any]]:
        return self._decode(self._get("GET", "/api/jobs"))

    def get_job(self, job_id: str) -> Dict[str, Any]:
        return self._decode(self._get("GET", f"/api/jobs/{job_id}"))

    def submit_application(self, application: Dict[str, Any]) -> Dict[str, Any]:
        return self._decode(self._post("POST", "/api/applications", json=application))

    def list_applications(self, job_id: str, sort_by: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {"sortBy": sort_by} if sort_by else None
        return self._decode(self._get("GET", f"/api/jobs/{job_id}/applications", params=params))

    def get_application(self, application_id: str) -> Dict[str, Any]:
        return self._decode(self._get("GET", f"/api/applications/{application_id}"))
