"""Page through the patient listing endpoint and collect every record."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any

import requests

from risk_triage.client import ApiClient

logger = logging.getLogger(__name__)

PATIENTS_PATH = "/patients"
RETRYABLE_STATUS = frozenset({429})
TRANSIENT_ERRORS = (
    requests.ConnectionError,
    requests.Timeout,
    requests.exceptions.ChunkedEncodingError,
    requests.exceptions.ContentDecodingError,
)


class RetryExhausted(RuntimeError):
    """Raised when a page still fails after ``RetryPolicy.max_attempts`` tries."""

    def __init__(self, page: int, attempts: int, reason: str = ""):
        self.page = page
        self.attempts = attempts
        self.reason = reason
        msg = f"Page {page} still failing after {attempts} attempts"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


@dataclass(frozen=True)
class RetryPolicy:
    """Fixed-backoff retry for transient failures.

    Parameters
    ----------
    backoff_seconds : float
        Pause between attempts on the same page.
    max_attempts : int | None
        Attempts allowed per page. ``None`` retries until the page succeeds.
    """

    backoff_seconds: float = 1.0
    max_attempts: int | None = None

    def __post_init__(self):
        if self.backoff_seconds < 0:
            msg = f"backoff_seconds must be >= 0, got {self.backoff_seconds}"
            raise ValueError(msg)
        if self.max_attempts is not None and self.max_attempts < 1:
            msg = f"max_attempts must be >= 1 or None, got {self.max_attempts}"
            raise ValueError(msg)

    def allows(self, attempts: int) -> bool:
        return self.max_attempts is None or attempts < self.max_attempts


def is_transient_status(status_code: int) -> bool:
    return status_code >= 500 or status_code in RETRYABLE_STATUS


def _decode_page(response: requests.Response, page: int) -> tuple[list[dict[str, Any]], bool]:
    """Return ``(records, has_next)``, defaulting anything missing or malformed."""
    try:
        body = response.json()
    except ValueError:
        logger.warning("Page %d returned a body that is not JSON; treating it as the last page", page)
        return [], False

    if not isinstance(body, dict):
        logger.warning("Page %d returned %s instead of an object; treating it as the last page", page, type(body).__name__)
        return [], False

    data = body.get("data") or []
    if not isinstance(data, list):
        logger.warning("Page %d has a non-list 'data' field; ignoring it", page)
        data = []
    records = [item for item in data if isinstance(item, dict)]
    if len(records) != len(data):
        logger.warning("Page %d: dropped %d entries that are not objects", page, len(data) - len(records))

    pagination = body.get("pagination") or {}
    # Anything but a JSON true ends the walk.
    has_next = isinstance(pagination, dict) and pagination.get("hasNext") is True
    return records, has_next


class PatientCollector:
    """Walk the listing endpoint page by page until ``hasNext`` is false.

    A page is requested again, never skipped, while it keeps failing with a
    network error, a 5xx, or a 429.
    """

    def __init__(self, client: ApiClient, retry: RetryPolicy | None = None, page_size: int = 20):
        self.client = client
        self.retry = retry or RetryPolicy()
        self.page_size = page_size

    def fetch_page(self, page: int) -> tuple[list[dict[str, Any]], bool]:
        """Fetch one page, retrying transient failures.

        Raises
        ------
        requests.HTTPError
            For non-retryable error statuses such as 401 or 404.
        RetryExhausted
            When the retry policy is capped and every attempt failed.
        """
        attempts = 0
        while True:
            attempts += 1
            try:
                r = self.client.get(PATIENTS_PATH, params={"page": page, "limit": self.page_size})
            except TRANSIENT_ERRORS as exc:
                reason = f"{type(exc).__name__}: {exc}"
            else:
                if not is_transient_status(r.status_code):
                    r.raise_for_status()
                    return _decode_page(r, page)
                reason = f"HTTP {r.status_code}"

            if not self.retry.allows(attempts):
                raise RetryExhausted(page, attempts, reason)
            logger.info("Page %d attempt %d failed (%s); retrying in %.1fs", page, attempts, reason, self.retry.backoff_seconds)
            time.sleep(self.retry.backoff_seconds)

    def collect_all(self) -> list[dict[str, Any]]:
        """Return every record, in page order."""
        patients: list[dict[str, Any]] = []
        page = 1
        while True:
            records, has_next = self.fetch_page(page)
            patients.extend(records)
            logger.debug("Page %d: %d records (hasNext=%s)", page, len(records), has_next)
            if not has_next:
                break
            page += 1
        logger.info("Collected %d patients from %d pages", len(patients), page)
        return patients


def fetch_all_patients(client: ApiClient, retry: RetryPolicy | None = None, page_size: int = 20) -> list[dict[str, Any]]:
    """Collect every patient record reachable from *client*."""
    return PatientCollector(client, retry=retry, page_size=page_size).collect_all()
