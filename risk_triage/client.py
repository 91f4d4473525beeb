"""Thin HTTP client for the assessment API."""

from __future__ import annotations

import logging
from typing import Any

import requests

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://assessment.ksensetech.com/api"


class ApiClient:
    """Attach the API key to every request and build URLs from *base_url*."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        api_key: str = "",
        timeout: float = 30,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {
            "x-api-key": api_key,
            "Content-Type": "application/json",
        }

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def get(self, path: str, params: dict[str, Any] | None = None) -> requests.Response:
        """Issue a GET and return the raw response without checking its status."""
        logger.debug("GET %s params=%s", path, params)
        return self.session.get(self.url(path), headers=self.headers, params=params, timeout=self.timeout)

    def post_json(self, path: str, body: dict[str, Any]) -> Any:
        """POST *body* as JSON and return the decoded response.

        Raises
        ------
        requests.HTTPError
            If the server answers with a non-2xx status.
        """
        logger.debug("POST %s", path)
        r = self.session.post(self.url(path), headers=self.headers, json=body, timeout=self.timeout)
        r.raise_for_status()
        try:
            return r.json()
        except ValueError:
            return r.text
