"""Runtime settings for the triage job."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from risk_triage.client import DEFAULT_BASE_URL


@dataclass
class Settings:
    """Connection and retry settings.

    Parameters
    ----------
    base_url : str
        Root URL of the assessment API.
    api_key : str
        Value sent in the ``x-api-key`` header.
    page_size : int
        Records requested per page.
    timeout : float
        Per-request timeout in seconds.
    backoff_seconds : float
        Pause before retrying a failed page.
    max_attempts : int | None
        Attempts per page before giving up. ``None`` never gives up.
    """

    base_url: str = DEFAULT_BASE_URL
    api_key: str = ""
    page_size: int = 20
    timeout: float = 30.0
    backoff_seconds: float = 1.0
    max_attempts: int | None = None

    def __post_init__(self):
        if not self.base_url:
            msg = "base_url must be a non-empty string"
            raise ValueError(msg)
        if self.page_size <= 0:
            msg = f"page_size must be > 0, got {self.page_size}"
            raise ValueError(msg)
        if self.timeout <= 0:
            msg = f"timeout must be > 0, got {self.timeout}"
            raise ValueError(msg)
        if self.backoff_seconds < 0:
            msg = f"backoff_seconds must be >= 0, got {self.backoff_seconds}"
            raise ValueError(msg)
        if self.max_attempts is not None and self.max_attempts < 1:
            msg = f"max_attempts must be >= 1, got {self.max_attempts}"
            raise ValueError(msg)


def _optional_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    return int(value)


def load_settings(source: str | Path | dict[str, Any] | None = None) -> Settings:
    """Load Settings from a YAML file, a dict, or environment variables.

    ``KSENSE_*`` environment variables take precedence over file values.

    Parameters
    ----------
    source : str | Path | dict | None
        Path to a YAML file, a raw dict, or ``None`` for defaults.

    Returns
    -------
    Settings
    """
    raw: dict[str, Any] = {}

    if isinstance(source, dict):
        raw = source
    elif source is not None:
        path = Path(source)
        if path.is_file():
            raw = _load_yaml(path)

    env = os.environ
    return Settings(
        base_url=env.get("KSENSE_BASE_URL", raw.get("base_url", DEFAULT_BASE_URL)),
        api_key=env.get("KSENSE_API_KEY", raw.get("api_key", "")),
        page_size=int(env.get("KSENSE_PAGE_SIZE", raw.get("page_size", 20))),
        timeout=float(env.get("KSENSE_TIMEOUT", raw.get("timeout", 30.0))),
        backoff_seconds=float(env.get("KSENSE_BACKOFF_SECONDS", raw.get("backoff_seconds", 1.0))),
        max_attempts=_optional_int(env.get("KSENSE_MAX_ATTEMPTS", raw.get("max_attempts"))),
    )


def _load_yaml(path: Path) -> dict[str, Any]:
    with open(path, encoding="utf-8") as fh:
        loaded = yaml.safe_load(fh) or {}
    if not isinstance(loaded, dict):
        msg = f"settings file must contain a mapping: {path}"
        raise ValueError(msg)
    return loaded
