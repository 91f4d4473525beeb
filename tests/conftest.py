"""Shared fixtures for triage tests."""

from unittest.mock import Mock

import pytest
import requests

from risk_triage.client import ApiClient


def make_response(status_code=200, payload=None, json_error=False):
    """Build a fake ``requests.Response``."""
    r = Mock(status_code=status_code)
    if json_error:
        r.json.side_effect = ValueError("Expecting value")
        r.text = "<html>oops</html>"
    else:
        r.json.return_value = payload
    if status_code >= 400:
        r.raise_for_status.side_effect = requests.HTTPError(f"{status_code} error")
    return r


def page(records, has_next):
    return {"data": records, "pagination": {"hasNext": has_next}}


@pytest.fixture()
def session():
    return Mock(spec=requests.Session)


@pytest.fixture()
def client(session):
    return ApiClient("https://api.test", "test-key", session=session)


@pytest.fixture()
def no_sleep(monkeypatch):
    """Record backoff pauses instead of sleeping."""
    pauses = []
    monkeypatch.setattr("risk_triage.collector.time.sleep", pauses.append)
    return pauses


@pytest.fixture()
def sample_patients():
    return [
        {"patient_id": "p1", "name": "A", "age": 70, "temperature": 101.0, "blood_pressure": "150/95"},
        {"patient_id": "p2", "name": "B", "age": "N/A", "temperature": 98.2, "blood_pressure": "110/70"},
        {"patient_id": "p3", "name": "C", "age": 30, "temperature": "99.8", "blood_pressure": "120/"},
        {"patient_id": "p4", "name": "D", "age": 52, "temperature": 98.6, "blood_pressure": "128/82"},
    ]
