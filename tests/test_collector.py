"""Tests for the paginated collector."""

import pytest
import requests

from conftest import make_response, page
from risk_triage.collector import PatientCollector, RetryExhausted, RetryPolicy, fetch_all_patients


def _requested_pages(session):
    return [call.kwargs["params"]["page"] for call in session.get.call_args_list]


def test_collects_pages_in_order(client, session, no_sleep):
    session.get.side_effect = [
        make_response(200, page([{"patient_id": "a"}, {"patient_id": "b"}], True)),
        make_response(200, page([{"patient_id": "c"}], True)),
        make_response(200, page([{"patient_id": "d"}], False)),
    ]

    patients = fetch_all_patients(client)

    assert [p["patient_id"] for p in patients] == ["a", "b", "c", "d"]
    assert _requested_pages(session) == [1, 2, 3]
    assert no_sleep == []


def test_sends_api_key_and_page_size(client, session, no_sleep):
    session.get.return_value = make_response(200, page([], False))

    PatientCollector(client, page_size=5).collect_all()

    kwargs = session.get.call_args.kwargs
    assert kwargs["headers"]["x-api-key"] == "test-key"
    assert kwargs["params"] == {"page": 1, "limit": 5}
    assert session.get.call_args.args[0] == "https://api.test/patients"


def test_retries_same_page_on_transient_failures(client, session, no_sleep):
    session.get.side_effect = [
        make_response(200, page([{"patient_id": "a"}], True)),
        make_response(503),
        make_response(503),
        make_response(429),
        requests.ConnectionError("reset"),
        make_response(200, page([{"patient_id": "b"}], True)),
        make_response(200, page([{"patient_id": "c"}], False)),
    ]

    patients = fetch_all_patients(client, retry=RetryPolicy(backoff_seconds=2.0))

    assert [p["patient_id"] for p in patients] == ["a", "b", "c"]
    assert _requested_pages(session) == [1, 2, 2, 2, 2, 2, 3]
    assert no_sleep == [2.0, 2.0, 2.0, 2.0]


@pytest.mark.parametrize(
    "error",
    [
        requests.Timeout("slow"),
        requests.exceptions.ChunkedEncodingError("Connection broken: IncompleteRead"),
        requests.exceptions.ContentDecodingError("bad gzip"),
    ],
)
def test_transport_errors_are_transient(client, session, no_sleep, error):
    session.get.side_effect = [error, make_response(200, page([{"patient_id": "a"}], False))]

    assert fetch_all_patients(client) == [{"patient_id": "a"}]
    assert _requested_pages(session) == [1, 1]
    assert len(no_sleep) == 1


def test_capped_retry_raises_exhausted(client, session, no_sleep):
    session.get.return_value = make_response(500)

    with pytest.raises(RetryExhausted, match="Page 1 still failing after 3 attempts") as excinfo:
        fetch_all_patients(client, retry=RetryPolicy(backoff_seconds=0, max_attempts=3))

    assert excinfo.value.page == 1
    assert excinfo.value.attempts == 3
    assert session.get.call_count == 3
    assert len(no_sleep) == 2


def test_client_error_is_not_retried(client, session, no_sleep):
    session.get.return_value = make_response(401)

    with pytest.raises(requests.HTTPError):
        fetch_all_patients(client)

    assert session.get.call_count == 1
    assert no_sleep == []


def test_missing_pagination_stops(client, session, no_sleep):
    session.get.return_value = make_response(200, {"data": [{"patient_id": "a"}]})

    assert fetch_all_patients(client) == [{"patient_id": "a"}]
    assert session.get.call_count == 1


def test_malformed_body_is_treated_as_empty_last_page(client, session, no_sleep, caplog):
    session.get.side_effect = [
        make_response(200, page([{"patient_id": "a"}], True)),
        make_response(200, json_error=True),
    ]

    with caplog.at_level("WARNING", logger="risk_triage.collector"):
        patients = fetch_all_patients(client)

    assert patients == [{"patient_id": "a"}]
    assert "not JSON" in caplog.text


def test_malformed_fields_default(client, session, no_sleep):
    session.get.side_effect = [
        make_response(200, {"data": None, "pagination": {"hasNext": True}}),
        make_response(200, {"data": [{"patient_id": "x"}, "junk", 7], "pagination": None}),
    ]

    assert fetch_all_patients(client) == [{"patient_id": "x"}]


@pytest.mark.parametrize("kwargs", [{"backoff_seconds": -1}, {"max_attempts": 0}])
def test_retry_policy_validation(kwargs):
    with pytest.raises(ValueError):
        RetryPolicy(**kwargs)


@pytest.mark.parametrize("has_next", ["false", "true", 1, None])
def test_non_boolean_has_next_stops(client, session, no_sleep, has_next):
    session.get.side_effect = [
        make_response(200, {"data": [{"patient_id": "a"}], "pagination": {"hasNext": has_next}}),
        make_response(200, page([{"patient_id": "ghost"}], False)),
    ]

    assert fetch_all_patients(client) == [{"patient_id": "a"}]
    assert session.get.call_count == 1
