# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import json
import uuid

import pytest

from probeport.api.probes import HttpProbeCollection, format_label_filters
from probeport.config import ApiSettings
from probeport.errors import ClientNotConfigured, DeadlineExceeded, ErrorCategory, TransportError
from probeport.http.adapters import StubHttpClient, json_response
from probeport.http.models import HttpResponse
from probeport.models import CreateProbeRequest, Maybe
from probeport.utils.deadline import Deadline

PROBE_ID = "0b7d6c1e-6a2f-4c1b-9a55-2d9f3e8b7a10"


def _settings(**overrides):
    values = {"api_url": "https://api.test", "api_key": "se_test", "initial_delay": 0.0, "max_retries": 2}
    values.update(overrides)
    return ApiSettings(**values)


def _create_request(name="api"):
    return CreateProbeRequest(
        name=name,
        url="https://example.com",
        check_type="http",
        method="GET",
        timeout_ms=10000,
        interval_seconds=60,
        expected_status_codes=(200,),
        follow_redirects=Maybe.of(False),
    )


def test_requires_api_key():
    with pytest.raises(ClientNotConfigured) as excinfo:
        HttpProbeCollection(StubHttpClient(), ApiSettings(api_key=None))
    assert "PROBEPORT_API_KEY" in str(excinfo.value)

    with pytest.raises(ClientNotConfigured):
        HttpProbeCollection.from_settings(ApiSettings(api_key=""))


def test_list_sends_auth_and_filters():
    stub = StubHttpClient(
        {"GET /v1/probes": [json_response(200, {"probes": [{"id": PROBE_ID, "name": "api"}], "total": 1, "page": 2, "limit": 50})]}
    )
    collection = HttpProbeCollection(stub, _settings())

    page = collection.list(2, 50, status="down", labels={"env": "prod", "critical": ""})

    assert [probe.name for probe in page.probes] == ["api"]
    assert page.probes[0].id == uuid.UUID(PROBE_ID)
    request = stub.requests[0]
    assert request.url == "https://api.test/v1/probes"
    assert request.headers["X-API-Key"] == "se_test"
    assert request.headers["Accept"] == "application/json"
    assert request.params == {"page": 2, "limit": 50, "status": "down", "labels": "env=prod,critical"}


def test_list_retries_server_errors():
    stub = StubHttpClient({"GET /v1/probes": [json_response(503, {"message": "busy"}), json_response(200, {"probes": []})]})
    page = HttpProbeCollection(stub, _settings()).list(1, 100)
    assert page.probes == []
    assert len(stub.requests) == 2


def test_create_posts_json_and_unwraps_data():
    stub = StubHttpClient({"POST /v1/probes": [json_response(201, {"data": {"id": PROBE_ID, "name": "api"}})]})
    collection = HttpProbeCollection(stub, _settings())

    probe = collection.create(_create_request())

    assert probe.name == "api"
    request = stub.requests[0]
    assert request.method == "POST"
    assert request.headers["Content-Type"] == "application/json"
    body = json.loads(request.body)
    assert body["name"] == "api"
    assert body["follow_redirects"] is False
    assert "body" not in body


def test_create_is_never_retried():
    stub = StubHttpClient({"POST /v1/probes": [json_response(500, {"message": "internal error"}), json_response(201, {"name": "api"})]})

    with pytest.raises(TransportError) as excinfo:
        HttpProbeCollection(stub, _settings()).create(_create_request())

    assert str(excinfo.value) == "create probe: HTTP 500: internal error"
    assert excinfo.value.category is ErrorCategory.SERVER_ERROR
    assert excinfo.value.exit_code == 7
    assert len(stub.requests) == 1


def test_create_rejection_keeps_server_message():
    stub = StubHttpClient({"POST /v1/probes": [json_response(422, {"error": "url must be reachable"})]})
    with pytest.raises(TransportError) as excinfo:
        HttpProbeCollection(stub, _settings()).create(_create_request())
    assert str(excinfo.value) == "create probe: HTTP 422: url must be reachable"
    assert excinfo.value.status_code == 422


def test_get_not_found():
    stub = StubHttpClient({f"GET /v1/probes/{PROBE_ID}": [json_response(404, {"message": "probe not found"})]})
    with pytest.raises(TransportError) as excinfo:
        HttpProbeCollection(stub, _settings()).get(uuid.UUID(PROBE_ID))
    assert str(excinfo.value) == f"get probe {PROBE_ID}: HTTP 404: probe not found"
    assert excinfo.value.exit_code == 5


def test_get_returns_probe():
    stub = StubHttpClient({f"GET /v1/probes/{PROBE_ID}": [json_response(200, {"data": {"id": PROBE_ID, "name": "api", "headers": "{}"}})]})
    probe = HttpProbeCollection(stub, _settings()).get(uuid.UUID(PROBE_ID))
    assert probe.id == uuid.UUID(PROBE_ID)
    assert probe.headers == "{}"


def test_transport_failure_after_retries():
    stub = StubHttpClient()
    with pytest.raises(TransportError) as excinfo:
        HttpProbeCollection(stub, _settings()).list(1, 100)
    assert str(excinfo.value) == "list probes: No stubbed response configured"
    assert excinfo.value.status_code is None
    assert len(stub.requests) == 2


def test_invalid_json_body():
    stub = StubHttpClient({"GET /v1/probes": [HttpResponse(ok=True, status_code=200, text="<html>")]})
    with pytest.raises(TransportError) as excinfo:
        HttpProbeCollection(stub, _settings()).list(1, 100)
    assert "list probes: invalid JSON response" in str(excinfo.value)


def test_expired_deadline_sends_nothing():
    stub = StubHttpClient({"GET /v1/probes": [json_response(200, {"probes": []})]})
    now = [0.0]
    deadline = Deadline(30, clock=lambda: now[0])
    now[0] = 31.0

    with pytest.raises(DeadlineExceeded):
        HttpProbeCollection(stub, _settings()).list(1, 100, deadline=deadline)
    assert stub.requests == []


def test_context_manager_closes_transport():
    stub = StubHttpClient()
    with HttpProbeCollection(stub, _settings()):
        pass
    assert stub.closed is True


def test_format_label_filters():
    assert format_label_filters({"env": "prod", "critical": ""}) == "env=prod,critical"


def test_request_timeout_is_the_http_timeout_clamped_to_the_run():
    now = [0.0]
    stub = StubHttpClient(
        {
            "GET /v1/probes": [json_response(200, {"probes": []})],
            "POST /v1/probes": [json_response(201, {"name": "api"})],
            f"GET /v1/probes/{PROBE_ID}": [json_response(200, {"name": "api"})],
        }
    )
    collection = HttpProbeCollection(stub, _settings(timeout=30.0))
    deadline = Deadline(120, clock=lambda: now[0])

    collection.list(1, 100, deadline=deadline)
    collection.create(_create_request(), deadline=deadline)
    now[0] = 110.0
    collection.get(uuid.UUID(PROBE_ID), deadline=deadline)
    collection.list(1, 100)

    assert [request.timeout for request in stub.requests] == [30.0, 30.0, 10.0, 30.0]


def test_malformed_fields_become_transport_errors():
    stub = StubHttpClient({"POST /v1/probes": [json_response(201, {"name": "api", "timeout_ms": "abc"})]})

    with pytest.raises(TransportError) as excinfo:
        HttpProbeCollection(stub, _settings()).create(_create_request())

    assert str(excinfo.value).startswith("create probe: malformed response: ")


def test_malformed_page_becomes_transport_error():
    stub = StubHttpClient({"GET /v1/probes": [json_response(200, {"probes": [{"name": "api", "interval_seconds": [60]}]})]})

    with pytest.raises(TransportError) as excinfo:
        HttpProbeCollection(stub, _settings()).list(1, 100)

    assert str(excinfo.value).startswith("list probes: malformed response: ")


def test_transport_failure_keeps_exception_category():
    failure = HttpResponse(
        ok=False,
        error_message="timed out",
        error_type="SomethingOdd",
        meta={"error_category": ErrorCategory.TIMEOUT},
    )
    stub = StubHttpClient({"GET /v1/probes": [failure]})

    with pytest.raises(TransportError) as excinfo:
        HttpProbeCollection(stub, _settings(max_retries=1)).list(1, 100)

    assert excinfo.value.category is ErrorCategory.TIMEOUT
    assert excinfo.value.exit_code == 9
