"""Unit tests for the request builder.

This module tests URL and query string construction, body encoding,
form and multipart payloads, mock dispatch and transport error handling.
"""

import base64
import json

import httpx
import pytest

from idm_client.exceptions import NetworkError
from idm_client.utils.http import HttpClient, HttpRequest
from idm_client.utils.request_options import (
    FilteredRequest,
    PaginatedRequest,
    RequestOptions,
)


pytestmark = pytest.mark.unit


def test_url_joins_trimmed_path_segments(client):
    request = client.method("get").add_path("users", " auth0|123 ", None, "roles")
    assert request.path == "users/auth0|123/roles"
    assert request.get_url() == "users/auth0|123/roles"


def test_query_string_uses_rfc3986_encoding(client):
    request = client.method("get").add_path("users").with_param("q", 'email:"a b"')
    assert request.get_params() == "?q=email%3A%22a%20b%22"


def test_bool_params_are_sent_as_strings(client):
    request = (
        client.method("get")
        .with_param("include_totals", True)
        .with_param("include_fields", False)
    )
    assert request.params == {"include_totals": "true", "include_fields": "false"}


def test_zero_is_kept_but_empty_and_none_are_omitted(client):
    request = (
        client.method("get")
        .with_param("page", 0)
        .with_param("sort", "")
        .with_param("q", None)
    )
    assert request.get_params() == "?page=0"


def test_with_param_none_clears_existing_value(client):
    request = client.method("get").with_param("from", "abc").with_param("from", None)
    assert request.get_params() == ""


def test_with_params_ignores_none_values(client):
    request = (
        client.method("get")
        .with_param("q", "keep")
        .with_params({"q": None, "sort": "name:1"})
    )
    assert request.params == {"q": "keep", "sort": "name:1"}


def test_options_do_not_override_explicit_params(client):
    options = RequestOptions(
        fields=FilteredRequest(fields=["email", "name", "email"], include_fields=True),
        pagination=PaginatedRequest(page=2, per_page=25, include_totals=True),
    )
    request = client.method("get").with_param("page", 7).with_options(options)

    assert request.params == {
        "page": 7,
        "fields": "email,name",
        "include_fields": "true",
        "per_page": 25,
        "include_totals": "true",
    }


def test_headers_replace_case_insensitively(client):
    request = client.method("get").with_header("X-Trace", "1").with_header("x-trace", "2")
    assert request.headers == {"x-trace": "2"}


@pytest.mark.parametrize(
    "body,json_encode,expected",
    [
        ({"name": "x"}, True, '{"name": "x"}'),
        ([1, 2], False, "[1, 2]"),
        ("plain", False, "plain"),
        ("plain", True, '"plain"'),
        (None, True, ""),
    ],
)
def test_body_encoding(client, body, json_encode, expected):
    request = client.method("post").with_body(body, json_encode=json_encode)
    assert request._body == expected


def test_body_accepts_pydantic_models(client):
    options = PaginatedRequest(per_page=5)
    request = client.method("post").with_body(options)
    assert json.loads(request._body) == {"per_page": 5}


def test_call_sends_expected_wire_request(client, json_response):
    client.mock_response(json_response({"user_id": "123"}))

    response = (
        client.method("post")
        .add_path("users")
        .with_param("send_email", False)
        .with_body({"email": "a@example.com"})
        .call()
    )

    sent = client.get_last_request().get_last_request()
    assert response.json() == {"user_id": "123"}
    assert sent.method == "POST"
    assert str(sent.url) == "https://tenant.example.com/api/v2/users?send_email=false"
    assert sent.headers["content-type"] == "application/json"
    assert json.loads(sent.content) == {"email": "a@example.com"}
    assert response.request is sent


def test_form_params_are_url_encoded(client, json_response):
    client.mock_response(json_response({}))

    client.method("post").with_form_params(
        {"grant_type": "client_credentials", "scope": "read:users write", "skip": None}
    ).call()

    sent = client.get_last_request().get_last_request()
    assert sent.headers["content-type"] == "application/x-www-form-urlencoded"
    assert sent.content == b"grant_type=client_credentials&scope=read%3Ausers+write"


def test_files_are_sent_as_multipart(client, json_response, tmp_path):
    users_file = tmp_path / "users.json"
    users_file.write_text('[{"email": "a@example.com"}]')
    client.mock_response(json_response({"id": "job_1"}))

    (
        client.method("post")
        .add_path("jobs", "users-imports")
        .add_file("users", users_file)
        .with_form_param("connection_id", "con_1")
        .with_form_param("upsert", True)
        .call()
    )

    sent = client.get_last_request().get_last_request()
    content_type = sent.headers["content-type"]
    assert content_type.startswith("multipart/form-data; boundary=")
    boundary = content_type.split("boundary=", 1)[1]
    body = sent.content
    assert boundary.encode() in body
    assert b'name="users"; filename="users.json"' in body
    assert b'[{"email": "a@example.com"}]' in body
    assert b'name="connection_id"' in body
    assert b"con_1" in body
    assert b'name="upsert"' in body


def test_unreadable_files_are_skipped(client, json_response, tmp_path):
    client.mock_response(json_response({}))

    (
        client.method("post")
        .add_file("users", tmp_path / "missing.json")
        .with_form_param("connection_id", "con_1")
        .call()
    )

    sent = client.get_last_request().get_last_request()
    assert sent.headers["content-type"] == "application/x-www-form-urlencoded"
    assert sent.content == b"connection_id=con_1"


def test_telemetry_header_is_sent_when_enabled(client, json_response):
    client.mock_response(json_response({}))
    client.method("get").call()

    sent = client.get_last_request().get_last_request()
    telemetry = json.loads(base64.b64decode(sent.headers["client-telemetry"]))
    assert telemetry["name"] == "idm-client"
    assert "python" in telemetry["env"]


def test_telemetry_header_can_be_disabled(monkeypatch, json_response):
    monkeypatch.setenv("IDM_HTTP_TELEMETRY", "false")
    client = HttpClient()
    client.mock_response(json_response({}))
    client.method("get").call()

    sent = client.get_last_request().get_last_request()
    assert "client-telemetry" not in sent.headers


def test_request_count_and_last_records(client, json_response):
    request = client.method("get").add_path("users")
    assert request.request_count == 0
    assert request.get_last_request() is None
    assert request.get_last_response() is None

    client.mock_response(json_response([], status_code=200))
    client.mock_response(json_response({"error": "x"}, status_code=429))
    request.call()
    second = request.call()

    assert request.request_count == 2
    assert request.get_last_response() is second
    assert second.status_code == 429


def test_mock_callback_receives_request_and_response(client, json_response):
    seen = []
    client.mock_response(
        json_response({"ok": True}),
        callback=lambda request, response: seen.append((request.url.path, response.status_code)),
    )

    client.method("get").add_path("stats").call()

    assert seen == [("/api/v2/stats", 200)]


def test_mocked_transport_error_becomes_network_error(client, json_response):
    client.mock_response(json_response({}), exception=httpx.ConnectError("refused"))

    with pytest.raises(NetworkError) as exc_info:
        client.method("get").add_path("users").call()

    assert "refused" in exc_info.value.message
    assert exc_info.value.code == "NETWORK_ERROR"
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


def test_other_mocked_exceptions_propagate(client, json_response):
    client.mock_response(json_response({}), exception=RuntimeError("boom"))

    with pytest.raises(RuntimeError, match="boom"):
        client.method("get").call()


def test_real_transport_is_used_without_mocks(settings, mock_transport):
    transport = mock_transport(lambda request: httpx.Response(200, json={"id": "r1"}))
    client = HttpClient(settings, base_path="api/v2", transport=transport)

    response = client.method("get").add_path("roles", "r1").with_param("x", 1).call()

    assert response.json() == {"id": "r1"}
    assert str(transport.sent[0].url) == "https://tenant.example.com/api/v2/roles/r1?x=1"


def test_transport_failure_raises_network_error(settings, mock_transport):
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    client = HttpClient(settings, transport=mock_transport(handler))
    request = client.method("get").add_path("users")

    with pytest.raises(NetworkError):
        request.call()

    assert request.request_count == 1
    assert request.get_last_response() is None


def test_event_hooks_run_for_request_and_response(settings, json_response):
    events = []
    client = HttpClient(
        settings,
        event_hooks={
            "request": [lambda request: events.append(("request", request.method))],
            "response": [lambda response: events.append(("response", response.status_code))],
        },
    )
    client.mock_response(json_response({}, status_code=204))

    client.method("delete").add_path("users", "1").call()

    assert events == [("request", "DELETE"), ("response", 204)]


def test_builder_can_be_used_without_a_client(settings, mock_transport):
    transport = mock_transport(lambda request: httpx.Response(200, text="ok"))
    request = HttpRequest(settings, "GET", base_path="/", transport=transport)

    assert request.method == "get"
    assert request.call().text == "ok"
    assert str(transport.sent[0].url) == "https://tenant.example.com/"
