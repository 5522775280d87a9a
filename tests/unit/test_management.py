"""Unit tests for the management API endpoint groups."""

import json

import httpx
import pytest

from idm_client.api import Management
from idm_client.exceptions import ArgumentError, ConfigurationError
from idm_client.utils.http import HttpResponsePaginator, PaginationMode
from idm_client.utils.request_options import (
    CheckpointPaginatedRequest,
    PaginatedRequest,
    RequestOptions,
)


pytestmark = pytest.mark.unit


@pytest.fixture
def management():
    return Management()


def last_sent(management):
    return management.get_http_client().get_last_request().get_last_request()


def test_token_defaults_to_settings(management, json_response):
    management.get_http_client().mock_response(json_response({}))
    management.users().get("auth0_1")

    sent = last_sent(management)
    assert sent.headers["authorization"] == "Bearer test-management-token"
    assert str(sent.url) == "https://tenant.example.com/api/v2/users/auth0_1"


def test_explicit_token_wins(json_response):
    management = Management("other-token")
    management.get_http_client().mock_response(json_response({}))
    management.logs().get("log_1")

    assert last_sent(management).headers["authorization"] == "Bearer other-token"


def test_missing_token_raises(monkeypatch):
    monkeypatch.delenv("IDM_MANAGEMENT_TOKEN")
    with pytest.raises(ConfigurationError):
        Management()


def test_endpoint_groups_share_one_client(management):
    assert management.users() is management.users()
    assert management.users().get_http_client() is management.logs().get_http_client()


def test_users_get_all_with_options(management, json_response):
    management.get_http_client().mock_response(json_response([]))
    management.users().get_all(
        {"q": "email:a", "sort": None},
        RequestOptions(pagination=PaginatedRequest(per_page=50, include_totals=True)),
    )

    params = last_sent(management).url.params
    assert dict(params) == {
        "q": "email:a",
        "page": "0",
        "per_page": "50",
        "include_totals": "true",
    }


def test_users_create_merges_connection(management, json_response):
    management.get_http_client().mock_response(json_response({"user_id": "1"}, 201))
    response = management.users().create("Username-Password", {"email": "a@example.com"})

    sent = last_sent(management)
    assert response.status_code == 201
    assert sent.method == "POST"
    assert json.loads(sent.content) == {
        "connection": "Username-Password",
        "email": "a@example.com",
    }


def test_users_update_and_delete(management, json_response):
    client = management.get_http_client()
    client.mock_response(json_response({})).mock_response(json_response(None, 204))

    management.users().update("1", {"blocked": True})
    assert last_sent(management).method == "PATCH"
    assert json.loads(last_sent(management).content) == {"blocked": True}

    management.users().delete("1")
    assert last_sent(management).method == "DELETE"
    assert last_sent(management).url.path == "/api/v2/users/1"


@pytest.mark.parametrize(
    "call",
    [
        lambda m: m.users().get(""),
        lambda m: m.users().get("   "),
        lambda m: m.users().create("", {"email": "a"}),
        lambda m: m.users().create("db", {}),
        lambda m: m.users().update("1", {}),
        lambda m: m.users().delete(None),
        lambda m: m.logs().get(""),
        lambda m: m.roles().get_users(""),
        lambda m: m.organizations().get_members(""),
        lambda m: m.jobs().create_import_users("", "con_1"),
        lambda m: m.jobs().create_import_users("users.json", ""),
    ],
)
def test_missing_arguments_raise(management, call):
    with pytest.raises(ArgumentError):
        call(management)
    assert management.get_http_client().get_last_request() is None


def test_jobs_import_users_uploads_file(management, json_response, tmp_path):
    users_file = tmp_path / "import.json"
    users_file.write_text("[]")
    management.get_http_client().mock_response(json_response({"id": "job_1"}, 201))

    management.jobs().create_import_users(users_file, "con_1", {"upsert": True})

    sent = last_sent(management)
    assert sent.url.path == "/api/v2/jobs/users-imports"
    assert sent.headers["content-type"].startswith("multipart/form-data")
    assert b'filename="import.json"' in sent.content
    assert b'name="upsert"' in sent.content


def test_users_paginator(management, json_response):
    client = management.get_http_client()
    client.mock_response(json_response({"start": 0, "limit": 1, "total": 2, "users": [1]}))
    client.mock_response(json_response({"start": 1, "limit": 1, "total": 2, "users": [2]}))

    users = management.users()
    users.get_all(options=RequestOptions(pagination=PaginatedRequest(per_page=1, include_totals=True)))
    paginator = users.get_response_paginator()

    assert isinstance(paginator, HttpResponsePaginator)
    assert users.get_last_request() is client.get_last_request()
    assert list(paginator) == [1, 2]
    assert len(paginator) == 2


def test_logs_checkpoint_paginator(management, json_response):
    client = management.get_http_client()
    client.mock_response(json_response({"next": "c1", "logs": ["a"]}))
    client.mock_response(json_response({"logs": ["b"]}))

    logs = management.logs()
    logs.get_all(options=RequestOptions(pagination=CheckpointPaginatedRequest(take=1)))
    paginator = logs.get_response_paginator()

    assert paginator.mode is PaginationMode.CHECKPOINT
    assert list(paginator) == ["a", "b"]


def test_roles_and_organizations_support_checkpoints(management, json_response):
    client = management.get_http_client()
    client.mock_response(json_response({"users": ["u1"]}))
    management.roles().get_users(
        "rol_1", RequestOptions(pagination=CheckpointPaginatedRequest(take=10))
    )
    assert list(management.roles().get_response_paginator()) == ["u1"]

    client.mock_response(json_response({"organizations": ["o1"]}))
    management.organizations().get_all(
        RequestOptions(pagination=CheckpointPaginatedRequest(take=10))
    )
    assert list(management.organizations().get_response_paginator()) == ["o1"]


def test_management_uses_supplied_transport(mock_transport):
    transport = mock_transport(lambda request: httpx.Response(200, json=[]))
    management = Management("token", transport=transport)

    management.organizations().get_members("org_1")

    assert transport.sent[0].url.path == "/api/v2/organizations/org_1/members"
