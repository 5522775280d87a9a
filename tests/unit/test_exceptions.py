"""Tests for structured client exceptions."""

import json

import pytest

from idm_client.exceptions import (
    ArgumentError,
    IdmClientError,
    NetworkError,
    PaginatorBadResponseError,
    PaginatorCannotCountError,
    PaginatorError,
    PaginatorUnsupportedEndpointError,
)


pytestmark = pytest.mark.unit


def test_to_dict_and_json():
    error = IdmClientError("Something failed", code="X", details={"a": 1})
    assert error.to_dict() == {"error": "X", "message": "Something failed", "details": {"a": 1}}
    assert json.loads(error.to_json())["error"] == "X"
    assert str(error) == "Something failed"


def test_network_error_factories():
    error = NetworkError.request_failed("connection refused")
    assert error.message == "Unable to complete network request; connection refused"
    assert error.details == {"transport_message": "connection refused"}


def test_paginator_errors():
    bad = PaginatorBadResponseError(500)
    assert isinstance(bad, PaginatorError)
    assert bad.code == "PAGINATOR_BAD_RESPONSE"
    assert bad.details == {"status_code": 500}

    endpoint = PaginatorUnsupportedEndpointError("users")
    assert "users" in endpoint.message

    cannot_count = PaginatorCannotCountError()
    assert isinstance(cannot_count, PaginatorError)
    assert isinstance(cannot_count, TypeError)


def test_argument_error_missing():
    error = ArgumentError.missing("id")
    assert error.message == "id cannot be empty."
    assert error.argument == "id"
