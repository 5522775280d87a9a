"""Base class shared by management API endpoint groups."""

import logging
from typing import Optional

from ...exceptions import ArgumentError
from ...utils.http import HttpClient, HttpRequest, HttpResponsePaginator

logger = logging.getLogger(__name__)


def require(value: Optional[str], argument: str) -> str:
    """Return ``value`` stripped of whitespace, or raise if it is empty.

    :param value: Argument value supplied by the caller
    :type value: Optional[str]
    :param argument: Argument name used in the error message
    :type argument: str
    :return: The trimmed value
    :rtype: str
    :raises ArgumentError: If the value is None or blank
    """
    if value is None or not str(value).strip():
        raise ArgumentError.missing(argument)
    return str(value).strip()


class ManagementEndpoint:
    """Endpoint group issuing requests through a shared :class:`HttpClient`.

    :param http_client: Client used to create request builders
    :type http_client: HttpClient
    """

    def __init__(self, http_client: HttpClient):
        self._http_client = http_client

    def get_http_client(self) -> HttpClient:
        return self._http_client

    def get_last_request(self) -> Optional[HttpRequest]:
        """Return the builder for the most recently issued request."""
        return self._http_client.get_last_request()

    def get_response_paginator(self) -> HttpResponsePaginator:
        """Return a paginator seeded with the most recent request.

        :raises PaginatorError: If the last request cannot be paginated
        """
        return HttpResponsePaginator(self._http_client)
