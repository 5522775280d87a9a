"""Management API client.

:class:`Management` configures an :class:`~idm_client.utils.http.HttpClient`
for the management API and hands it to each endpoint group, so every
group shares headers, transport and mock queue.

Examples:
    >>> management = Management("token")
    >>> management.users().get_all(options=RequestOptions(
    ...     pagination=PaginatedRequest(per_page=50, include_totals=True)))
    >>> for user in management.users().get_response_paginator():
    ...     print(user["email"])
"""

import logging
from typing import Optional

import httpx

from ...config.settings import Settings
from ...exceptions import ConfigurationError
from ...utils.http import HttpClient
from .endpoint import ManagementEndpoint
from .jobs import Jobs
from .logs import Logs
from .organizations import Organizations
from .roles import Roles
from .users import Users

logger = logging.getLogger(__name__)

MANAGEMENT_BASE_PATH = "/api/v2/"


class Management:
    """Entry point for management API endpoint groups.

    :param token: Management API access token; defaults to
        ``settings.management_token``
    :type token: Optional[str]
    :param settings: Client configuration; loaded from the environment if omitted
    :type settings: Optional[Settings]
    :param transport: Optional transport used instead of the shared client
    :type transport: Optional[httpx.Client]
    :raises ConfigurationError: If no token is available
    """

    def __init__(
        self,
        token: Optional[str] = None,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.Client] = None,
    ):
        self.settings = settings or Settings()
        token = token or self.settings.management_token
        if not token:
            raise ConfigurationError(
                "A management API token is required.", setting="management_token"
            )

        self._http_client = HttpClient(
            self.settings,
            base_path=MANAGEMENT_BASE_PATH,
            headers={"Authorization": f"Bearer {token}"},
            transport=transport,
        )
        self._endpoints = {}

    def get_http_client(self) -> HttpClient:
        return self._http_client

    def _endpoint(self, cls):
        if cls not in self._endpoints:
            self._endpoints[cls] = cls(self._http_client)
        return self._endpoints[cls]

    def users(self) -> Users:
        return self._endpoint(Users)

    def logs(self) -> Logs:
        return self._endpoint(Logs)

    def roles(self) -> Roles:
        return self._endpoint(Roles)

    def organizations(self) -> Organizations:
        return self._endpoint(Organizations)

    def jobs(self) -> Jobs:
        return self._endpoint(Jobs)


__all__ = [
    "Management",
    "ManagementEndpoint",
    "MANAGEMENT_BASE_PATH",
    "Users",
    "Logs",
    "Roles",
    "Organizations",
    "Jobs",
]
