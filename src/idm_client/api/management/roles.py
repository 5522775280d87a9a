"""Roles endpoint group."""

from typing import Optional

import httpx

from ...utils.request_options import RequestOptions
from .endpoint import ManagementEndpoint, require


class Roles(ManagementEndpoint):
    """Read role assignments."""

    def get_users(self, role_id: str, options: Optional[RequestOptions] = None) -> httpx.Response:
        """List the users assigned to a role.

        :param role_id: Role identifier
        :type role_id: str
        :param options: Optional field filtering and pagination
        :type options: Optional[RequestOptions]
        :return: API response
        :rtype: httpx.Response
        :raises ArgumentError: If ``role_id`` is empty
        """
        role_id = require(role_id, "id")
        return (
            self.get_http_client()
            .method("get")
            .add_path("roles", role_id, "users")
            .with_options(options)
            .call()
        )
