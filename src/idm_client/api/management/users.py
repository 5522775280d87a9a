"""Users endpoint group."""

from typing import Any, Dict, Mapping, Optional

import httpx

from ...exceptions import ArgumentError
from ...utils.request_options import RequestOptions
from .endpoint import ManagementEndpoint, require


class Users(ManagementEndpoint):
    """Create, read, update and delete users."""

    def create(
        self,
        connection: str,
        body: Mapping[str, Any],
        options: Optional[RequestOptions] = None,
    ) -> httpx.Response:
        """Create a user in a database or passwordless connection.

        :param connection: Name of the connection the user belongs to
        :type connection: str
        :param body: Additional user attributes
        :type body: Mapping[str, Any]
        :param options: Optional field filtering and pagination
        :type options: Optional[RequestOptions]
        :return: API response
        :rtype: httpx.Response
        :raises ArgumentError: If ``connection`` or ``body`` is empty
        """
        connection = require(connection, "connection")
        if not body:
            raise ArgumentError.missing("body")

        payload: Dict[str, Any] = {"connection": connection}
        payload.update(body)

        return (
            self.get_http_client()
            .method("post")
            .add_path("users")
            .with_body(payload)
            .with_options(options)
            .call()
        )

    def get_all(
        self,
        parameters: Optional[Mapping[str, Any]] = None,
        options: Optional[RequestOptions] = None,
    ) -> httpx.Response:
        """List or search users.

        :param parameters: Query parameters such as ``q`` or ``sort``
        :param options: Optional field filtering and pagination
        """
        return (
            self.get_http_client()
            .method("get")
            .add_path("users")
            .with_params(parameters)
            .with_options(options)
            .call()
        )

    def get(self, user_id: str, options: Optional[RequestOptions] = None) -> httpx.Response:
        user_id = require(user_id, "id")
        return (
            self.get_http_client()
            .method("get")
            .add_path("users", user_id)
            .with_options(options)
            .call()
        )

    def update(
        self,
        user_id: str,
        body: Mapping[str, Any],
        options: Optional[RequestOptions] = None,
    ) -> httpx.Response:
        user_id = require(user_id, "id")
        if not body:
            raise ArgumentError.missing("body")
        return (
            self.get_http_client()
            .method("patch")
            .add_path("users", user_id)
            .with_body(dict(body))
            .with_options(options)
            .call()
        )

    def delete(self, user_id: str, options: Optional[RequestOptions] = None) -> httpx.Response:
        user_id = require(user_id, "id")
        return (
            self.get_http_client()
            .method("delete")
            .add_path("users", user_id)
            .with_options(options)
            .call()
        )
