"""Jobs endpoint group."""

import os
from typing import Any, Mapping, Optional, Union

import httpx

from ...utils.request_options import RequestOptions
from .endpoint import ManagementEndpoint, require


class Jobs(ManagementEndpoint):
    """Start bulk user jobs."""

    def create_import_users(
        self,
        file_path: Union[str, os.PathLike],
        connection_id: str,
        parameters: Optional[Mapping[str, Any]] = None,
        options: Optional[RequestOptions] = None,
    ) -> httpx.Response:
        """Upload a JSON file of users to import into a connection.

        The file is sent as the ``users`` field of a multipart body, with
        ``connection_id`` and any ``parameters`` as additional form fields.

        :param file_path: Path of the users file to upload
        :type file_path: Union[str, os.PathLike]
        :param connection_id: Connection the users are imported into
        :type connection_id: str
        :param parameters: Extra form fields such as ``upsert``
        :type parameters: Optional[Mapping[str, Any]]
        :param options: Optional request options
        :type options: Optional[RequestOptions]
        :return: API response
        :rtype: httpx.Response
        :raises ArgumentError: If ``file_path`` or ``connection_id`` is empty
        """
        file_path = require(os.fspath(file_path) if file_path else None, "filePath")
        connection_id = require(connection_id, "connectionId")

        return (
            self.get_http_client()
            .method("post")
            .add_path("jobs", "users-imports")
            .add_file("users", file_path)
            .with_form_param("connection_id", connection_id)
            .with_form_params(parameters)
            .with_options(options)
            .call()
        )
