"""Logs endpoint group.

Log listing supports both offset pagination and, through
:class:`~idm_client.utils.request_options.CheckpointPaginatedRequest`,
checkpoint pagination.
"""

from typing import Any, Mapping, Optional

import httpx

from ...utils.request_options import RequestOptions
from .endpoint import ManagementEndpoint, require


class Logs(ManagementEndpoint):
    """Read tenant log events."""

    def get_all(
        self,
        parameters: Optional[Mapping[str, Any]] = None,
        options: Optional[RequestOptions] = None,
    ) -> httpx.Response:
        return (
            self.get_http_client()
            .method("get")
            .add_path("logs")
            .with_params(parameters)
            .with_options(options)
            .call()
        )

    def get(self, log_id: str, options: Optional[RequestOptions] = None) -> httpx.Response:
        log_id = require(log_id, "id")
        return (
            self.get_http_client()
            .method("get")
            .add_path("logs", log_id)
            .with_options(options)
            .call()
        )
