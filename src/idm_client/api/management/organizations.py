"""Organizations endpoint group."""

from typing import Optional

import httpx

from ...utils.request_options import RequestOptions
from .endpoint import ManagementEndpoint, require


class Organizations(ManagementEndpoint):
    """List organizations and their members."""

    def get_all(self, options: Optional[RequestOptions] = None) -> httpx.Response:
        return (
            self.get_http_client()
            .method("get")
            .add_path("organizations")
            .with_options(options)
            .call()
        )

    def get_members(
        self, organization_id: str, options: Optional[RequestOptions] = None
    ) -> httpx.Response:
        organization_id = require(organization_id, "id")
        return (
            self.get_http_client()
            .method("get")
            .add_path("organizations", organization_id, "members")
            .with_options(options)
            .call()
        )
