"""Request option models for field filtering and pagination.

These models describe common query-string scenarios shared by list
endpoints. Each exposes ``build()`` returning the query parameters it
represents, ready to merge into an :class:`~idm_client.utils.http.HttpRequest`.
"""

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

ParamValue = Union[int, str]


class FilteredRequest(BaseModel):
    """Fields to include in or exclude from API responses.

    :param fields: Field names to filter on
    :type fields: Optional[List[str]]
    :param include_fields: True to include ``fields``, False to exclude them
    :type include_fields: Optional[bool]
    """

    fields: Optional[List[str]] = None
    include_fields: Optional[bool] = None

    def build(self) -> Dict[str, ParamValue]:
        params: Dict[str, ParamValue] = {}
        if self.fields:
            params["fields"] = ",".join(dict.fromkeys(self.fields))
            if self.include_fields is not None:
                params["include_fields"] = "true" if self.include_fields else "false"
        return params


class PaginatedRequest(BaseModel):
    """Offset pagination parameters.

    Paging is only requested when ``per_page`` is set; ``page`` then
    defaults to the first page.

    :param page: Zero-based page index
    :type page: Optional[int]
    :param per_page: Number of results per page
    :type per_page: Optional[int]
    :param include_totals: Wrap results in an object reporting totals
    :type include_totals: Optional[bool]
    """

    page: Optional[int] = Field(None, ge=0)
    per_page: Optional[int] = Field(None, ge=1)
    include_totals: Optional[bool] = None

    def build(self) -> Dict[str, ParamValue]:
        params: Dict[str, ParamValue] = {}
        if self.per_page is not None:
            params["page"] = self.page or 0
            params["per_page"] = self.per_page
            if self.include_totals is not None:
                params["include_totals"] = "true" if self.include_totals else "false"
        return params


class CheckpointPaginatedRequest(BaseModel):
    """Checkpoint (cursor) pagination parameters.

    :param from_: Opaque cursor returned as ``next`` by a previous page
    :type from_: Optional[str]
    :param take: Number of results per page
    :type take: Optional[int]
    """

    model_config = ConfigDict(populate_by_name=True)

    from_: Optional[str] = Field(None, alias="from")
    take: Optional[int] = Field(None, ge=1)

    def build(self) -> Dict[str, ParamValue]:
        params: Dict[str, ParamValue] = {}
        if self.from_:
            params["from"] = self.from_
        if self.take is not None:
            params["take"] = self.take
        return params


class RequestOptions(BaseModel):
    """Combined field filtering and pagination options."""

    fields: Optional[FilteredRequest] = None
    pagination: Optional[Union[PaginatedRequest, CheckpointPaginatedRequest]] = None

    def build(self) -> Dict[str, ParamValue]:
        params: Dict[str, ParamValue] = {}
        for option in (self.fields, self.pagination):
            if option is None:
                continue
            for key, value in option.build().items():
                params.setdefault(key, value)
        return params
