"""Lazy iteration over paginated API list responses.

:class:`HttpResponsePaginator` wraps an
:class:`~idm_client.utils.http.client.HttpClient` whose last request was a
successful ``GET`` against a list endpoint, and exposes the complete
result set as a forward-only sequence. Further pages are requested on
demand, one at a time, as the consumer advances past the cached results.

Two pagination protocols are understood:

- Offset pagination: the API reports ``start``, ``limit`` and ``total``
  alongside one or more result arrays, and pages are requested with
  ``page=<n>``.
- Checkpoint pagination: the request carries ``from``/``take`` and the
  API returns an opaque ``next`` cursor until the results are exhausted.
  Only a fixed set of endpoints support it, and no total is reported.

Examples:
    >>> users.get_all(options=RequestOptions(pagination=PaginatedRequest(
    ...     per_page=50, include_totals=True)))
    >>> for user in users.get_response_paginator():
    ...     print(user["user_id"])
"""

import logging
import math
import re
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Pattern, Tuple, Union

import httpx

from ...exceptions import (
    NetworkError,
    PaginatorBadResponseError,
    PaginatorCannotCountError,
    PaginatorError,
    PaginatorUnsupportedEndpointError,
    PaginatorUnsupportedMethodError,
)
from .client import HttpClient
from .response import decode_content, was_successful

logger = logging.getLogger(__name__)

DEFAULT_PER_PAGE = 100

# Paths (relative to the API base path) that accept from/take parameters
CHECKPOINT_PAGINATION_ENDPOINTS: Tuple[Union[str, Pattern[str]], ...] = (
    "logs",
    "organizations",
    re.compile(r"^organizations/[^/]+/members$"),
    re.compile(r"^roles/[^/]+/users$"),
)

CHECKPOINT_PARAMS = ("from", "take")

# Payload keys describing the page itself rather than results
OFFSET_META_KEYS = ("start", "limit", "total", "length")


class PaginationMode(str, Enum):
    """Pagination protocol in use for a paginator."""

    OFFSET = "offset"
    CHECKPOINT = "checkpoint"


def supports_checkpoint_pagination(path: str) -> bool:
    """Return True when ``path`` is an endpoint accepting checkpoint params.

    :param path: Request path relative to the API base path
    :type path: str
    :return: Whether the endpoint is allow-listed
    :rtype: bool
    """
    path = path.strip("/")
    for endpoint in CHECKPOINT_PAGINATION_ENDPOINTS:
        if isinstance(endpoint, str):
            if path == endpoint:
                return True
        elif endpoint.match(path):
            return True
    return False


class HttpResponsePaginator:
    """Forward-only, lazily fetched view over a paginated list endpoint.

    The paginator is seeded from the most recent request made through
    ``http_client``. Construction validates that request and caches the
    results of its response; later pages are fetched by re-issuing the
    same request builder with one extra query parameter, so headers and
    filters set by the endpoint are preserved.

    Failures while fetching later pages are not raised: they end the
    iteration, leaving the results already cached readable.

    :param http_client: Client whose last request returned page one
    :type http_client: HttpClient
    :raises PaginatorUnsupportedMethodError: If the last request was not a GET
    :raises PaginatorBadResponseError: If the last response was unsuccessful
        or not a paginated payload
    :raises PaginatorUnsupportedEndpointError: If checkpoint parameters were
        used on an endpoint that does not support them
    """

    def __init__(self, http_client: HttpClient):
        self.http_client = http_client
        self.mode = PaginationMode.OFFSET
        self.position = 0
        self.request_limit = 0
        self.request_total = 0
        self.next_checkpoint: Optional[str] = None

        self._builder = http_client.get_last_request()
        self._results: Dict[int, Any] = {}
        self._appended = 0
        self._network_requests = 0
        self._exhausted = False

        if self._builder is None:
            logger.debug("No request has been issued; nothing to paginate")
            self._exhausted = True
            return

        request = self._builder.get_last_request()
        response = self._builder.get_last_response()

        if request is None or response is None:
            raise PaginatorBadResponseError()

        if request.method.lower() != "get":
            raise PaginatorUnsupportedMethodError(request.method)

        if not was_successful(response):
            raise PaginatorBadResponseError(response.status_code)

        if any(param in request.url.params for param in CHECKPOINT_PARAMS):
            path = self._builder.path
            if not supports_checkpoint_pagination(path):
                raise PaginatorUnsupportedEndpointError(path)
            self.mode = PaginationMode.CHECKPOINT

        logger.debug(
            "Paginating %s using %s pagination", self._builder.path, self.mode.value
        )
        self._process_response(response, strict=True)

    def count_network_requests(self) -> int:
        """Number of requests issued by the paginator after the seed request."""
        return self._network_requests

    def count(self) -> int:
        """Return the total number of results reported by the API.

        :raises PaginatorCannotCountError: In checkpoint mode, where the API
            never reports a total
        """
        if self.mode is PaginationMode.CHECKPOINT:
            raise PaginatorCannotCountError()
        return self.request_total

    def current(self) -> Any:
        """Return the cached result at the current position, or None."""
        return self._results.get(self.position)

    def key(self) -> Optional[int]:
        """Return the current position when a result is cached there."""
        return self.position if self.position in self._results else None

    def next(self) -> None:
        self.position += 1

    def rewind(self) -> None:
        """Reset the position to the first result without refetching."""
        self.position = 0

    def valid(self) -> bool:
        """Return True if a result is available at the current position.

        When nothing is cached at the position but the API indicated more
        results exist, the next page is requested first.
        """
        if self.position in self._results:
            return True

        if self._exhausted:
            return False

        if self.mode is PaginationMode.CHECKPOINT:
            if self.next_checkpoint is None:
                return False
            return self._get_next_results()

        if self.position < self.request_total:
            return self._get_next_results()

        return False

    def __iter__(self) -> Iterator[Any]:
        self.rewind()
        while self.valid():
            yield self.current()
            self.next()

    def __len__(self) -> int:
        return self.count()

    def _get_next_results(self) -> bool:
        """Request the page holding the current position."""
        if self.mode is PaginationMode.CHECKPOINT:
            self._builder.with_param("from", self.next_checkpoint)
        else:
            if self.request_limit <= 0:
                logger.debug("No page size reported; cannot request further pages")
                self._exhausted = True
                return False
            self._builder.with_param(
                "page", math.ceil(self.position / self.request_limit)
            )

        fetched = self._fetch(strict=False)
        if not fetched:
            self._exhausted = True
        return fetched

    def _reset_results(self) -> bool:
        """Re-issue the seed request with the parameters offset paging needs.

        Triggered when the seed response was not wrapped in a totals
        object, which happens when ``include_totals`` was not requested.
        """
        params = self._builder.params
        if params.get("page") in (None, ""):
            self._builder.with_param("page", 0)
        if params.get("per_page") in (None, ""):
            self._builder.with_param("per_page", DEFAULT_PER_PAGE)
        self._builder.with_param("include_totals", True)

        logger.debug("Re-issuing %s with include_totals", self._builder.path)
        return self._fetch(strict=True)

    def _fetch(self, strict: bool) -> bool:
        self._network_requests += 1
        logger.debug(
            "Requesting %s (paginated request #%d)",
            self._builder.get_url(),
            self._network_requests,
        )
        try:
            response = self._builder.call()
        except NetworkError as e:
            logger.warning("Stopping pagination after network failure: %s", e)
            return False
        return self._process_response(response, strict=strict)

    def _reject(self, error: PaginatorError, strict: bool) -> bool:
        if strict:
            raise error
        logger.warning("Stopping pagination: %s", error.message)
        return False

    def _process_response(self, response: httpx.Response, strict: bool) -> bool:
        """Cache the results carried by ``response``.

        :return: Whether at least one result was cached
        """
        if not was_successful(response):
            return self._reject(PaginatorBadResponseError(response.status_code), strict)

        try:
            payload = decode_content(response)
        except ValueError:
            return self._reject(PaginatorBadResponseError(response.status_code), strict)

        if not payload:
            return False

        if self.mode is PaginationMode.CHECKPOINT:
            return self._process_checkpoint_payload(payload)
        return self._process_offset_payload(payload, strict)

    def _process_offset_payload(self, payload: Any, strict: bool) -> bool:
        if not isinstance(payload, dict) or payload.get("start") is None:
            if strict and self._builder.params.get("include_totals") != "true":
                return self._reset_results()
            return self._reject(PaginatorBadResponseError(), strict)

        try:
            start = int(payload["start"])
            limit = int(payload.get("limit", self.request_limit))
            total = int(payload.get("total", self.request_total))
        except (TypeError, ValueError):
            return self._reject(PaginatorBadResponseError(), strict)

        self.request_limit = limit
        self.request_total = total
        had_results = False

        for key, value in payload.items():
            if key not in OFFSET_META_KEYS and isinstance(value, list):
                for index, result in enumerate(value):
                    self._results[start + index] = result
                    had_results = True

        return had_results

    def _process_checkpoint_payload(self, payload: Any) -> bool:
        if isinstance(payload, list):
            self.next_checkpoint = None
            return self._append_results(payload)

        if not isinstance(payload, dict):
            self.next_checkpoint = None
            return False

        self.next_checkpoint = payload.get("next") or None
        had_results = False
        for key, value in payload.items():
            if key != "next" and isinstance(value, list):
                had_results = self._append_results(value) or had_results
        return had_results

    def _append_results(self, results: list) -> bool:
        for result in results:
            self._results[self._appended] = result
            self._appended += 1
        return bool(results)
