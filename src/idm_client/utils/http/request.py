"""Fluent builder for a single API request.

This module provides :class:`HttpRequest`, a mutable representation of
one not-yet-sent HTTP request. Endpoint code accumulates path segments,
headers, query and form parameters, file attachments and a body, then
calls :meth:`HttpRequest.call` to dispatch it through the configured
transport (or a queued mock response) and keep a record of exactly what
was sent and received.
"""

import json
import logging
import os
import secrets
from collections import deque
from typing import Any, Callable, Deque, Dict, List, Mapping, Optional, Tuple, Union
from urllib.parse import quote, urlencode

import httpx
from pydantic import BaseModel

from ...config.settings import Settings
from ...exceptions import NetworkError
from ..request_options import (
    CheckpointPaginatedRequest,
    FilteredRequest,
    PaginatedRequest,
    RequestOptions,
)
from ..security import sanitize_headers, sanitize_url
from .client_manager import get_http_client
from .telemetry import TELEMETRY_HEADER, HttpTelemetry

logger = logging.getLogger(__name__)

ParamValue = Union[bool, int, float, str]
EventHooks = Mapping[str, List[Callable[..., Any]]]


def _prepare_bool_param(value: Any) -> Any:
    """Translate a boolean into the string form the API expects."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def _set_header(headers: Dict[str, str], name: str, value: str) -> None:
    """Set a header, replacing any existing entry regardless of case."""
    for existing in [k for k in headers if k.lower() == name.lower()]:
        del headers[existing]
    headers[name] = value


class HttpRequest:
    """One API request under construction.

    Instances are normally created by
    :meth:`~idm_client.utils.http.client.HttpClient.method`, which seeds
    the base path, shared headers, transport and mock queue. All ``with_*``
    and ``add_*`` methods return ``self`` for chaining.

    :param settings: Shared client configuration
    :type settings: Settings
    :param method: HTTP verb, stored lower-cased
    :type method: str
    :param base_path: Base URI path the built path is appended to
    :type base_path: str
    :param headers: Headers to send with the request
    :type headers: Optional[Dict[str, str]]
    :param mocked_responses: Shared queue of mocked responses, for testing
    :type mocked_responses: Optional[Deque]
    :param transport: Object exposing ``send(httpx.Request) -> httpx.Response``
    :type transport: Optional[httpx.Client]
    :param event_hooks: ``{"request": [...], "response": [...]}`` callables
    :type event_hooks: Optional[EventHooks]

    .. example::
       >>> response = client.method("get").add_path("users", user_id).call()
    """

    def __init__(
        self,
        settings: Settings,
        method: str,
        base_path: str = "/",
        headers: Optional[Dict[str, str]] = None,
        mocked_responses: Optional[Deque] = None,
        transport: Optional[httpx.Client] = None,
        event_hooks: Optional[EventHooks] = None,
    ):
        self.settings = settings
        self.method = method.lower()
        self.base_path = base_path
        self.transport = transport
        self.event_hooks = event_hooks or {}

        self._headers: Dict[str, str] = {}
        self._path: List[str] = []
        self._params: Dict[str, Optional[ParamValue]] = {}
        self._form_params: Dict[str, ParamValue] = {}
        self._files: Dict[str, str] = {}
        self._body = ""
        self._count = 0
        self._last_request: Optional[httpx.Request] = None
        self._last_response: Optional[httpx.Response] = None
        self._mocked_responses: Deque = (
            mocked_responses if mocked_responses is not None else deque()
        )

        self.with_headers(headers or {})

    def get_last_request(self) -> Optional[httpx.Request]:
        """Return the wire-level request most recently sent by this builder."""
        return self._last_request

    def get_last_response(self) -> Optional[httpx.Response]:
        """Return the response most recently received by this builder."""
        return self._last_response

    @property
    def request_count(self) -> int:
        """Number of times :meth:`call` has been invoked on this builder."""
        return self._count

    @property
    def headers(self) -> Dict[str, str]:
        return dict(self._headers)

    @property
    def params(self) -> Dict[str, Optional[ParamValue]]:
        return dict(self._params)

    @property
    def path(self) -> str:
        """Joined path segments, without boundary slashes or query string."""
        return "/".join(self._path).strip("/")

    def add_path(self, *segments: Union[str, int, None]) -> "HttpRequest":
        """Append one or more segments to the request path.

        ``None`` segments are skipped and surrounding whitespace is removed.
        """
        for segment in segments:
            if segment is None:
                continue
            self._path.append(str(segment).strip())
        return self

    def get_params(self) -> str:
        """Build the query string from the current request parameters.

        Parameters whose value is ``None`` or an empty string are left out.

        :return: ``?``-prefixed, RFC 3986 encoded query string, or ``""``
        :rtype: str
        """
        params = {
            key: value
            for key, value in self._params.items()
            if value is not None and value != ""
        }
        if not params:
            return ""
        return "?" + urlencode(params, safe="", quote_via=quote)

    def get_url(self) -> str:
        """Return the path and query string of this request."""
        return self.path + self.get_params()

    def with_header(self, name: str, value: Any) -> "HttpRequest":
        _set_header(self._headers, name, str(value))
        return self

    def with_headers(self, headers: Mapping[str, Any]) -> "HttpRequest":
        for name, value in headers.items():
            self.with_header(name, value)
        return self

    def with_param(self, key: str, value: Optional[ParamValue]) -> "HttpRequest":
        """Set a URL parameter.

        A ``None`` value clears the parameter; booleans are sent as
        ``"true"``/``"false"``.
        """
        self._params[key] = _prepare_bool_param(value)
        return self

    def with_params(
        self, parameters: Optional[Mapping[str, Optional[ParamValue]]]
    ) -> "HttpRequest":
        """Set several URL parameters; ``None`` values are ignored."""
        if parameters:
            for key, value in parameters.items():
                if value is not None:
                    self.with_param(str(key), value)
        return self

    def _merge_params(self, params: Mapping[str, Any]) -> "HttpRequest":
        for key, value in params.items():
            if key not in self._params:
                self._params[key] = value
        return self

    def with_fields(self, fields: Optional[FilteredRequest]) -> "HttpRequest":
        if fields is not None:
            self._merge_params(fields.build())
        return self

    def with_pagination(
        self,
        paginated: Optional[Union[PaginatedRequest, CheckpointPaginatedRequest]],
    ) -> "HttpRequest":
        if paginated is not None:
            self._merge_params(paginated.build())
        return self

    def with_options(self, options: Optional[RequestOptions]) -> "HttpRequest":
        if options is not None:
            self._merge_params(options.build())
        return self

    def with_form_param(self, key: str, value: Optional[ParamValue]) -> "HttpRequest":
        if value is not None:
            self._form_params[key] = _prepare_bool_param(value)
        return self

    def with_form_params(
        self, params: Optional[Mapping[str, Optional[ParamValue]]]
    ) -> "HttpRequest":
        if params:
            for key, value in params.items():
                self.with_form_param(str(key), value)
        return self

    def add_file(
        self, field: str, file_path: Optional[Union[str, os.PathLike]]
    ) -> "HttpRequest":
        """Attach a file to be sent as a multipart field."""
        if file_path is not None:
            self._files[field] = os.fspath(file_path)
        return self

    def with_body(self, body: Any, json_encode: bool = True) -> "HttpRequest":
        """Set the body of the request.

        Mappings, sequences and pydantic models are always JSON-encoded.
        Strings are JSON-encoded only when ``json_encode`` is true, and
        anything else is sent as ``str(body)``.

        :param body: Body content to send
        :type body: Any
        :param json_encode: Encode string bodies as JSON
        :type json_encode: bool
        """
        if isinstance(body, BaseModel):
            body = body.model_dump_json(exclude_none=True)
        elif isinstance(body, (dict, list, tuple)) or (
            isinstance(body, str) and json_encode
        ):
            body = json.dumps(body)
        elif body is None:
            body = ""

        self._body = str(body)
        return self

    def _build_uri(self) -> str:
        base_path = self.base_path or "/"
        if not base_path.startswith("/"):
            base_path = "/" + base_path
        if not base_path.endswith("/"):
            base_path += "/"
        return self.settings.domain_uri + base_path + self.get_url()

    def _read_files(self) -> Dict[str, Tuple[str, bytes]]:
        files = {}
        for field, file_path in self._files.items():
            try:
                with open(file_path, "rb") as fh:
                    files[field] = (os.path.basename(file_path), fh.read())
            except OSError as e:
                logger.warning(
                    "Skipping unreadable upload for field %s (%s): %s",
                    field,
                    file_path,
                    e,
                )
        return files

    def _build_request(self) -> httpx.Request:
        headers = dict(self._headers)
        content: Optional[bytes] = None
        data: Optional[Dict[str, str]] = None
        files = self._read_files() if self._files else {}

        if files:
            boundary = secrets.token_hex(16)
            _set_header(
                headers, "Content-Type", f"multipart/form-data; boundary={boundary}"
            )
            data = {key: str(value) for key, value in self._form_params.items()}
        elif self._form_params:
            content = urlencode(self._form_params).encode("utf-8")
            _set_header(headers, "Content-Type", "application/x-www-form-urlencoded")
        elif self._body:
            content = self._body.encode("utf-8")

        if self.settings.http_telemetry:
            _set_header(headers, TELEMETRY_HEADER, HttpTelemetry.build())

        request = httpx.Request(
            self.method.upper(),
            self._build_uri(),
            headers=headers,
            content=content,
            data=data or None,
            files=files or None,
        )
        if files:
            # Multipart bodies are streamed; materialize so the record is inspectable
            request.read()
        return request

    def _dispatch(self, request: httpx.Request) -> httpx.Response:
        if self._mocked_responses:
            mocked = self._mocked_responses.popleft()
            if mocked.exception is not None:
                raise mocked.exception
            response = mocked.response
            response.request = request
            if mocked.callback is not None:
                mocked.callback(request, response)
            return response

        transport = self.transport
        if transport is None:
            transport = get_http_client(timeout=self.settings.http_timeout)
        return transport.send(request)

    def call(self) -> httpx.Response:
        """Build the request and send it.

        When a mocked response is queued it is returned in place of
        contacting the transport.

        :return: The received response
        :rtype: httpx.Response
        :raises NetworkError: When the transport fails to complete the request
        """
        request = self._build_request()

        for hook in self.event_hooks.get("request", []):
            hook(request)

        logger.debug("=== SEND: %s %s", request.method, sanitize_url(str(request.url)))
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("    Headers: %s", sanitize_headers(dict(request.headers)))

        self._last_request = request
        self._count += 1

        try:
            response = self._dispatch(request)
        except httpx.RequestError as e:
            logger.warning(
                "Network request failed: %s %s: %s",
                request.method,
                sanitize_url(str(request.url)),
                e,
            )
            raise NetworkError.request_failed(str(e)) from e

        for hook in self.event_hooks.get("response", []):
            hook(response)

        logger.debug(
            "=== RECV: %s for %s %s",
            response.status_code,
            request.method,
            request.url.path,
        )
        self._last_response = response
        return response
