"""Factory for pre-configured API request builders.

:class:`HttpClient` holds the configuration shared by every request a
logical API client issues (settings, base path, default headers,
transport and event hooks) and manufactures a fresh
:class:`~idm_client.utils.http.request.HttpRequest` per call. It also owns
the mock response queue used by tests to script responses without a
live network.

Examples:
    >>> client = HttpClient(settings, base_path="/api/v2/")
    >>> client.mock_response(httpx.Response(200, json={"id": "123"}))
    >>> client.method("get").add_path("users", "123").call()
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Deque, Dict, Iterable, Mapping, Optional, Union

import httpx

from ...config.settings import Settings
from .request import EventHooks, HttpRequest

logger = logging.getLogger(__name__)

# Verbs that conventionally carry a body
CONTENT_TYPE_METHODS = ("patch", "post", "put", "delete")


@dataclass
class MockedResponse:
    """A scripted reply consumed by one :meth:`HttpRequest.call`.

    :param response: Response returned in place of contacting the transport
    :param callback: Optional callable invoked with ``(request, response)``
    :param exception: Optional exception raised instead of returning
    """

    response: httpx.Response
    callback: Optional[Callable[[httpx.Request, httpx.Response], Any]] = None
    exception: Optional[BaseException] = None


class HttpClient:
    """Creates request builders sharing one configuration context.

    :param settings: Client configuration; loaded from the environment if omitted
    :type settings: Optional[Settings]
    :param base_path: Base URI path prepended to every request path
    :type base_path: str
    :param headers: Headers sent with every request
    :type headers: Optional[Dict[str, str]]
    :param transport: Object exposing ``send(httpx.Request) -> httpx.Response``;
        defaults to a shared pooled ``httpx.Client``
    :type transport: Optional[httpx.Client]
    :param event_hooks: ``{"request": [...], "response": [...]}`` callables
    :type event_hooks: Optional[EventHooks]
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        base_path: str = "/",
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.Client] = None,
        event_hooks: Optional[EventHooks] = None,
    ):
        self.settings = settings or Settings()
        self.base_path = base_path
        self.headers = dict(headers or {})
        self.transport = transport
        self.event_hooks = event_hooks or {}
        self.last_request: Optional[HttpRequest] = None
        self._mocked_responses: Deque[MockedResponse] = deque()

    def method(self, method: str, set_content_type: bool = True) -> HttpRequest:
        """Create a new request builder for an HTTP verb.

        :param method: HTTP method to use (GET, POST, PATCH, etc.)
        :type method: str
        :param set_content_type: Seed ``Content-Type: application/json`` for
            verbs that carry a body
        :type set_content_type: bool
        :return: The new builder, also remembered as the last request
        :rtype: HttpRequest
        """
        method = method.lower()
        builder = HttpRequest(
            self.settings,
            method,
            base_path=self.base_path,
            headers=self.headers,
            mocked_responses=self._mocked_responses,
            transport=self.transport,
            event_hooks=self.event_hooks,
        )

        if set_content_type and method in CONTENT_TYPE_METHODS:
            builder.with_header("Content-Type", "application/json")

        self.last_request = builder
        return builder

    def get_last_request(self) -> Optional[HttpRequest]:
        """Return the most recently created request builder, if any."""
        return self.last_request

    def mock_response(
        self,
        response: httpx.Response,
        callback: Optional[Callable[[httpx.Request, httpx.Response], Any]] = None,
        exception: Optional[BaseException] = None,
    ) -> "HttpClient":
        """Queue a response to be returned by the next request sent."""
        self._mocked_responses.append(MockedResponse(response, callback, exception))
        return self

    def mock_responses(
        self,
        responses: Iterable[Union[MockedResponse, Mapping[str, Any], httpx.Response]],
    ) -> "HttpClient":
        """Queue several responses, in order.

        Entries may be :class:`MockedResponse` instances, mappings with
        ``response``/``callback``/``exception`` keys, or bare responses.
        """
        for entry in responses:
            if isinstance(entry, MockedResponse):
                self._mocked_responses.append(entry)
            elif isinstance(entry, httpx.Response):
                self.mock_response(entry)
            else:
                self.mock_response(
                    entry["response"],
                    entry.get("callback"),
                    entry.get("exception"),
                )
        return self

    @property
    def pending_mocks(self) -> int:
        """Number of queued mock responses not yet consumed."""
        return len(self._mocked_responses)
