"""HTTP utilities public API (barrel module).

This package provides:
- Shared transport manager and helpers
- Request builder and client factory
- Lazy paginator over list endpoints
- Response accessors and quota header parsing

Recommended import pattern for consumers:
    from idm_client.utils.http import HttpClient, HttpResponsePaginator
"""

from .client import HttpClient, MockedResponse
from .client_manager import (
    HTTPClientManager,
    create_limits,
    create_timeout,
    get_http_client,
    http_client_manager,
)
from .paginator import (
    CHECKPOINT_PAGINATION_ENDPOINTS,
    HttpResponsePaginator,
    PaginationMode,
    supports_checkpoint_pagination,
)
from .request import HttpRequest
from .response import (
    decode_content,
    get_content,
    get_headers,
    get_status_code,
    parse_quota_headers,
    was_successful,
)
from .telemetry import TELEMETRY_HEADER, HttpTelemetry

__all__ = [
    "HTTPClientManager",
    "http_client_manager",
    "get_http_client",
    "create_timeout",
    "create_limits",
    "HttpClient",
    "MockedResponse",
    "HttpRequest",
    "HttpResponsePaginator",
    "PaginationMode",
    "CHECKPOINT_PAGINATION_ENDPOINTS",
    "supports_checkpoint_pagination",
    "get_status_code",
    "get_headers",
    "get_content",
    "decode_content",
    "was_successful",
    "parse_quota_headers",
    "HttpTelemetry",
    "TELEMETRY_HEADER",
]
