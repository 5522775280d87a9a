"""Accessors for HTTP responses returned by the transport.

Stateless helpers that extract the status code, headers, raw body and
JSON-decoded body from an ``httpx.Response``, plus parsers for the
rate-limit quota headers the API attaches to management responses.
"""

import json
from typing import Any, Dict, List, Optional

import httpx


def get_status_code(response: httpx.Response) -> int:
    """Extract the status code from an HTTP response.

    :param response: Response to extract from
    :type response: httpx.Response
    :return: HTTP status code
    :rtype: int
    """
    return response.status_code


def get_headers(response: httpx.Response) -> Dict[str, List[str]]:
    """Extract the headers from an HTTP response.

    Header names are lower-cased; repeated headers keep every value.

    :param response: Response to extract from
    :type response: httpx.Response
    :return: Mapping of header name to list of values
    :rtype: Dict[str, List[str]]
    """
    headers: Dict[str, List[str]] = {}
    for name, value in response.headers.multi_items():
        headers.setdefault(name.lower(), []).append(value)
    return headers


def get_content(response: httpx.Response) -> str:
    """Extract the body of an HTTP response as text.

    :param response: Response to extract from
    :type response: httpx.Response
    :return: Response body
    :rtype: str
    """
    return response.text


def decode_content(response: httpx.Response) -> Any:
    """Parse the body of an HTTP response as JSON.

    :param response: Response to extract from
    :type response: httpx.Response
    :return: Decoded JSON document
    :rtype: Any
    :raises json.JSONDecodeError: When the body is not valid JSON
    """
    return json.loads(get_content(response))


def was_successful(response: httpx.Response, expected_status_code: int = 200) -> bool:
    """Return True when the response carries the expected status code.

    :param response: Response to check
    :type response: httpx.Response
    :param expected_status_code: Status code considered successful
    :type expected_status_code: int
    :return: Whether the status code matched
    :rtype: bool
    """
    return response.status_code == expected_status_code


def _to_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    value = value.strip()
    if value.lstrip("-").isdigit():
        return int(value)
    return None


def parse_quota_buckets(raw_value: str) -> Dict[str, Dict[str, Optional[int]]]:
    """Parse a quota header value into per-bucket figures.

    ``"b=per_hour;q=100;r=99;t=1,b=per_day;q=300;r=299;t=1"`` becomes
    ``{"per_hour": {"quota": 100, "remaining": 99, "reset_after": 1}, ...}``.
    Buckets without a ``b=`` name are dropped.

    :param raw_value: Raw header value
    :type raw_value: str
    :return: Mapping of bucket name to quota, remaining and reset_after
    :rtype: Dict[str, Dict[str, Optional[int]]]
    """
    result: Dict[str, Dict[str, Optional[int]]] = {}
    fields = {"q": "quota", "r": "remaining", "t": "reset_after"}

    for bucket in raw_value.split(","):
        name = None
        data: Dict[str, Optional[int]] = {
            "quota": None,
            "remaining": None,
            "reset_after": None,
        }
        for pair in bucket.split(";"):
            key, _, value = pair.partition("=")
            key = key.strip()
            if key == "b":
                name = value.strip()
            elif key in fields:
                data[fields[key]] = _to_int(value)
        if name is not None:
            result[name] = data

    return result


def parse_quota_headers(response: httpx.Response) -> Dict[str, Any]:
    """Parse client/organization quota and rate-limit headers.

    Keys that are absent from the response do not appear in the result.
    ``rate_limit`` is only reported alongside ``retry_after``.

    :param response: Response to extract from
    :type response: httpx.Response
    :return: Dict with optional ``client``, ``organization``,
        ``retry_after`` and ``rate_limit`` entries
    :rtype: Dict[str, Any]
    """
    headers = response.headers
    result: Dict[str, Any] = {}

    client_limit = headers.get("client-quota-limit")
    org_limit = headers.get("organization-quota-limit")
    if client_limit:
        result["client"] = parse_quota_buckets(client_limit)
    if org_limit:
        result["organization"] = parse_quota_buckets(org_limit)

    retry_after = _to_int(headers.get("retry-after"))
    if retry_after is not None:
        result["retry_after"] = retry_after
        rate_limit = {}
        for key, header in (
            ("limit", "x-ratelimit-limit"),
            ("remaining", "x-ratelimit-remaining"),
            ("reset", "x-ratelimit-reset"),
        ):
            parsed = _to_int(headers.get(header))
            if parsed is not None:
                rate_limit[key] = parsed
        if rate_limit:
            result["rate_limit"] = rate_limit

    return result
