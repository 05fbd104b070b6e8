"""
HTTP execution service for sending HTTP requests.

This service turns a resolved request definition into an HTTP call using
httpx, captures the response and classifies it. Errors never propagate:
every call ends in a completed or a failed RequestOutcome.
"""

import asyncio
import json
import logging
import time
from typing import Any
from urllib.parse import urlencode

import httpx

from ..config import DEFAULT_TIMEOUT
from ..schemas.request import RequestSpec
from ..schemas.result import RequestOutcome


logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def build_request_body(request: RequestSpec) -> tuple[httpx.Headers, bytes | None]:
    """
    Prepare headers and encoded body for a request definition.

    Explicit headers from the definition always win over the
    Content-Type default set for form and JSON bodies.

    Args:
        request: Resolved request definition

    Returns:
        Tuple of (headers, encoded body or None)
    """
    headers = httpx.Headers(request.headers)
    content: bytes | None = None

    if request.form is not None:
        content = urlencode(request.form).encode("ascii")
        if "Content-Type" not in headers:
            headers["Content-Type"] = FORM_CONTENT_TYPE
    elif request.body is not None:
        content = json.dumps(request.body, ensure_ascii=False).encode("utf-8")
        if "Content-Type" not in headers:
            headers["Content-Type"] = JSON_CONTENT_TYPE

    return headers, content


def build_request_url(request: RequestSpec) -> httpx.URL:
    """
    Append the definition's params to the query string of its URL.

    Parameters already present in the URL are kept.

    Raises:
        httpx.InvalidURL: If the URL cannot be parsed
    """
    url = httpx.URL(request.url)
    if request.params:
        url = url.copy_merge_params(request.params)
    return url


def parse_json_body(body: str | None, content_type: str | None) -> Any | None:
    """
    Try to parse response body as JSON if content type indicates JSON.

    Args:
        body: Response body string
        content_type: Content-Type header value

    Returns:
        Parsed JSON object or None if not JSON or parsing fails
    """
    if not body or not content_type:
        return None

    if "json" in content_type.lower():
        try:
            return json.loads(body)
        except json.JSONDecodeError:
            return None

    return None


def decode_response_body(response: httpx.Response) -> str | None:
    """
    Decode the response body as text.

    Returns None for an empty body or one that is not valid text in the
    declared encoding (UTF-8 when none is declared).
    """
    if not response.content:
        return None

    encoding = response.charset_encoding or "utf-8"
    try:
        return response.content.decode(encoding)
    except (UnicodeDecodeError, LookupError):
        logger.debug("Response body of %s is not decodable as %s", response.url, encoding)
        return None


def _format_timeout(timeout: float) -> str:
    return f"{timeout:g}s"


async def execute_request(
    request: RequestSpec,
    client: httpx.AsyncClient,
    timeout: float = DEFAULT_TIMEOUT,
    warnings: list[str] | None = None
) -> RequestOutcome:
    """
    Execute an HTTP request and return its outcome.

    The whole call, including reading the response body, must finish
    within ``timeout`` seconds.

    Args:
        request: The resolved request definition to execute
        client: HTTP client shared by the run
        timeout: Request timeout in seconds
        warnings: Substitution warnings to attach to the outcome

    Returns:
        A completed outcome if a response was received, a failed one otherwise
    """
    name = request.display_name
    method = request.method
    url = request.url
    warnings = warnings or []

    start_time = time.perf_counter()

    def elapsed_ms() -> float:
        return (time.perf_counter() - start_time) * 1000

    def failure(error: str, error_type: str) -> RequestOutcome:
        logger.info("%s %s failed: %s", method, url, error)
        return RequestOutcome.failed(
            name=name,
            method=method,
            url=url,
            error_message=error,
            error_type=error_type,
            elapsed_ms=elapsed_ms(),
            warnings=warnings,
        )

    # Execute the request
    try:
        request_url = build_request_url(request)
        headers, content = build_request_body(request)
        logger.debug("Dispatching %s %s", method, request_url)

        response = await asyncio.wait_for(
            client.request(
                method=method,
                url=request_url,
                headers=headers,
                content=content,
                timeout=timeout,
            ),
            timeout=timeout,
        )

        response_time_ms = elapsed_ms()

    except (asyncio.TimeoutError, httpx.TimeoutException):
        return failure(f"Request timeout ({_format_timeout(timeout)})", "timeout")
    except httpx.ConnectError as e:
        return failure(f"Unable to connect to server: {e}", "network_error")
    except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
        return failure(f"Invalid URL: {e}", "invalid_url")
    except httpx.DecodingError as e:
        return failure(f"Response decoding failed: {e}", "network_error")
    except httpx.HTTPError as e:
        return failure(f"HTTP error occurred: {e}", "network_error")
    except Exception as e:
        return failure(f"An unexpected error occurred: {e}", "unknown")

    # Get response body
    response_body = decode_response_body(response)
    content_type = response.headers.get("content-type", "")
    body_json = parse_json_body(response_body, content_type)

    logger.debug(
        "%s %s -> %d in %.1f ms", method, url, response.status_code, response_time_ms
    )

    return RequestOutcome.completed(
        name=name,
        method=method,
        url=url,
        status_code=response.status_code,
        status_text=response.reason_phrase or "",
        elapsed_ms=response_time_ms,
        response_body=response_body,
        response_json=body_json,
        warnings=warnings,
    )
