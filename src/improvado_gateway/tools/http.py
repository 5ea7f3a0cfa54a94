"""Downstream response normalization."""

from typing import Any

import httpx
import orjson

from improvado_gateway.exceptions import DownstreamError, ResponseParseError


def _status_text(response: httpx.Response) -> str:
    return response.reason_phrase or f"HTTP {response.status_code}"


def _error_detail(response: httpx.Response) -> str:
    """Best human-readable reason for a failed downstream response."""
    content_type = response.headers.get("content-type", "")
    if "application/json" not in content_type:
        return _status_text(response)

    try:
        body = response.json()
    except ValueError:
        return _status_text(response)

    if isinstance(body, dict):
        # Improvado answers with "error", Notion with "message"
        detail = body.get("error") or body.get("message")
        if isinstance(detail, str) and detail:
            return detail
        if detail:
            return orjson.dumps(detail).decode()
    return _status_text(response)


def read_json(response: httpx.Response) -> Any:
    """Return the decoded JSON body of a successful downstream response.

    Raises:
        DownstreamError: On a non-success status
        ResponseParseError: When a success response is not valid JSON
    """
    if not response.is_success:
        raise DownstreamError(
            f"API returned an error ({response.status_code}): {_error_detail(response)}",
            status_code=response.status_code,
        )
    try:
        return response.json()
    except ValueError as e:
        raise ResponseParseError(
            f"Failed to parse API response as JSON: {e}",
            status_code=response.status_code,
        ) from e
