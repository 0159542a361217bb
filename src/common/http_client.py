"""Shared HTTP helpers used by the registry client.

Encapsulates request timeouts, headers and DEBUG traces so the registry
modules only deal with status codes and parsed bodies. Transport failures
(``requests.RequestException``) propagate to the caller, which decides whether
they are fatal.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Tuple

import requests

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)

HEADERS_JSON = {"Accept": "application/json"}


def _default_headers(headers: Optional[Dict[str, str]]) -> Dict[str, str]:
    merged = {"User-Agent": Constants.USER_AGENT}
    merged.update(HEADERS_JSON)
    if headers:
        merged.update(headers)
    return merged


def safe_get(url: str, *, context: str, headers: Optional[Dict[str, str]] = None, **kwargs: Any) -> requests.Response:
    """Perform a GET request with the configured timeout and DEBUG traces.

    Raises:
        requests.RequestException: on timeout or connection failure.
    """
    safe_target = safe_url(url)
    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action="GET",
                    target=safe_target,
                    context=context,
                ),
            )
        try:
            res = requests.get(
                url,
                timeout=Constants.REQUEST_TIMEOUT,
                headers=_default_headers(headers),
                **kwargs,
            )
        except requests.RequestException as exc:
            if is_debug_enabled(logger):
                logger.debug(
                    "HTTP request exception",
                    extra=extra_context(
                        event="http_exception",
                        component="http_client",
                        action="GET",
                        outcome="timeout" if isinstance(exc, requests.Timeout) else "request_exception",
                        duration_ms=t.duration_ms(),
                        target=safe_target,
                        context=context,
                    ),
                )
            raise
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response",
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    action="GET",
                    outcome="success" if res.status_code == 200 else "http_error",
                    status_code=res.status_code,
                    duration_ms=t.duration_ms(),
                    target=safe_target,
                    context=context,
                ),
            )
        return res


def get_json(
    url: str,
    *,
    context: str,
    headers: Optional[Dict[str, str]] = None,
    **kwargs: Any
) -> Tuple[int, Dict[str, str], Optional[Any]]:
    """Perform a GET request and parse a JSON response body.

    Args:
        url: Target URL
        context: Human-readable source tag for logs (e.g., "nuget").
        headers: Optional request headers
        **kwargs: Additional requests.get parameters

    Returns:
        Tuple of (status_code, headers_dict, parsed_json_or_none). The body is
        only parsed for 200 responses; undecodable bodies yield None.

    Raises:
        requests.RequestException: on timeout or connection failure.
    """
    res = safe_get(url, context=context, headers=headers, **kwargs)
    response_headers = dict(res.headers)
    if res.status_code != 200 or not res.text:
        return res.status_code, response_headers, None

    try:
        parsed = json.loads(res.text)
    except json.JSONDecodeError:
        if is_debug_enabled(logger):
            logger.debug(
                "JSON decode error",
                extra=extra_context(
                    event="parse",
                    component="http_client",
                    action="get_json",
                    outcome="json_decode_error",
                    status_code=res.status_code,
                    target=safe_url(url),
                ),
            )
        return res.status_code, response_headers, None
    return res.status_code, response_headers, parsed
