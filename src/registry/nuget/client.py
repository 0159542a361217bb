"""NuGet registry client: list published versions via the V3 registration API."""
from __future__ import annotations

import logging
import urllib.parse
from typing import Any, Dict, List, Optional

import requests

from constants import Constants
from common.http_client import get_json
from common.logging_utils import extra_context, is_debug_enabled, safe_url
from errors import FetchError

logger = logging.getLogger(__name__)


def registration_url(package_id: str, base_url: Optional[str] = None) -> str:
    """Build the registration index URL for a package.

    Package ids are case-insensitive on NuGet; the registration API expects
    them lowercased.
    """
    base = base_url or Constants.REGISTRY_URL_NUGET
    if not base.endswith("/"):
        base += "/"
    encoded_id = urllib.parse.quote(package_id.lower(), safe="")
    return f"{base}{encoded_id}/index.json"


def _get_document(url: str, package_id: str) -> Dict[str, Any]:
    """GET a registration document, mapping every failure to FetchError."""
    try:
        status_code, _, data = get_json(url, context="nuget")
    except requests.RequestException as exc:
        raise FetchError(package_id, f"request to {safe_url(url)} failed: {exc}") from exc
    if status_code == 404:
        raise FetchError(package_id, "package not found in registry")
    if status_code != 200:
        raise FetchError(package_id, f"registry returned HTTP {status_code}")
    if not isinstance(data, dict):
        raise FetchError(package_id, "registry response is not a JSON object")
    return data


def flatten_registration(pages: List[Dict[str, Any]]) -> List[str]:
    """Flatten registration pages into one list of raw version strings.

    Each page holds ``items[].catalogEntry.version``; entries without a
    version string, and pages without an items list, are ignored. Order follows the registry's ordering.
    """
    versions: List[str] = []
    for page in pages:
        leaves = page.get("items") if isinstance(page, dict) else None
        for leaf in leaves if isinstance(leaves, list) else []:
            if not isinstance(leaf, dict):
                continue
            catalog_entry = leaf.get("catalogEntry") or {}
            version = catalog_entry.get("version") if isinstance(catalog_entry, dict) else None
            if isinstance(version, str) and version:
                versions.append(version)
    return versions


def _checked_page(page: Dict[str, Any], package_id: str) -> Dict[str, Any]:
    if not isinstance(page.get("items"), list):
        raise FetchError(package_id, "registration page has no items list")
    return page


def _load_pages(package_id: str, index: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Return the registration pages of an index, fetching non-inlined ones.

    Large packages only list page references (``@id`` without ``items``) in
    the index; those pages are fetched individually.
    """
    pages = index.get("items")
    if not isinstance(pages, list):
        raise FetchError(package_id, "registry response has no registration pages")

    loaded: List[Dict[str, Any]] = []
    for page in pages:
        if not isinstance(page, dict):
            raise FetchError(package_id, "malformed registration page")
        if "items" in page:
            loaded.append(_checked_page(page, package_id))
            continue
        page_url = page.get("@id")
        if not isinstance(page_url, str) or not page_url:
            raise FetchError(package_id, "malformed registration page")
        if is_debug_enabled(logger):
            logger.debug(
                "Fetching registration page",
                extra=extra_context(
                    event="http_request",
                    component="client",
                    action="load_page",
                    target=safe_url(page_url),
                    package_manager="nuget",
                ),
            )
        loaded.append(_checked_page(_get_document(page_url, package_id), package_id))
    return loaded


def fetch_versions(package_id: str) -> List[str]:
    """List every published version of a package.

    Args:
        package_id: NuGet package id (any casing).

    Returns:
        Flat list of raw version strings, possibly empty.

    Raises:
        FetchError: on network failure, non-success status or unusable body.
    """
    if not package_id:
        raise FetchError(package_id, "empty package id")

    index = _get_document(registration_url(package_id), package_id)
    versions = flatten_registration(_load_pages(package_id, index))

    if is_debug_enabled(logger):
        logger.debug(
            "NuGet versions fetched",
            extra=extra_context(
                event="package_found",
                component="client",
                action="fetch_versions",
                outcome="success",
                count=len(versions),
                package_manager="nuget",
                target=package_id,
            ),
        )
    return versions
