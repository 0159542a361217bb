"""Configuration layering for the CLI.

Precedence, lowest to highest: built-in ``Constants`` defaults, the YAML
config file, ``NUGBOT_*`` environment variables, CLI flags. Registry tunables
are applied onto ``Constants``; the update policy is returned to the caller
and passed explicitly to the update service.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

import yaml

from constants import Constants
from versioning.models import UpdatePolicy

logger = logging.getLogger(__name__)


def _config_path(explicit: Optional[str]) -> Optional[str]:
    if explicit:
        return explicit
    env_path = os.environ.get(Constants.ENV_CONFIG)
    if env_path:
        return env_path
    default_path = os.path.expanduser(Constants.DEFAULT_CONFIG_PATH)
    if os.path.isfile(default_path):
        return default_path
    return None


def load_config(explicit_path: Optional[str] = None) -> Dict[str, Any]:
    """Load the YAML configuration file, or return an empty mapping.

    An unreadable or malformed file is logged and ignored.
    """
    path = _config_path(explicit_path)
    if not path:
        return {}
    if not os.path.isfile(path):
        logger.warning("Config file not found: %s", path)
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to load config %s: %s", path, e)
        return {}

    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: top level must be a mapping", path)
        return {}
    logger.debug("Loaded config from %s", path)
    return data


def _registry_section(config: Dict[str, Any]) -> Dict[str, Any]:
    section = config.get("registry") or {}
    return section if isinstance(section, dict) else {}


def _coerce_timeout(value: Any, source: str) -> Optional[float]:
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid request timeout %r from %s", value, source)
        return None
    if timeout <= 0:
        logger.warning("Ignoring non-positive request timeout %r from %s", value, source)
        return None
    return timeout


def apply_registry_overrides(args: Any, config: Dict[str, Any]) -> None:
    """Apply registry URL and timeout overrides onto ``Constants``."""
    registry = _registry_section(config)

    url = (
        getattr(args, "REGISTRY_URL", None)
        or os.environ.get(Constants.ENV_REGISTRY_URL)
        or registry.get("url")
    )
    if url:
        Constants.REGISTRY_URL_NUGET = str(url)

    for raw, source in (
        (registry.get("timeout"), "config"),
        (os.environ.get(Constants.ENV_REQUEST_TIMEOUT), Constants.ENV_REQUEST_TIMEOUT),
    ):
        if raw is None or raw == "":
            continue
        timeout = _coerce_timeout(raw, source)
        if timeout is not None:
            Constants.REQUEST_TIMEOUT = timeout


def resolve_update_policy(args: Any, config: Dict[str, Any]) -> UpdatePolicy:
    """Pick the update policy from CLI, environment, config, then default.

    Raises:
        ValueError: if the selected value is not major, minor or patch.
    """
    value = (
        getattr(args, "UPDATE_TYPE", None)
        or os.environ.get(Constants.ENV_UPDATE_TYPE)
        or config.get("update_type")
        or Constants.DEFAULT_UPDATE_TYPE
    )
    return UpdatePolicy.parse(value)
