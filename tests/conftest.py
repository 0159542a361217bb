"""Shared pytest fixtures."""

import logging

import pytest

from constants import Constants

_ENV_VARS = (
    Constants.ENV_CONFIG,
    Constants.ENV_LOG_LEVEL,
    Constants.ENV_LOG_JSON,
    Constants.ENV_REGISTRY_URL,
    Constants.ENV_REQUEST_TIMEOUT,
    Constants.ENV_UPDATE_TYPE,
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keep Constants, NUGBOT_* env vars and the user config out of each test."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(Constants, "DEFAULT_CONFIG_PATH", str(tmp_path / "no-such-config.yml"))
    monkeypatch.setattr(Constants, "REGISTRY_URL_NUGET", Constants.REGISTRY_URL_NUGET)
    monkeypatch.setattr(Constants, "REQUEST_TIMEOUT", Constants.REQUEST_TIMEOUT)
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)
    for handler in list(root.handlers):
        if getattr(handler, "_nugbot_handler", False):
            root.removeHandler(handler)
            handler.close()


@pytest.fixture
def write_file(tmp_path):
    """Write ``content`` to ``tmp_path / name`` and return the path as str."""
    def _write(name, content):
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return str(path)
    return _write


@pytest.fixture
def registration_index():
    """Build a registration index with inlined pages of version strings."""
    def _build(*pages):
        return {
            "count": len(pages),
            "items": [
                {"items": [{"catalogEntry": {"version": v}} for v in page]}
                for page in pages
            ],
        }
    return _build
