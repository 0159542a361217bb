"""NuGet manifest reader: .csproj-style project files, central package props,
packages.config and project.json."""
from __future__ import annotations

import json
import logging
import os
import xml.etree.ElementTree as ET
from typing import Callable, Dict, List, Optional

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled
from errors import MalformedManifest, UnsupportedFormat
from versioning.models import DependencyRecord

logger = logging.getLogger(__name__)


def _strip_namespaces(root: ET.Element) -> ET.Element:
    """Drop ``{namespace}`` prefixes so MSBuild files parse with or without xmlns."""
    for elem in root.iter():
        if isinstance(elem.tag, str) and "}" in elem.tag:
            elem.tag = elem.tag.split("}", 1)[1]
    return root


def _parse_xml(path: str, root_tag: str) -> ET.Element:
    try:
        root = ET.parse(path).getroot()
    except ET.ParseError as e:
        raise MalformedManifest(path, f"invalid XML: {e}") from e
    except OSError as e:
        raise MalformedManifest(path, f"cannot read file: {e}") from e
    _strip_namespaces(root)
    if root.tag != root_tag:
        raise MalformedManifest(path, f"expected <{root_tag}> root element, found <{root.tag}>")
    return root


def _element_version(elem: ET.Element) -> str:
    """Version from the ``Version`` attribute, else a ``<Version>`` child."""
    version = elem.get("Version")
    if version is None:
        child = elem.find("Version")
        if child is not None and child.text:
            version = child.text
    return (version or "").strip()


def _read_msbuild(path: str, item_tag: str) -> List[DependencyRecord]:
    root = _parse_xml(path, "Project")
    records: List[DependencyRecord] = []
    for item in root.findall(f".//ItemGroup/{item_tag}"):
        name = (item.get("Include") or "").strip()
        if name:
            records.append(DependencyRecord(name=name, current_version=_element_version(item)))
    return records


def _read_project_file(path: str) -> List[DependencyRecord]:
    return _read_msbuild(path, "PackageReference")


def _read_packages_props(path: str) -> List[DependencyRecord]:
    return _read_msbuild(path, "PackageVersion")


def _read_packages_config(path: str) -> List[DependencyRecord]:
    root = _parse_xml(path, "packages")
    records: List[DependencyRecord] = []
    for package in root.findall("package"):
        name = (package.get("id") or "").strip()
        if name:
            records.append(DependencyRecord(name=name, current_version=(package.get("version") or "").strip()))
    return records


def _read_project_json(path: str) -> List[DependencyRecord]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise MalformedManifest(path, f"invalid JSON: {e}") from e
    except OSError as e:
        raise MalformedManifest(path, f"cannot read file: {e}") from e

    if not isinstance(data, dict):
        raise MalformedManifest(path, "expected a JSON object")
    dependencies = data.get("dependencies", {})
    if not isinstance(dependencies, dict):
        raise MalformedManifest(path, "'dependencies' must be an object")

    records: List[DependencyRecord] = []
    for name, spec in dependencies.items():
        if isinstance(spec, dict):
            spec = spec.get("version")
        version = spec.strip() if isinstance(spec, str) else ""
        if name:
            records.append(DependencyRecord(name=name, current_version=version))
    return records


_READERS: Dict[str, Callable[[str], List[DependencyRecord]]] = {
    Constants.DIRECTORY_BUILD_PROPS_FILE.lower(): _read_project_file,
    Constants.DIRECTORY_PACKAGES_PROPS_FILE.lower(): _read_packages_props,
    Constants.PACKAGES_CONFIG_FILE.lower(): _read_packages_config,
    Constants.PROJECT_JSON_FILE.lower(): _read_project_json,
}


def _reader_for(path: str) -> Optional[Callable[[str], List[DependencyRecord]]]:
    file_name = os.path.basename(path).lower()
    if file_name in _READERS:
        return _READERS[file_name]
    if file_name.endswith(Constants.PROJECT_FILE_SUFFIXES):
        return _read_project_file
    return None


def is_supported_manifest(path: str) -> bool:
    """True if ``path`` names a manifest type this module can read."""
    return _reader_for(path) is not None


def read_manifest(path: str) -> List[DependencyRecord]:
    """Read the dependencies declared in a manifest file.

    Args:
        path: Path to a .csproj/.fsproj/.vbproj, Directory.Build.props,
            Directory.Packages.props, packages.config or project.json file.

    Returns:
        Dependency records in declaration order.

    Raises:
        UnsupportedFormat: if the file name is not a recognized manifest type.
        MalformedManifest: if the file cannot be read or parsed.
    """
    reader = _reader_for(path)
    if reader is None:
        raise UnsupportedFormat(path, "unsupported manifest type")

    records = reader(path)
    if is_debug_enabled(logger):
        logger.debug(
            "Manifest parsed",
            extra=extra_context(
                event="parse",
                component="manifest",
                action="read_manifest",
                target=path,
                count=len(records),
                package_manager="nuget",
            ),
        )
    return records
