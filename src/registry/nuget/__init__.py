"""NuGet registry package.

This package provides NuGet package manager support:
- manifest.py: dependency records from .csproj, Directory.*.props, packages.config and project.json
- client.py: version listings from the NuGet V3 registration API
"""

from .client import fetch_versions, flatten_registration, registration_url  # noqa: F401
from .manifest import is_supported_manifest, read_manifest  # noqa: F401

__all__ = [
    "fetch_versions",
    "flatten_registration",
    "registration_url",
    "is_supported_manifest",
    "read_manifest",
]
