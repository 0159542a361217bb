"""Exception types shared across the manifest, registry and versioning layers.

Per-dependency failures (``InvalidCurrentVersion``, ``FetchError``) are caught
by the update service and only skip that dependency. Manifest failures
(``UnsupportedFormat``, ``MalformedManifest``) abort the run.
"""


class NugbotError(Exception):
    """Base class for all nugbot errors."""


class InvalidVersion(NugbotError, ValueError):
    """A string is not valid semantic-version syntax."""

    def __init__(self, version: str):
        super().__init__(f"Invalid semantic version: {version!r}")
        self.version = version


class InvalidCurrentVersion(InvalidVersion):
    """The declared version of a dependency does not parse."""


class FetchError(NugbotError):
    """The registry could not be reached or returned unusable data."""

    def __init__(self, package_id: str, reason: str):
        super().__init__(f"Failed to fetch versions for {package_id}: {reason}")
        self.package_id = package_id
        self.reason = reason


class ManifestError(NugbotError):
    """The manifest cannot be read at all."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class UnsupportedFormat(ManifestError):
    """The file is not a recognized manifest type."""


class MalformedManifest(ManifestError):
    """The file is a recognized manifest type but cannot be parsed."""
