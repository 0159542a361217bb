"""Semantic version parsing on top of ``semantic_version``.

Registry and manifest versions are often written loosely (``v1.2``, ``2``),
so parsing zero-fills missing minor/patch components and drops a leading
``v`` before handing a canonical string to ``semantic_version.Version``.
Four-part numeric versions are rejected.
"""

import re

import semantic_version

from errors import InvalidVersion

_LOOSE_SEMVER = re.compile(
    r"^[vV]?(?P<major>\d+)(?:\.(?P<minor>\d+))?(?:\.(?P<patch>\d+))?"
    r"(?:-(?P<prerelease>[0-9A-Za-z\-\.]+))?"
    r"(?:\+(?P<build>[0-9A-Za-z\-\.]+))?$"
)


def parse_version(text: str) -> semantic_version.Version:
    """Parse ``text`` into a Version, raising InvalidVersion when malformed."""
    if not isinstance(text, str):
        raise InvalidVersion(repr(text))
    m = _LOOSE_SEMVER.match(text.strip())
    if not m:
        raise InvalidVersion(text)

    canonical = "{}.{}.{}".format(
        int(m.group("major")),
        int(m.group("minor") or 0),
        int(m.group("patch") or 0),
    )
    if m.group("prerelease"):
        canonical += "-" + m.group("prerelease")
    if m.group("build"):
        canonical += "+" + m.group("build")

    try:
        return semantic_version.Version(canonical)
    except ValueError:
        # e.g. empty dot-separated identifiers or numeric prerelease with leading zero
        raise InvalidVersion(text) from None


def is_stable(version: semantic_version.Version) -> bool:
    """A version without a prerelease label."""
    return not version.prerelease
