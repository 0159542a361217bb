"""Update resolution: pick the best admissible release for a dependency.

Resolution is a pure filter-then-max over the candidate list:

1. parse each candidate, dropping malformed strings and prereleases;
2. keep versions strictly greater than the current one;
3. keep versions inside the policy's scope (same major for ``minor``,
   same major and minor for ``patch``);
4. return the maximum, or None when nothing survives.
"""

from typing import Iterable, List, Optional

import semantic_version

from errors import InvalidCurrentVersion, InvalidVersion
from .models import UpdatePolicy
from .semver import is_stable, parse_version


def is_admissible(
    current: semantic_version.Version,
    candidate: semantic_version.Version,
    policy: UpdatePolicy,
) -> bool:
    """Return True if ``candidate`` is an allowed update of ``current`` under ``policy``."""
    if not is_stable(candidate) or not candidate > current:
        return False
    if policy is UpdatePolicy.MAJOR:
        return True
    if policy is UpdatePolicy.MINOR:
        return candidate.major == current.major
    if policy is UpdatePolicy.PATCH:
        return candidate.major == current.major and candidate.minor == current.minor
    raise ValueError(f"Unsupported update policy: {policy!r}")


def _parse_candidates(candidates: Iterable[str]) -> List[semantic_version.Version]:
    parsed = []
    for raw in candidates:
        try:
            parsed.append(parse_version(raw))
        except InvalidVersion:
            continue
    return parsed


def admissible_candidates(
    current: semantic_version.Version,
    candidates: Iterable[str],
    policy: UpdatePolicy,
) -> List[semantic_version.Version]:
    """All parsed candidates that are admissible updates of ``current``."""
    return [ver for ver in _parse_candidates(candidates) if is_admissible(current, ver, policy)]


def parse_current_version(current_version: str) -> semantic_version.Version:
    """Parse a declared version, raising InvalidCurrentVersion when malformed."""
    try:
        return parse_version(current_version)
    except InvalidVersion:
        raise InvalidCurrentVersion(current_version) from None


def resolve_update(current_version: str, candidates: Iterable[str], policy: UpdatePolicy) -> Optional[str]:
    """Return the newest admissible version for ``current_version``, or None.

    Args:
        current_version: Declared version of the dependency.
        candidates: Raw version strings known to the registry (flat list).
        policy: Update scope.

    Returns:
        The chosen version in normalized form, or None when no update exists.

    Raises:
        InvalidCurrentVersion: if ``current_version`` does not parse.
    """
    current = parse_current_version(current_version)
    admissible = admissible_candidates(current, candidates, policy)
    if not admissible:
        return None
    return str(max(admissible))
