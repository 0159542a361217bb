"""Update check service: fetch candidates and resolve updates per dependency."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

from common.logging_utils import extra_context, is_debug_enabled
from errors import FetchError, InvalidCurrentVersion
from .models import DependencyRecord, UpdateDecision, UpdatePolicy
from .resolver import parse_current_version, resolve_update

logger = logging.getLogger(__name__)

FetchVersions = Callable[[str], List[str]]


@dataclass
class CheckSummary:
    """Counters for one run of ``UpdateCheckService.check_all``."""
    checked: int = 0
    skipped: int = 0
    updates: int = 0


class UpdateCheckService:
    """Check each dependency against the registry under one update policy.

    Dependencies are evaluated one at a time in declaration order. A fetch
    failure or an unparsable declared version skips that dependency only.
    """

    def __init__(self, fetch_versions: FetchVersions, policy: UpdatePolicy):
        self.fetch_versions = fetch_versions
        self.policy = policy
        self.summary = CheckSummary()

    def check(self, record: DependencyRecord) -> Optional[UpdateDecision]:
        """Resolve a single record.

        Raises:
            FetchError: if the registry lookup fails.
            InvalidCurrentVersion: if the declared version does not parse.
        """
        # Declared version is validated before any registry call.
        parse_current_version(record.current_version)
        candidates = self.fetch_versions(record.name)
        new_version = resolve_update(record.current_version, candidates, self.policy)
        if is_debug_enabled(logger):
            logger.debug(
                "Resolved dependency",
                extra=extra_context(
                    event="decision",
                    component="service",
                    action="resolve_update",
                    target=record.name,
                    current_version=record.current_version,
                    new_version=new_version,
                    candidate_count=len(candidates),
                    policy=self.policy.value,
                ),
            )
        if new_version is None or new_version == record.current_version:
            return None
        return UpdateDecision(
            name=record.name,
            current_version=record.current_version,
            new_version=new_version,
        )

    def check_all(self, records: Iterable[DependencyRecord]) -> List[UpdateDecision]:
        """Check every record and return the decisions in declaration order."""
        self.summary = CheckSummary()
        updates: List[UpdateDecision] = []
        for record in records:
            self.summary.checked += 1
            try:
                decision = self.check(record)
            except FetchError as exc:
                self.summary.skipped += 1
                logger.warning(
                    "Skipping %s: %s",
                    record.name,
                    exc.reason,
                    extra=extra_context(event="skip", component="service", target=record.name, outcome="fetch_error"),
                )
                continue
            except InvalidCurrentVersion:
                self.summary.skipped += 1
                logger.warning(
                    "Skipping %s: declared version %r is not a valid semantic version",
                    record.name,
                    record.current_version,
                    extra=extra_context(
                        event="skip", component="service", target=record.name, outcome="invalid_current_version"
                    ),
                )
                continue
            if decision is not None:
                updates.append(decision)
        self.summary.updates = len(updates)
        return updates
