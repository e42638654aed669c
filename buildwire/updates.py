"""
updates.py

Responsibility: Compare declared dependency versions against what the repository publishes.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Iterable

from buildwire.dependencies import Coordinate
from buildwire.maven_client import MavenRepositoryClient

logger = logging.getLogger(__name__)


class UpdateStatus(enum.Enum):
    CURRENT = "current"
    OUTDATED = "outdated"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class DependencyUpdate:
    coordinate: Coordinate
    status: UpdateStatus
    latest: str | None = None


def check_updates(client: MavenRepositoryClient, coordinates: Iterable[Coordinate]) -> list[DependencyUpdate]:
    results: list[DependencyUpdate] = []
    for coord in coordinates:
        info = client.get_versions(coord.group, coord.artifact)
        if info is None or info.release is None:
            logger.debug("No published versions found for %s", coord.module)
            results.append(DependencyUpdate(coordinate=coord, status=UpdateStatus.UNRESOLVED))
        elif info.release == coord.version:
            results.append(DependencyUpdate(coordinate=coord, status=UpdateStatus.CURRENT, latest=info.release))
        else:
            results.append(DependencyUpdate(coordinate=coord, status=UpdateStatus.OUTDATED, latest=info.release))
    return results


def format_report(updates: list[DependencyUpdate]) -> str:
    """Render the update report grouped by status, in CURRENT/OUTDATED/UNRESOLVED order."""
    sections: list[str] = []
    for status, title in (
        (UpdateStatus.CURRENT, "The following dependencies are using the latest release version:"),
        (UpdateStatus.OUTDATED, "The following dependencies have later release versions:"),
        (UpdateStatus.UNRESOLVED, "Failed to determine the latest version for the following dependencies:"),
    ):
        group = [u for u in updates if u.status is status]
        if not group:
            continue
        lines = [title]
        for u in group:
            if status is UpdateStatus.OUTDATED:
                lines.append(f" - {u.coordinate.module} [{u.coordinate.version} -> {u.latest}]")
            else:
                lines.append(f" - {u.coordinate}")
        sections.append("\n".join(lines))
    if not sections:
        return "No dependencies found."
    return "\n\n".join(sections)
