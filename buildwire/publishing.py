"""
publishing.py

Responsibility: Describe the Maven publication of a subproject, if it is published.

Only names listed under `publishing.projects` get a publication. Credentials are
passed in by the caller; the key itself is never stored on the result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from buildwire.config import ProjectConfig, SubprojectConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credentials:
    user: str | None = None
    key: str | None = None


@dataclass(frozen=True)
class Publication:
    name: str
    component: str
    artifacts: tuple[str, ...]
    repo: str
    licenses: tuple[str, ...]
    labels: tuple[str, ...]
    vcs_url: str
    issue_tracker_url: str
    user: str | None
    key_configured: bool

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "component": self.component,
            "artifacts": list(self.artifacts),
            "repo": self.repo,
            "licenses": list(self.licenses),
            "labels": list(self.labels),
            "vcs_url": self.vcs_url,
            "issue_tracker_url": self.issue_tracker_url,
            "user": self.user,
            "key_configured": self.key_configured,
        }


def publication_for(
    config: ProjectConfig,
    subproject: SubprojectConfig,
    credentials: Credentials | None = None,
) -> Publication | None:
    if not config.is_published(subproject.name):
        return None

    logger.info("Applying publishing configuration to :%s", subproject.name)
    creds = credentials or Credentials()
    spec = config.publishing
    return Publication(
        name="mavenJava",
        component="java",
        artifacts=("javadoc", "sources"),
        repo=subproject.name,
        licenses=spec.licenses,
        labels=spec.labels,
        vcs_url=spec.vcs_url,
        issue_tracker_url=spec.issue_tracker_url,
        user=creds.user,
        key_configured=bool(creds.key),
    )
