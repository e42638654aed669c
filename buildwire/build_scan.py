"""
build_scan.py

Responsibility: Derive CI build-scan attributes (tags, values, links) from environment variables.

Variable names follow CircleCI 2.0. Nothing is attached unless `CI` is set.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping

from buildwire.config import BuildScanSpec

logger = logging.getLogger(__name__)

_VALUES = (
    ("Circle CI Build Number", "CIRCLE_BUILD_NUM"),
    ("Revision", "CIRCLE_SHA1"),
    ("Repository", "CIRCLE_REPOSITORY_URL"),
    ("Pull Request Number", "CIRCLE_PR_NUMBER"),
)

_LINKS = (
    ("Build URL", "CIRCLE_BUILD_URL"),
    ("Diff", "CIRCLE_COMPARE_URL"),
)


@dataclass(frozen=True)
class BuildScanAttributes:
    license_agree: str
    license_agreement_url: str
    tags: tuple[str, ...] = ()
    values: tuple[tuple[str, str], ...] = ()
    links: tuple[tuple[str, str], ...] = ()

    def to_dict(self) -> dict[str, object]:
        return {
            "license_agree": self.license_agree,
            "license_agreement_url": self.license_agreement_url,
            "tags": list(self.tags),
            "values": dict(self.values),
            "links": dict(self.links),
        }


def build_scan_attributes(spec: BuildScanSpec, env: Mapping[str, str]) -> BuildScanAttributes:
    if env.get("CI") is None:
        return BuildScanAttributes(
            license_agree=spec.license_agree,
            license_agreement_url=spec.license_agreement_url,
        )

    logger.info("Running in CI environment, setting build scan attributes.")
    tags = ["CI"]
    if env.get("CIRCLE_BRANCH") is not None:
        tags.append(env["CIRCLE_BRANCH"])

    return BuildScanAttributes(
        license_agree=spec.license_agree,
        license_agreement_url=spec.license_agreement_url,
        tags=tuple(tags),
        values=tuple((name, env[var]) for name, var in _VALUES if env.get(var) is not None),
        links=tuple((name, env[var]) for name, var in _LINKS if env.get(var) is not None),
    )
