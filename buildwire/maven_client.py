"""
maven_client.py

Responsibility: Isolate all HTTP access to Maven-layout artifact repositories.

This module must be the only place that:
- Constructs repository metadata URLs
- Sends HTTP requests
- Interprets `maven-metadata.xml` payloads

Update reporting (updates.py) uses this client and never talks HTTP itself.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass

import requests

MAVEN_CENTRAL = "https://repo.maven.apache.org/maven2"

# Named repositories accepted in the config's `repositories` list.
KNOWN_REPOSITORIES = {
    "mavenCentral": MAVEN_CENTRAL,
    "jcenter": MAVEN_CENTRAL,
}


class MavenError(RuntimeError):
    pass


@dataclass(frozen=True)
class ModuleVersions:
    group: str
    artifact: str
    release: str | None
    versions: tuple[str, ...]


def repository_url(name_or_url: str) -> str:
    """Map a repository name from the config to a base URL; URLs pass through."""
    if "://" in name_or_url:
        return name_or_url.rstrip("/")
    try:
        return KNOWN_REPOSITORIES[name_or_url]
    except KeyError:
        raise MavenError(f"Unknown repository {name_or_url!r}; use a URL or one of {sorted(KNOWN_REPOSITORIES)}") from None


class MavenRepositoryClient:
    def __init__(self, base_url: str = MAVEN_CENTRAL, timeout: float = 30) -> None:
        if not base_url.strip():
            raise MavenError("Repository URL is required.")
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "application/xml",
            "User-Agent": "buildwire",
        }

    def _metadata_path(self, group: str, artifact: str) -> str:
        return f"/{group.replace('.', '/')}/{artifact}/maven-metadata.xml"

    def _request(self, path: str) -> str | None:
        url = f"{self._base_url}{path}"
        try:
            r = requests.get(url, headers=self._headers(), timeout=self._timeout)
        except requests.RequestException as e:
            raise MavenError(f"Request failed GET {url}: {e}") from e
        if r.status_code == 404:
            return None
        if r.status_code >= 400:
            raise MavenError(f"Repository error {r.status_code} GET {url}")
        return r.text

    def get_versions(self, group: str, artifact: str) -> ModuleVersions | None:
        """
        Return the published versions of a module, or None if the repository does not know it.
        """
        text = self._request(self._metadata_path(group, artifact))
        if text is None:
            return None
        try:
            root = ET.fromstring(text)
        except ET.ParseError as e:
            raise MavenError(f"Malformed maven-metadata.xml for {group}:{artifact}") from e

        versioning = root.find("versioning")
        if versioning is None:
            return ModuleVersions(group=group, artifact=artifact, release=None, versions=())

        versions = tuple((v.text or "").strip() for v in versioning.findall("versions/version") if (v.text or "").strip())
        release = (versioning.findtext("release") or versioning.findtext("latest") or "").strip()
        if not release and versions:
            release = versions[-1]
        return ModuleVersions(group=group, artifact=artifact, release=release or None, versions=versions)
