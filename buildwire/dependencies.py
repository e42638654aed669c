"""
dependencies.py

Responsibility: Turn dependency notations from the config into resolved coordinates.

Rules:
- A notation starting with ':' is a dependency on another declared subproject.
- Anything else is a Jinja2 template rendered against the `versions` map, then
  parsed as `group:artifact:version[:classifier]`.
- Shared dependencies come before a subproject's own, per configuration,
  in declaration order, with exact duplicates dropped.

This module does not know about the CLI, the network, or publishing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Union

from jinja2 import Environment, StrictUndefined, TemplateError

from buildwire.config import ProjectConfig, SubprojectConfig


class DependencyError(ValueError):
    pass


@dataclass(frozen=True)
class Coordinate:
    group: str
    artifact: str
    version: str
    classifier: str | None = None

    @property
    def module(self) -> str:
        return f"{self.group}:{self.artifact}"

    def __str__(self) -> str:
        base = f"{self.group}:{self.artifact}:{self.version}"
        return f"{base}:{self.classifier}" if self.classifier else base


@dataclass(frozen=True)
class ProjectDependency:
    path: str

    def __str__(self) -> str:
        return self.path


Dependency = Union[Coordinate, ProjectDependency]


def parse_coordinate(text: str) -> Coordinate:
    parts = text.strip().split(":")
    if len(parts) not in (3, 4) or not all(parts):
        raise DependencyError(f"Expected group:artifact:version[:classifier], got {text!r}")
    return Coordinate(
        group=parts[0],
        artifact=parts[1],
        version=parts[2],
        classifier=parts[3] if len(parts) == 4 else None,
    )


def _make_env(versions: Mapping[str, str]) -> Environment:
    env = Environment(autoescape=False, undefined=StrictUndefined)

    def _module(prefix: str, group: str, version_key: str):
        def build(name: str) -> str:
            if version_key not in versions:
                raise DependencyError(f"`versions.{version_key}` is required to use {prefix}_module()")
            return f"{group}:{prefix}-{name}:{versions[version_key]}"

        return build

    env.globals["ratpack_module"] = _module("ratpack", "io.ratpack", "ratpack")
    env.globals["kotlin_module"] = _module("kotlin", "org.jetbrains.kotlin", "kotlin")
    return env


class DependencyResolver:
    def __init__(self, config: ProjectConfig) -> None:
        self._config = config
        self._env = _make_env(config.versions)
        self._names = {s.name for s in config.subprojects}

    def resolve_notation(self, notation: str, *, owner: str) -> Dependency:
        if notation.startswith(":"):
            target = notation[1:]
            if target not in self._names:
                raise DependencyError(f"{owner}: project dependency on undeclared subproject {notation}")
            if target == owner:
                raise DependencyError(f"{owner}: a subproject cannot depend on itself")
            return ProjectDependency(path=notation)

        try:
            rendered = self._env.from_string(notation).render(**self._config.versions)
        except (TemplateError, DependencyError) as e:
            raise DependencyError(f"{owner}: failed rendering dependency {notation!r}: {e}") from e
        try:
            return parse_coordinate(rendered)
        except DependencyError as e:
            raise DependencyError(f"{owner}: {e}") from e

    def resolve(self, subproject: SubprojectConfig) -> dict[str, list[Dependency]]:
        """Resolve shared plus subproject-specific dependencies, keyed by configuration."""
        resolved: dict[str, list[Dependency]] = {}
        for source in (self._config.dependencies, subproject.dependencies):
            for configuration, notations in source.items():
                bucket = resolved.setdefault(configuration, [])
                for notation in notations:
                    dep = self.resolve_notation(notation, owner=subproject.name)
                    if dep not in bucket:
                        bucket.append(dep)
        return resolved

    def external_coordinates(self) -> list[Coordinate]:
        """Every distinct external coordinate across all subprojects, in first-seen order."""
        seen: list[Coordinate] = []
        for sub in self._config.subprojects:
            for deps in self.resolve(sub).values():
                for dep in deps:
                    if isinstance(dep, Coordinate) and dep not in seen:
                        seen.append(dep)
        return seen
