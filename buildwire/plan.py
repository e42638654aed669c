"""
plan.py

Responsibility: Assemble the resolved build plan from a `ProjectConfig`.

The plan is plain data: applied plugins, dependencies, jar manifest attributes,
artifacts, and publications per subproject, plus project-wide settings. It is
built once and serialized for display; nothing here runs a build.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from buildwire.build_scan import BuildScanAttributes, build_scan_attributes
from buildwire.config import PluginSpec, ProjectConfig, SubprojectConfig
from buildwire.dependencies import Dependency, DependencyResolver
from buildwire.publishing import Credentials, Publication, publication_for

JAVADOC_FORMAT = "javadoc"
JAVADOC_OUTPUT_DIR = "build/javadoc"


@dataclass(frozen=True)
class Artifact:
    classifier: str | None
    source: str

    def to_dict(self) -> dict[str, Any]:
        return {"classifier": self.classifier, "from": self.source}


@dataclass(frozen=True)
class SubprojectPlan:
    name: str
    path: str
    group: str
    version: str
    plugins: tuple[PluginSpec, ...]
    dependencies: Mapping[str, tuple[Dependency, ...]]
    manifest: Mapping[str, str]
    artifacts: tuple[Artifact, ...]
    main_class_name: str | None = None
    publication: Publication | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "path": self.path,
            "group": self.group,
            "version": self.version,
            "plugins": [_plugin_dict(p) for p in self.plugins],
            "dependencies": {cfg: [str(d) for d in deps] for cfg, deps in self.dependencies.items()},
            "manifest": dict(self.manifest),
            "artifacts": [a.to_dict() for a in self.artifacts],
        }
        if self.main_class_name:
            out["application"] = {"main_class_name": self.main_class_name}
        if self.publication is not None:
            out["publication"] = self.publication.to_dict()
        return out


@dataclass(frozen=True)
class BuildPlan:
    group: str
    version: str
    revision: str
    repositories: tuple[str, ...]
    java: Mapping[str, str]
    build_scan: BuildScanAttributes
    subprojects: tuple[SubprojectPlan, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "group": self.group,
            "version": self.version,
            "revision": self.revision,
            "repositories": list(self.repositories),
            "java": dict(self.java),
            "build_scan": self.build_scan.to_dict(),
            "subprojects": {s.name: s.to_dict() for s in self.subprojects},
        }


def _plugin_dict(plugin: PluginSpec) -> dict[str, Any] | str:
    if not plugin.settings:
        return plugin.id
    return {"id": plugin.id, "settings": dict(plugin.settings)}


def manifest_attributes(version: str, revision: str) -> dict[str, str]:
    return {
        "Implementation-Version": version,
        "Build-Revision": revision,
    }


def default_artifacts() -> tuple[Artifact, ...]:
    return (
        Artifact(classifier=None, source="main"),
        Artifact(classifier="sources", source="main sources"),
        Artifact(classifier="javadoc", source=f"{JAVADOC_FORMAT} docs in {JAVADOC_OUTPUT_DIR}"),
    )


def _subproject_plan(
    config: ProjectConfig,
    sub: SubprojectConfig,
    resolver: DependencyResolver,
    revision: str,
    credentials: Credentials | None,
) -> SubprojectPlan:
    try:
        path = str(sub.path.relative_to(config.root))
    except ValueError:
        path = str(sub.path)

    return SubprojectPlan(
        name=sub.name,
        path=path,
        group=config.group,
        version=config.version,
        plugins=config.plugins + sub.plugins,
        dependencies={cfg: tuple(deps) for cfg, deps in resolver.resolve(sub).items()},
        manifest=manifest_attributes(config.version, revision),
        artifacts=default_artifacts(),
        main_class_name=sub.main_class_name,
        publication=publication_for(config, sub, credentials),
    )


def build_plan(
    config: ProjectConfig,
    *,
    revision: str,
    env: Mapping[str, str],
    credentials: Credentials | None = None,
) -> BuildPlan:
    resolver = DependencyResolver(config)
    return BuildPlan(
        group=config.group,
        version=config.version,
        revision=revision,
        repositories=config.repositories,
        java={
            "source_compatibility": config.java.source_compatibility,
            "target_compatibility": config.java.target_compatibility,
            "jvm_target": config.java.jvm_target,
        },
        build_scan=build_scan_attributes(config.build_scan, env),
        subprojects=tuple(_subproject_plan(config, s, resolver, revision, credentials) for s in config.subprojects),
    )
