"""
config.py

Responsibility: Load the YAML build description into an immutable, typed model.

Everything downstream (validator, dependency resolution, plan assembly) receives
a `ProjectConfig` instance and never reads the YAML file again. Shapes are checked
here so later stages can trust field types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml

DEFAULT_CONFIG_FILE = "buildwire.yaml"

_TOP_LEVEL_KEYS = frozenset(
    {
        "group",
        "version",
        "versions",
        "repositories",
        "plugins",
        "java",
        "dependencies",
        "marker",
        "build_scan",
        "publishing",
        "subprojects",
    }
)


class ConfigError(ValueError):
    pass


def _frozen(data: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(data))


@dataclass(frozen=True)
class PluginSpec:
    """A plugin id and the settings it is applied with."""

    id: str
    settings: Mapping[str, Any] = field(default_factory=lambda: _frozen({}))


@dataclass(frozen=True)
class JavaSpec:
    source_compatibility: str = "1.8"
    target_compatibility: str = "1.8"
    jvm_target: str = "1.8"


@dataclass(frozen=True)
class MarkerSpec:
    """Which file every subproject must carry, and the line it must contain."""

    path: str = ".gitignore"
    required_line: str = "build/"


@dataclass(frozen=True)
class BuildScanSpec:
    license_agree: str = "yes"
    license_agreement_url: str = "https://gradle.com/terms-of-service"


@dataclass(frozen=True)
class PublishingSpec:
    projects: tuple[str, ...] = ()
    licenses: tuple[str, ...] = ("Apache-2.0",)
    labels: tuple[str, ...] = ()
    vcs_url: str = ""
    issue_tracker_url: str = ""


@dataclass(frozen=True)
class SubprojectConfig:
    name: str
    path: Path
    plugins: tuple[PluginSpec, ...] = ()
    dependencies: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: _frozen({}))
    main_class_name: str | None = None


@dataclass(frozen=True)
class ProjectConfig:
    """Parsed build description. `root` is the directory the config file lives in."""

    root: Path
    group: str
    version: str
    subprojects: tuple[SubprojectConfig, ...]
    versions: Mapping[str, str] = field(default_factory=lambda: _frozen({}))
    repositories: tuple[str, ...] = ("jcenter",)
    plugins: tuple[PluginSpec, ...] = ()
    java: JavaSpec = field(default_factory=JavaSpec)
    dependencies: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: _frozen({}))
    marker: MarkerSpec = field(default_factory=MarkerSpec)
    build_scan: BuildScanSpec = field(default_factory=BuildScanSpec)
    publishing: PublishingSpec = field(default_factory=PublishingSpec)

    def subproject(self, name: str) -> SubprojectConfig | None:
        for sub in self.subprojects:
            if sub.name == name:
                return sub
        return None

    def is_published(self, name: str) -> bool:
        return name in self.publishing.projects


def _require_mapping(value: Any, key: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"`{key}` must be an object/mapping when provided.")
    return value


def _require_list(value: Any, key: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError(f"`{key}` must be a list when provided.")
    return value


def _str_tuple(value: Any, key: str) -> tuple[str, ...]:
    return tuple(str(v) for v in _require_list(value, key))


def _parse_plugins(value: Any, key: str) -> tuple[PluginSpec, ...]:
    plugins: list[PluginSpec] = []
    for raw in _require_list(value, key):
        if isinstance(raw, str):
            plugins.append(PluginSpec(id=raw))
            continue
        if not isinstance(raw, dict) or not str(raw.get("id") or "").strip():
            raise ConfigError(f"`{key}` entries must be a plugin id or a mapping with an `id`.")
        settings = _require_mapping(raw.get("settings"), f"{key}.settings")
        plugins.append(PluginSpec(id=str(raw["id"]).strip(), settings=_frozen(settings)))
    return tuple(plugins)


def _parse_dependencies(value: Any, key: str) -> Mapping[str, tuple[str, ...]]:
    out: dict[str, tuple[str, ...]] = {}
    for configuration, notations in _require_mapping(value, key).items():
        out[str(configuration)] = _str_tuple(notations, f"{key}.{configuration}")
    return _frozen(out)


def _parse_subprojects(value: Any, root: Path) -> tuple[SubprojectConfig, ...]:
    raw_subprojects = _require_mapping(value, "subprojects")
    if not raw_subprojects:
        raise ConfigError("Config must declare at least one entry under `subprojects`.")

    subprojects: list[SubprojectConfig] = []
    for name, raw in raw_subprojects.items():
        name = str(name).strip()
        if not name or name.startswith(":"):
            raise ConfigError(f"Invalid subproject name: {name!r}")
        data = _require_mapping(raw, f"subprojects.{name}")
        key = f"subprojects.{name}"

        application = _require_mapping(data.get("application"), f"{key}.application")
        main_class = application.get("main_class_name")

        subprojects.append(
            SubprojectConfig(
                name=name,
                path=root / str(data.get("path") or name),
                plugins=_parse_plugins(data.get("plugins"), f"{key}.plugins"),
                dependencies=_parse_dependencies(data.get("dependencies"), f"{key}.dependencies"),
                main_class_name=str(main_class) if main_class else None,
            )
        )
    return tuple(subprojects)


def _parse_publishing(value: Any, declared: set[str]) -> PublishingSpec:
    data = _require_mapping(value, "publishing")
    projects = _str_tuple(data.get("projects"), "publishing.projects")
    unknown = [p for p in projects if p not in declared]
    if unknown:
        raise ConfigError(f"`publishing.projects` names undeclared subprojects: {', '.join(unknown)}")

    licenses = _str_tuple(data.get("licenses"), "publishing.licenses") if "licenses" in data else ("Apache-2.0",)
    return PublishingSpec(
        projects=projects,
        licenses=licenses,
        labels=_str_tuple(data.get("labels"), "publishing.labels"),
        vcs_url=str(data.get("vcs_url") or ""),
        issue_tracker_url=str(data.get("issue_tracker_url") or ""),
    )


def parse_config(data: dict[str, Any], *, root: Path) -> ProjectConfig:
    """
    Build a `ProjectConfig` from an already-loaded YAML mapping.

    `root` anchors every subproject `path`.
    """
    unknown = sorted(set(data) - _TOP_LEVEL_KEYS)
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

    group = str(data.get("group") or "").strip()
    version = str(data.get("version") or "").strip()
    if not group:
        raise ConfigError("Config must define `group`.")
    if not version:
        raise ConfigError("Config must define `version`.")

    versions = {str(k): str(v) for k, v in _require_mapping(data.get("versions"), "versions").items()}

    java_raw = _require_mapping(data.get("java"), "java")
    java = JavaSpec(**{k: str(v) for k, v in java_raw.items() if k in JavaSpec.__dataclass_fields__})

    marker_raw = _require_mapping(data.get("marker"), "marker")
    marker = MarkerSpec(
        path=str(marker_raw.get("path") or MarkerSpec.path),
        # An empty required line is legal; only a missing key falls back.
        required_line=str(marker_raw.get("required_line", MarkerSpec.required_line)),
    )

    scan_raw = _require_mapping(data.get("build_scan"), "build_scan")
    build_scan = BuildScanSpec(**{k: str(v) for k, v in scan_raw.items() if k in BuildScanSpec.__dataclass_fields__})

    repositories = _str_tuple(data.get("repositories"), "repositories") if "repositories" in data else ("jcenter",)

    subprojects = _parse_subprojects(data.get("subprojects"), root)

    return ProjectConfig(
        root=root,
        group=group,
        version=version,
        subprojects=subprojects,
        versions=_frozen(versions),
        repositories=repositories,
        plugins=_parse_plugins(data.get("plugins"), "plugins"),
        java=java,
        dependencies=_parse_dependencies(data.get("dependencies"), "dependencies"),
        marker=marker,
        build_scan=build_scan,
        publishing=_parse_publishing(data.get("publishing"), {s.name for s in subprojects}),
    )


def load_config(config_path: str | Path) -> ProjectConfig:
    """
    Load a YAML build description from disk.

    Subproject paths are resolved relative to the directory holding the file.
    """
    path = Path(config_path)
    if not path.is_file():
        raise ConfigError(f"Config file does not exist: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Config file is not valid YAML: {path}") from e
    if not isinstance(data, dict):
        raise ConfigError("Config must be a mapping/object at the top level.")
    return parse_config(data, root=path.resolve().parent)
