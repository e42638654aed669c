"""Shared fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest
import yaml


@pytest.fixture
def write_gitignore(tmp_path: Path) -> Callable[[str, list[str]], Path]:
    """Create `<tmp>/<name>/.gitignore` with the given lines."""

    def write(name: str, lines: list[str]) -> Path:
        directory = tmp_path / name
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / ".gitignore"
        path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
        return path

    return write


@pytest.fixture
def minimal_config() -> dict:
    return {
        "group": "com.example",
        "version": "1.2.3",
        "versions": {"ratpack": "1.4.5", "kotlin": "1.1.1", "junit": "5.0.0"},
        "dependencies": {
            "api": ["{{ kotlin_module('stdlib') }}"],
            "testImplementation": ["org.junit.jupiter:junit-jupiter-api:{{ junit }}"],
        },
        "publishing": {
            "projects": ["core"],
            "labels": ["kotlin"],
            "vcs_url": "https://example.invalid/repo",
        },
        "subprojects": {
            "core": {"dependencies": {"api": ["{{ ratpack_module('core') }}"]}},
            "example": {
                "plugins": ["io.ratpack.ratpack-java"],
                "application": {"main_class_name": "com.example.Main"},
                "dependencies": {"implementation": [":core"]},
            },
        },
    }


@pytest.fixture
def config_file(tmp_path: Path, minimal_config: dict) -> Path:
    path = tmp_path / "buildwire.yaml"
    path.write_text(yaml.safe_dump(minimal_config, sort_keys=False), encoding="utf-8")
    return path
