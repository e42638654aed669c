"""
buildwire package

Build wiring checks and plans for a multi-module JVM library, driven by one YAML file.

Key responsibilities are split across modules:
- `config.py`: load the YAML build description into immutable dataclasses
- `validator.py`: check every subproject's marker file (`.gitignore` must list `build/`)
- `dependencies.py`: resolve dependency notations into coordinates (Jinja2 substitution)
- `build_scan.py` / `publishing.py`: CI build-scan attributes and publications
- `plan.py`: assemble the full build plan
- `maven_client.py` / `updates.py`: dependency update report against a Maven repository
- `cli.py`: CLI entrypoint and orchestration (check -> plan)
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
