"""
cli.py

Responsibility: CLI entrypoint for buildwire.

Commands:
1) `check`: verify every subproject ignores its build output (fatal on failure)
2) `plan`: `check`, then print the resolved build plan as YAML
3) `dependency-updates`: report declared dependencies that have newer releases

This module should orchestrate behavior but keep concerns isolated:
- Config loading: `config.py`
- Layout validation: `validator.py`
- Plan assembly: `plan.py`
- Repository access: `maven_client.py`
"""

from __future__ import annotations

import argparse
import logging
import os
import subprocess
import sys
from pathlib import Path

import yaml

from buildwire.config import DEFAULT_CONFIG_FILE, ConfigError, ProjectConfig, load_config
from buildwire.dependencies import DependencyError, DependencyResolver
from buildwire.maven_client import MavenError, MavenRepositoryClient, repository_url
from buildwire.plan import build_plan
from buildwire.publishing import Credentials
from buildwire.updates import check_updates, format_report
from buildwire.validator import ProjectConfigValidator, UnreadableFileError, ValidationError

logger = logging.getLogger(__name__)


class CLIError(RuntimeError):
    pass


def _run(cmd: list[str], *, cwd: Path) -> str:
    """
    Run a subprocess command and return its stdout, raising a CLIError on failure.
    """
    try:
        proc = subprocess.run(cmd, cwd=str(cwd), check=True, stdout=subprocess.PIPE, stderr=subprocess.STDOUT, text=True)
    except (OSError, subprocess.CalledProcessError) as e:
        output = getattr(e, "stdout", None) or str(e)
        raise CLIError(f"Command failed: {' '.join(cmd)}\n\n{output}") from e
    return proc.stdout


def git_revision(root: Path) -> str:
    revision = _run(["git", "log", "--format=%H", "-n", "1", "HEAD"], cwd=root).strip()
    if not revision:
        raise CLIError(f"Could not determine the current git revision in {root}")
    return revision


def _load(args: argparse.Namespace) -> ProjectConfig:
    return load_config(args.config)


def _check(config: ProjectConfig) -> None:
    ProjectConfigValidator(config.marker).validate(config.subprojects)


def check_cmd(args: argparse.Namespace) -> int:
    config = _load(args)
    try:
        _check(config)
    except ValidationError as e:
        print(str(e), file=sys.stderr)
        return 1
    return 0


def plan_cmd(args: argparse.Namespace) -> int:
    config = _load(args)
    try:
        _check(config)
    except ValidationError as e:
        print(str(e), file=sys.stderr)
        return 1

    # CLI overrides, then environment.
    credentials = Credentials(
        user=args.bintray_user or os.environ.get("BINTRAY_USER") or None,
        key=args.bintray_key or os.environ.get("BINTRAY_KEY") or None,
    )
    revision = args.revision or git_revision(config.root)

    plan = build_plan(config, revision=revision, env=os.environ, credentials=credentials)
    sys.stdout.write(yaml.safe_dump(plan.to_dict(), sort_keys=False, default_flow_style=False))
    return 0


def dependency_updates_cmd(args: argparse.Namespace) -> int:
    config = _load(args)
    if args.repository_url:
        base_url = args.repository_url
    elif config.repositories:
        base_url = repository_url(config.repositories[0])
    else:
        raise CLIError("No repository configured (use --repository-url)")

    coordinates = DependencyResolver(config).external_coordinates()
    logger.info("Checking %d dependencies against %s", len(coordinates), base_url)
    updates = check_updates(MavenRepositoryClient(base_url), coordinates)
    print(format_report(updates))
    return 0


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="buildwire", description="buildwire - build wiring checks and plans for multi-module projects")
    p.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    sub = p.add_subparsers(dest="command", required=True)

    def add_config(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("--config", default=DEFAULT_CONFIG_FILE, help=f"Build description (default: {DEFAULT_CONFIG_FILE})")

    c = sub.add_parser("check", help="Verify every subproject's marker file contains the required line")
    add_config(c)
    c.set_defaults(func=check_cmd)

    pl = sub.add_parser("plan", help="Check the layout, then print the resolved build plan as YAML")
    add_config(pl)
    pl.add_argument("--revision", default=None, help="Build revision (default: current git HEAD)")
    pl.add_argument("--bintray-user", default=None, help="Publishing user (or set env BINTRAY_USER)")
    pl.add_argument("--bintray-key", default=None, help="Publishing key (or set env BINTRAY_KEY)")
    pl.set_defaults(func=plan_cmd)

    u = sub.add_parser("dependency-updates", help="Report dependencies with newer releases")
    add_config(u)
    u.add_argument("--repository-url", default=None, help="Maven repository base URL (default: first configured repository)")
    u.set_defaults(func=dependency_updates_cmd)

    return p


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")
    try:
        return int(args.func(args))
    except (ConfigError, DependencyError, MavenError, CLIError, UnreadableFileError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
