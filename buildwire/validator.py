"""
validator.py

Responsibility: Check that every subproject carries a marker file (`.gitignore` by
default) containing a required line (`build/` by default).

Every subproject is checked before anything is reported, so a single run surfaces
all violations. The check only reads files.
"""

from __future__ import annotations

import enum
import logging
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from buildwire.config import MarkerSpec, SubprojectConfig

logger = logging.getLogger(__name__)


class FailureReason(enum.Enum):
    MISSING_FILE = "MissingFile"
    MISSING_REQUIRED_LINE = "MissingRequiredLine"


class UnreadableFileError(RuntimeError):
    """The marker file exists but could not be read or decoded."""

    def __init__(self, path: Path, cause: Exception) -> None:
        super().__init__(f"Cannot read {path}: {cause}")
        self.path = path


@dataclass(frozen=True)
class ValidationResult:
    subproject: str
    reason: FailureReason | None = None

    @property
    def passed(self) -> bool:
        return self.reason is None


class ValidationError(RuntimeError):
    """One or more subprojects failed the check. Lists every failure in input order."""

    def __init__(self, failures: list[ValidationResult], marker: MarkerSpec) -> None:
        lines = [f"{len(failures)} subproject(s) failed the {marker.path} check (required line {marker.required_line!r}):"]
        lines.extend(f"  {f.subproject}: {f.reason.value}" for f in failures if f.reason is not None)
        super().__init__("\n".join(lines))
        self.failures = failures


class ProjectConfigValidator:
    def __init__(self, marker: MarkerSpec | None = None) -> None:
        self._marker = marker or MarkerSpec()

    def check_subproject(self, name: str, directory: Path) -> ValidationResult:
        """
        Check one subproject directory.

        Raises UnreadableFileError if the marker file exists but cannot be read.
        """
        path = directory / self._marker.path
        try:
            mode = path.stat().st_mode
        except (FileNotFoundError, NotADirectoryError):
            return ValidationResult(subproject=name, reason=FailureReason.MISSING_FILE)
        except OSError as e:
            raise UnreadableFileError(path, e) from e
        if not stat.S_ISREG(mode):
            return ValidationResult(subproject=name, reason=FailureReason.MISSING_FILE)

        try:
            # Universal newlines: "\n", "\r\n" and "\r" all end a line.
            with path.open("r", encoding="utf-8") as f:
                lines = [line.rstrip("\n") for line in f]
        except (OSError, UnicodeDecodeError) as e:
            raise UnreadableFileError(path, e) from e

        if self._marker.required_line not in lines:
            return ValidationResult(subproject=name, reason=FailureReason.MISSING_REQUIRED_LINE)
        return ValidationResult(subproject=name)

    def check_all(self, subprojects: Iterable[SubprojectConfig]) -> list[ValidationResult]:
        results: list[ValidationResult] = []
        for sub in subprojects:
            result = self.check_subproject(sub.name, sub.path)
            logger.debug("%s: %s", sub.name, "ok" if result.passed else result.reason.value)
            results.append(result)
        return results

    def validate(self, subprojects: Iterable[SubprojectConfig]) -> None:
        """Raise ValidationError listing every failing subproject; return silently otherwise."""
        failures = [r for r in self.check_all(subprojects) if not r.passed]
        if failures:
            raise ValidationError(failures, self._marker)
