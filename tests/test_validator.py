from __future__ import annotations

from pathlib import Path
from unittest import mock

import pytest

from buildwire.config import MarkerSpec, SubprojectConfig
from buildwire.validator import (
    FailureReason,
    ProjectConfigValidator,
    UnreadableFileError,
    ValidationError,
    ValidationResult,
)


def _subs(tmp_path: Path, *names: str) -> list[SubprojectConfig]:
    return [SubprojectConfig(name=n, path=tmp_path / n) for n in names]


def test_one_of_two_missing_required_line(tmp_path: Path, write_gitignore) -> None:
    write_gitignore("a", ["build/", "*.class"])
    write_gitignore("b", ["*.class"])

    with pytest.raises(ValidationError) as exc:
        ProjectConfigValidator().validate(_subs(tmp_path, "a", "b"))

    assert exc.value.failures == [ValidationResult("b", FailureReason.MISSING_REQUIRED_LINE)]
    message = str(exc.value)
    assert "b: MissingRequiredLine" in message
    assert "a:" not in message


def test_missing_file(tmp_path: Path) -> None:
    (tmp_path / "a").mkdir()
    with pytest.raises(ValidationError) as exc:
        ProjectConfigValidator().validate(_subs(tmp_path, "a"))
    assert exc.value.failures == [ValidationResult("a", FailureReason.MISSING_FILE)]
    assert "a: MissingFile" in str(exc.value)


def test_missing_subproject_directory_is_missing_file(tmp_path: Path) -> None:
    results = ProjectConfigValidator().check_all(_subs(tmp_path, "nowhere"))
    assert results == [ValidationResult("nowhere", FailureReason.MISSING_FILE)]


def test_directory_in_place_of_marker_is_missing_file(tmp_path: Path) -> None:
    (tmp_path / "a" / ".gitignore").mkdir(parents=True)
    results = ProjectConfigValidator().check_all(_subs(tmp_path, "a"))
    assert results[0].reason is FailureReason.MISSING_FILE


def test_all_pass(tmp_path: Path, write_gitignore) -> None:
    write_gitignore("a", ["build/"])
    write_gitignore("b", ["*.iml", "build/"])
    assert ProjectConfigValidator().validate(_subs(tmp_path, "a", "b")) is None


@pytest.mark.parametrize("line", ["Build/", "build", "/build/", " build/", "build/ ", "build\\"])
def test_near_misses_are_missing_required_line(tmp_path: Path, write_gitignore, line: str) -> None:
    write_gitignore("a", [line])
    results = ProjectConfigValidator().check_all(_subs(tmp_path, "a"))
    assert results == [ValidationResult("a", FailureReason.MISSING_REQUIRED_LINE)]


@pytest.mark.parametrize("content", [b"*.class\r\nbuild/\r\n", b"*.class\rbuild/\r", b"build/\r\n"])
def test_crlf_and_cr_line_endings_match(tmp_path: Path, content: bytes) -> None:
    (tmp_path / "a").mkdir()
    (tmp_path / "a" / ".gitignore").write_bytes(content)
    assert ProjectConfigValidator().check_all(_subs(tmp_path, "a"))[0].passed


def test_trailing_whitespace_before_crlf_does_not_match(tmp_path: Path) -> None:
    (tmp_path / "a").mkdir()
    (tmp_path / "a" / ".gitignore").write_bytes(b"build/ \r\n")
    results = ProjectConfigValidator().check_all(_subs(tmp_path, "a"))
    assert results[0].reason is FailureReason.MISSING_REQUIRED_LINE


def test_last_line_without_trailing_newline_matches(tmp_path: Path) -> None:
    (tmp_path / "a").mkdir()
    (tmp_path / "a" / ".gitignore").write_text("*.class\nbuild/", encoding="utf-8")
    assert ProjectConfigValidator().check_all(_subs(tmp_path, "a"))[0].passed


def test_reports_every_failure_in_input_order(tmp_path: Path, write_gitignore) -> None:
    write_gitignore("ok1", ["build/"])
    write_gitignore("bad1", ["out/"])
    write_gitignore("ok2", ["build/"])
    (tmp_path / "bad2").mkdir()
    write_gitignore("bad3", [])

    with pytest.raises(ValidationError) as exc:
        ProjectConfigValidator().validate(_subs(tmp_path, "bad3", "ok1", "bad1", "ok2", "bad2"))

    assert [f.subproject for f in exc.value.failures] == ["bad3", "bad1", "bad2"]
    lines = str(exc.value).splitlines()
    assert lines[1:] == [
        "  bad3: MissingRequiredLine",
        "  bad1: MissingRequiredLine",
        "  bad2: MissingFile",
    ]


def test_check_is_idempotent_and_read_only(tmp_path: Path, write_gitignore) -> None:
    path = write_gitignore("a", ["build/"])
    write_gitignore("b", ["*.class"])
    before = path.read_bytes()
    validator = ProjectConfigValidator()
    subs = _subs(tmp_path, "a", "b")

    first = validator.check_all(subs)
    second = validator.check_all(subs)

    assert first == second
    assert path.read_bytes() == before


def test_undecodable_file_is_fatal(tmp_path: Path) -> None:
    (tmp_path / "a").mkdir()
    (tmp_path / "a" / ".gitignore").write_bytes(b"build/\n\xff\xfe\n")
    with pytest.raises(UnreadableFileError) as exc:
        ProjectConfigValidator().check_all(_subs(tmp_path, "a"))
    assert exc.value.path == tmp_path / "a" / ".gitignore"


def test_custom_marker(tmp_path: Path) -> None:
    (tmp_path / "a").mkdir()
    (tmp_path / "a" / ".hgignore").write_text("out/\n", encoding="utf-8")
    validator = ProjectConfigValidator(MarkerSpec(path=".hgignore", required_line="out/"))
    assert validator.check_all(_subs(tmp_path, "a"))[0].passed


def test_stat_permission_error_is_fatal(tmp_path: Path, write_gitignore) -> None:
    marker = write_gitignore("a", ["build/"])
    real_stat = Path.stat

    def stat(self: Path, *args, **kwargs):
        if self == marker:
            raise PermissionError(13, "Permission denied", str(self))
        return real_stat(self, *args, **kwargs)

    with mock.patch.object(Path, "stat", stat):
        with pytest.raises(UnreadableFileError) as exc:
            ProjectConfigValidator().check_all(_subs(tmp_path, "a"))
    assert exc.value.path == marker
    assert isinstance(exc.value.__cause__, PermissionError)


def test_open_error_is_fatal(tmp_path: Path, write_gitignore) -> None:
    marker = write_gitignore("a", ["build/"])

    with mock.patch.object(Path, "open", side_effect=OSError(5, "Input/output error")):
        with pytest.raises(UnreadableFileError) as exc:
            ProjectConfigValidator().check_all(_subs(tmp_path, "a"))
    assert exc.value.path == marker
    assert "Input/output error" in str(exc.value)


def test_file_under_a_regular_file_is_missing_file(tmp_path: Path) -> None:
    (tmp_path / "a").write_text("not a directory", encoding="utf-8")
    results = ProjectConfigValidator().check_all(_subs(tmp_path, "a"))
    assert results == [ValidationResult("a", FailureReason.MISSING_FILE)]


@pytest.mark.parametrize("content", ["foo\n", "", "foo\r\n"])
def test_empty_required_line_needs_a_blank_line(tmp_path: Path, content: str) -> None:
    (tmp_path / "a").mkdir()
    (tmp_path / "a" / ".gitignore").write_bytes(content.encode("utf-8"))
    validator = ProjectConfigValidator(MarkerSpec(required_line=""))
    results = validator.check_all(_subs(tmp_path, "a"))
    assert results[0].reason is FailureReason.MISSING_REQUIRED_LINE


def test_empty_required_line_matches_blank_line(tmp_path: Path) -> None:
    (tmp_path / "a").mkdir()
    (tmp_path / "a" / ".gitignore").write_text("foo\n\nbar\n", encoding="utf-8")
    validator = ProjectConfigValidator(MarkerSpec(required_line=""))
    assert validator.check_all(_subs(tmp_path, "a"))[0].passed
