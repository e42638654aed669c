from __future__ import annotations

import logging

from buildwire.build_scan import build_scan_attributes
from buildwire.config import BuildScanSpec


def test_no_ci_no_attributes() -> None:
    attrs = build_scan_attributes(BuildScanSpec(), {"CIRCLE_BRANCH": "main"})
    assert attrs.tags == ()
    assert attrs.values == ()
    assert attrs.links == ()
    assert attrs.license_agree == "yes"
    assert attrs.license_agreement_url == "https://gradle.com/terms-of-service"


def test_ci_with_circle_variables(caplog) -> None:
    env = {
        "CI": "true",
        "CIRCLE_BRANCH": "feature/x",
        "CIRCLE_BUILD_NUM": "42",
        "CIRCLE_BUILD_URL": "https://circleci.example/42",
        "CIRCLE_SHA1": "abc123",
        "CIRCLE_COMPARE_URL": "https://github.example/compare",
        "CIRCLE_REPOSITORY_URL": "https://github.example/repo",
        "CIRCLE_PR_NUMBER": "7",
    }
    with caplog.at_level(logging.INFO, logger="buildwire.build_scan"):
        attrs = build_scan_attributes(BuildScanSpec(), env)

    assert attrs.tags == ("CI", "feature/x")
    assert dict(attrs.values) == {
        "Circle CI Build Number": "42",
        "Revision": "abc123",
        "Repository": "https://github.example/repo",
        "Pull Request Number": "7",
    }
    assert dict(attrs.links) == {
        "Build URL": "https://circleci.example/42",
        "Diff": "https://github.example/compare",
    }
    assert "Running in CI environment" in caplog.text


def test_ci_set_but_empty_skips_unset_variables() -> None:
    attrs = build_scan_attributes(BuildScanSpec(), {"CI": "", "CIRCLE_SHA1": "abc"})
    assert attrs.tags == ("CI",)
    assert attrs.values == (("Revision", "abc"),)
    assert attrs.links == ()
    assert attrs.to_dict()["values"] == {"Revision": "abc"}
