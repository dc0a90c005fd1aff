"""Tests for symdoc.toolchain."""

from __future__ import annotations

import subprocess

import pytest

from symdoc.toolchain import Toolchain, parse_version


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("swift-driver version: 1.87.3 Apple Swift version 5.9.2 (swiftlang-5.9.2.2.56)", (5, 9, 2)),
        ("Swift version 5.7 (swift-5.7-RELEASE)\nTarget: x86_64-unknown-linux-gnu", (5, 7, 0)),
        ("6.0", (6, 0, 0)),
        ("no version here", None),
    ],
)
def test_parse_version(text: str, expected) -> None:
    assert parse_version(text) == expected


def test_detect_uses_swift_version_output() -> None:
    calls = []

    def runner(args):
        calls.append(list(args))
        return "Swift version 5.7.3 (swift-5.7.3-RELEASE)\n"

    toolchain = Toolchain.detect("swift", runner=runner)

    assert calls == [["swift", "--version"]]
    assert toolchain.version == (5, 7, 3)
    assert toolchain.supports_extension_blocks is False


def test_configured_version_skips_detection() -> None:
    def runner(args):  # pragma: no cover - must not run
        raise AssertionError("swift --version should not be invoked")

    toolchain = Toolchain.detect(configured_version="5.8", runner=runner)

    assert toolchain.version == (5, 8, 0)
    assert toolchain.supports_extension_blocks is True
    assert toolchain.version_string == "5.8.0"


def test_unknown_toolchain_assumes_support() -> None:
    def runner(args):
        raise subprocess.CalledProcessError(127, list(args))

    toolchain = Toolchain.detect(runner=runner)

    assert toolchain.version is None
    assert toolchain.version_string == "unknown"
    assert toolchain.supports_extension_blocks is True
