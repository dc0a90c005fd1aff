"""CLI behaviour tests."""

from __future__ import annotations

import threading
from pathlib import Path

import pytest

import symdoc.cli as cli_module
from symdoc.cli import _build_parser, main
from symdoc.orchestrator import Orchestrator
from symdoc.toolchain import Toolchain
from tests._fixtures.generators import RecordingGenerator


def test_cli_accumulates_repeated_selections() -> None:
    parser = _build_parser()
    args = parser.parse_args(
        ["generate", "--target", "Executable", "--product", "Library", "--target", "Library"]
    )
    assert args.command == "generate"
    assert args.targets == ["Executable", "Library"]
    assert args.products == ["Library"]


def test_cli_defaults_to_no_selection() -> None:
    args = _build_parser().parse_args(["generate"])
    assert args.targets == []
    assert args.products == []
    assert args.include_extended_types is None
    assert args.path == "."


def test_cli_accepts_verbose_after_command() -> None:
    args = _build_parser().parse_args(["generate", "--verbose"])
    assert args.verbose is True


def test_cli_extended_types_flags() -> None:
    parser = _build_parser()
    assert parser.parse_args(["generate", "--include-extended-types"]).include_extended_types is True
    assert parser.parse_args(["generate", "--exclude-extended-types"]).include_extended_types is False
    with pytest.raises(SystemExit):
        parser.parse_args(["generate", "--include-extended-types", "--exclude-extended-types"])


def test_cli_symbol_graph_flags() -> None:
    args = _build_parser().parse_args(
        [
            "generate",
            "--symbol-graph-minimum-access-level",
            "internal",
            "--skip-synthesized-symbols",
            "--disable-snippet-extraction",
        ]
    )
    assert args.minimum_access_level == "internal"
    assert args.skip_synthesized_symbols is True
    assert args.disable_snippet_extraction is True


def test_list_targets_prints_documentable_targets(package_builder, capsys) -> None:
    main(["list-targets", str(package_builder.root), "--package-description", str(package_builder.description_path)])

    out = capsys.readouterr().out.splitlines()
    assert out == ["Executable (executable)", "ExecutableMain (executable)", "Library (library)"]


@pytest.fixture
def recording_cli(monkeypatch, tmp_path: Path) -> RecordingGenerator:
    generator = RecordingGenerator(tmp_path / "graphs", failing=["ExecutableMain"])

    def _factory() -> Orchestrator:
        return Orchestrator(
            toolchain=Toolchain(version=(5, 9, 0)),
            generator=generator,
            lock=threading.Lock(),
        )

    monkeypatch.setattr(cli_module, "Orchestrator", _factory)
    return generator


def test_generate_prints_result_directories(package_builder, recording_cli, capsys) -> None:
    main(
        [
            "generate",
            str(package_builder.root),
            "--package-description",
            str(package_builder.description_path),
            "--target",
            "Executable",
            "--target",
            "Library",
        ]
    )

    out = capsys.readouterr().out
    assert "Executable: " in out
    assert "Library: " in out
    assert sorted(name for name, _ in recording_cli.calls) == ["Executable", "Library"]


def test_generate_rejects_test_targets(package_builder, recording_cli, capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(
            [
                "generate",
                str(package_builder.root),
                "--package-description",
                str(package_builder.description_path),
                "--target",
                "Tests",
            ]
        )

    assert excinfo.value.code == 1
    assert "target 'Tests' is a test target" in capsys.readouterr().err
    assert recording_cli.calls == []


def test_generate_exits_non_zero_when_a_target_fails(package_builder, recording_cli, capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(
            [
                "generate",
                str(package_builder.root),
                "--package-description",
                str(package_builder.description_path),
                "--product",
                "Executable",
                "--target",
                "Library",
            ]
        )

    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    assert "Library: " in captured.out
    assert "ExecutableMain: failed" in captured.err
    assert "1 target(s) failed" in captured.err
