"""Tests for snippet unification."""

from __future__ import annotations

from pathlib import Path

import pytest

from symdoc.models import ModuleKind, Package, SymbolGraphResult, Target, TargetKind
from symdoc.symbolgraphs.unify import SnippetUnifier


class StaticSnippetSource:
    def __init__(self, snippet_file: Path | None) -> None:
        self.snippet_file = snippet_file
        self.calls: list[tuple[str, str]] = []

    def generate_snippets(self, target: Target, package: Package) -> Path | None:
        self.calls.append((target.name, package.name))
        return self.snippet_file


def _target(name: str = "Library", target_id: str = "abc123") -> Target:
    return Target(name=name, kind=TargetKind.SOURCE_MODULE, id=target_id, module_kind=ModuleKind.LIBRARY)


def _symbol_graphs(directory: Path, names: list[str]) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    for name in names:
        (directory / f"{name}.symbols.json").write_text(f'{{"module": "{name}"}}', encoding="utf-8")
    return directory


def _snippet_file(tmp_path: Path) -> Path:
    path = tmp_path / "snippets" / "MixedTargets-snippets.symbols.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text('{"snippets": []}', encoding="utf-8")
    return path


def _listing(root: Path) -> list[str]:
    return sorted(path.relative_to(root).as_posix() for path in root.rglob("*"))


@pytest.fixture
def package(tmp_path: Path) -> Package:
    return Package(name="MixedTargets", root=tmp_path)


def test_without_extractor_result_is_pass_through(tmp_path: Path, package: Package) -> None:
    graphs = _symbol_graphs(tmp_path / "graphs", ["Library"])
    unifier = SnippetUnifier(tmp_path / "scratch")

    result = unifier.unify(_target(), package, graphs)

    assert result == SymbolGraphResult.single(graphs)
    assert result.unified_directory == graphs
    assert not (tmp_path / "scratch").exists()


def test_extractor_without_snippets_is_pass_through(tmp_path: Path, package: Package) -> None:
    graphs = _symbol_graphs(tmp_path / "graphs", ["Library"])
    extractor = StaticSnippetSource(None)
    unifier = SnippetUnifier(tmp_path / "scratch", extractor)

    result = unifier.unify(_target(), package, graphs)

    assert extractor.calls == [("Library", "MixedTargets")]
    assert result.unified_directory == graphs
    assert result.snippet_file is None
    assert not result.is_unified


def test_snippets_are_merged_into_unified_directory(tmp_path: Path, package: Package) -> None:
    graphs = _symbol_graphs(tmp_path / "graphs", ["Library", "Library@Swift"])
    snippet = _snippet_file(tmp_path)
    unifier = SnippetUnifier(tmp_path / "scratch", StaticSnippetSource(snippet))

    result = unifier.unify(_target(), package, graphs)

    expected = tmp_path / "scratch" / "symbol-graphs" / "unified-symbol-graphs" / "Library-abc123"
    assert result.unified_directory == expected
    assert result.target_directory == expected / "target-symbol-graphs"
    assert result.snippet_file == expected / "MixedTargets-snippets.symbols.json"
    assert result.is_unified
    assert _listing(expected) == [
        "MixedTargets-snippets.symbols.json",
        "target-symbol-graphs",
        "target-symbol-graphs/Library.symbols.json",
        "target-symbol-graphs/Library@Swift.symbols.json",
    ]
    assert result.snippet_file.read_text(encoding="utf-8") == '{"snippets": []}'


def test_source_directories_are_left_intact(tmp_path: Path, package: Package) -> None:
    graphs = _symbol_graphs(tmp_path / "graphs", ["Library"])
    snippet = _snippet_file(tmp_path)
    unifier = SnippetUnifier(tmp_path / "scratch", StaticSnippetSource(snippet))

    unifier.unify(_target(), package, graphs)

    assert (graphs / "Library.symbols.json").exists()
    assert snippet.exists()


def test_unification_is_idempotent(tmp_path: Path, package: Package) -> None:
    graphs = _symbol_graphs(tmp_path / "graphs", ["Library"])
    snippet = _snippet_file(tmp_path)
    unifier = SnippetUnifier(tmp_path / "scratch", StaticSnippetSource(snippet))

    first = unifier.unify(_target(), package, graphs)
    first_listing = _listing(first.unified_directory)
    (first.unified_directory / "stale.symbols.json").write_text("{}", encoding="utf-8")
    second = unifier.unify(_target(), package, graphs)

    assert second == first
    assert _listing(second.unified_directory) == first_listing


def test_different_targets_get_distinct_directories(tmp_path: Path, package: Package) -> None:
    snippet = _snippet_file(tmp_path)
    unifier = SnippetUnifier(tmp_path / "scratch", StaticSnippetSource(snippet))

    library = unifier.unify(_target("Library", "one"), package, _symbol_graphs(tmp_path / "a", ["Library"]))
    same_name = unifier.unify(_target("Library", "two"), package, _symbol_graphs(tmp_path / "b", ["Library"]))

    assert library.unified_directory != same_name.unified_directory
    assert library.unified_directory.exists()
    assert same_name.unified_directory.exists()


def test_copy_failure_propagates(tmp_path: Path, package: Package) -> None:
    snippet = _snippet_file(tmp_path)
    unifier = SnippetUnifier(tmp_path / "scratch", StaticSnippetSource(snippet))

    with pytest.raises(FileNotFoundError):
        unifier.unify(_target(), package, tmp_path / "missing-graphs")
