"""Pipeline orchestration: selection, generation, snippet unification."""

from __future__ import annotations

import json
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, ContextManager, Dict, List, Optional

from .config import ConfigError, SymDocConfig, load_config
from .logging import get_logger
from .models import Package, SelectionRequest, SymbolGraphResult, Target
from .package import load_package
from .selection import resolve_or_default
from .symbolgraphs import (
    GenerationCoordinator,
    SnippetExtractor,
    SnippetUnifier,
    SwiftBuildGenerator,
    SymbolGraphGenerator,
    SymbolGraphOverrides,
    build_options,
    default_symbol_graph_options,
)
from .symbolgraphs.unify import SnippetSource
from .toolchain import Toolchain

MANIFEST_FILENAME = "symbol-graphs.json"

PackageLoader = Callable[..., Package]


@dataclass
class TargetOutcome:
    """Result of running the pipeline for one target."""

    target: Target
    result: Optional[SymbolGraphResult] = None
    error: Optional[Exception] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.result is not None


@dataclass
class RunReport:
    """Outcomes for every resolved target, in resolution order."""

    package: Package
    outcomes: List[TargetOutcome] = field(default_factory=list)
    manifest: Optional[Path] = None

    @property
    def failures(self) -> List[TargetOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.succeeded]

    @property
    def succeeded(self) -> bool:
        return not self.failures


class Orchestrator:
    """Coordinates symbol graph pipelines for the targets of one package."""

    def __init__(
        self,
        *,
        package_loader: PackageLoader | None = None,
        toolchain: Toolchain | None = None,
        generator: SymbolGraphGenerator | None = None,
        snippet_extractor: SnippetSource | None = None,
        lock: ContextManager[object] | None = None,
    ) -> None:
        self.package_loader = package_loader or load_package
        self.toolchain = toolchain
        self.generator = generator
        self.snippet_extractor = snippet_extractor
        self.lock = lock
        self.logger = get_logger("orchestrator")

    def load(self, path: str | Path, *, package_description: Path | None = None) -> tuple[SymDocConfig, Package]:
        """Return the configuration and package model rooted at ``path``."""
        repo_path = Path(path).expanduser().resolve()
        config = self._load_config(repo_path)
        package = self.package_loader(
            repo_path,
            description=package_description,
            swift=config.toolchain.swift,
        )
        return config, package

    def run(
        self,
        path: str | Path,
        request: SelectionRequest,
        overrides: SymbolGraphOverrides | None = None,
        *,
        snippets: bool = True,
        jobs: int | None = None,
        package_description: Path | None = None,
    ) -> RunReport:
        """Generate symbol graphs for every selected target of the package at ``path``.

        Outcomes keep one entry per selection, duplicates included, though each
        distinct target is generated once. Selection errors abort the whole run.
        Failures while generating or unifying a single target are recorded on
        its outcome and do not stop the other targets.
        """
        config, package = self.load(path, package_description=package_description)
        self.logger.info("Documenting package %s at %s", package.name, package.root)

        targets = resolve_or_default(request, package)
        self.logger.debug("Resolved targets: %s", ", ".join(target.name for target in targets))

        toolchain = self._resolve_toolchain(config)
        scratch = config.scratch_path
        coordinator = GenerationCoordinator(
            self.generator
            or SwiftBuildGenerator(package.root, scratch, toolchain=toolchain),
            lock=self.lock,
        )
        unifier = SnippetUnifier(scratch, self._resolve_snippet_extractor(config, snippets))
        overrides = overrides or SymbolGraphOverrides()

        def _document(target: Target) -> TargetOutcome:
            try:
                defaults = default_symbol_graph_options(
                    target,
                    supports_extension_blocks=toolchain.supports_extension_blocks,
                    config=config.symbol_graph,
                )
                options = build_options(
                    target,
                    defaults,
                    overrides,
                    supports_extension_blocks=toolchain.supports_extension_blocks,
                )
                directory = coordinator.generate(target, options)
                result = unifier.unify(target, package, directory)
            except Exception as exc:
                self._log_exception(f"Failed to document target {target.name}", exc)
                return TargetOutcome(target=target, error=exc)
            return TargetOutcome(target=target, result=result)

        # A target selected more than once owns a single unified directory, so it
        # runs once and every selection of it shares that outcome.
        distinct = list({target.id: target for target in targets}.values())
        workers = self._worker_count(jobs or config.jobs, len(distinct))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="symdoc") as pool:
            by_id = {outcome.target.id: outcome for outcome in pool.map(_document, distinct)}

        report = RunReport(package=package, outcomes=[by_id[target.id] for target in targets])
        report.manifest = self._write_manifest(scratch, report)
        return report

    def documentable_targets(
        self, path: str | Path, *, package_description: Path | None = None
    ) -> List[Target]:
        _, package = self.load(path, package_description=package_description)
        return package.documentable_targets

    # ------------------------------------------------------------------
    # Helpers

    def _load_config(self, repo_path: Path) -> SymDocConfig:
        try:
            return load_config(repo_path)
        except ConfigError as exc:
            self.logger.warning("Ignoring invalid configuration: %s", exc)
            return SymDocConfig(root=repo_path)

    def _resolve_toolchain(self, config: SymDocConfig) -> Toolchain:
        if self.toolchain is not None:
            return self.toolchain
        toolchain = Toolchain.detect(
            config.toolchain.swift,
            configured_version=config.toolchain.swift_version,
        )
        self.logger.debug("Using Swift toolchain %s", toolchain.version_string)
        return toolchain

    def _resolve_snippet_extractor(
        self, config: SymDocConfig, snippets: bool
    ) -> Optional[SnippetSource]:
        if not snippets or not config.snippets.enabled:
            return None
        if self.snippet_extractor is not None:
            return self.snippet_extractor
        return SnippetExtractor(config.scratch_path, executable=config.snippets.executable)

    @staticmethod
    def _worker_count(requested: int | None, target_count: int) -> int:
        if requested is not None and requested > 0:
            return requested
        return max(1, min(target_count, os.cpu_count() or 1))

    def _write_manifest(self, scratch: Path, report: RunReport) -> Path:
        entries: List[Dict[str, object]] = []
        for outcome in report.outcomes:
            entry: Dict[str, object] = {
                "name": outcome.target.name,
                "id": outcome.target.id,
            }
            if outcome.result is not None:
                entry["unified_directory"] = str(outcome.result.unified_directory)
                entry["target_directory"] = str(outcome.result.target_directory)
                entry["snippet_file"] = (
                    str(outcome.result.snippet_file)
                    if outcome.result.snippet_file is not None
                    else None
                )
            if outcome.error is not None:
                entry["error"] = str(outcome.error)
            entries.append(entry)

        manifest = scratch / "symbol-graphs" / MANIFEST_FILENAME
        manifest.parent.mkdir(parents=True, exist_ok=True)
        manifest.write_text(
            json.dumps({"package": report.package.name, "targets": entries}, indent=2),
            encoding="utf-8",
        )
        self.logger.debug("Wrote symbol graph manifest to %s", manifest)
        return manifest

    def _log_exception(self, message: str, exc: Exception) -> None:
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.exception("%s: %s", message, exc)
        else:
            self.logger.error("%s: %s", message, exc)


__all__ = ["MANIFEST_FILENAME", "Orchestrator", "RunReport", "TargetOutcome"]
