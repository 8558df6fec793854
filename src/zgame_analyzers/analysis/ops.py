"""Analysis operations - discover, parse and check C# files."""

from __future__ import annotations

import asyncio
import os
import time
from collections.abc import Sequence
from pathlib import Path

from zgame_analyzers.analysis.models import AnalysisResult, FileResult
from zgame_analyzers.analysis.rules import CancelSignal, Rule, analyze_tree, registry
from zgame_analyzers.config.constants import CSHARP_SUFFIX, SKIPPED_DIR_NAMES
from zgame_analyzers.config.models import ZGameAnalyzersConfig
from zgame_analyzers.core.errors import AnalysisError, ZGameAnalyzersError
from zgame_analyzers.core.logging import get_logger
from zgame_analyzers.parsing.treesitter import CSharpParser, SyntaxTree
from zgame_analyzers.semantics.catalog import SymbolCatalog
from zgame_analyzers.semantics.model import Compilation

log = get_logger(__name__)


def discover_files(
    root: Path, *, max_file_size_mb: int | None = None
) -> tuple[list[Path], list[FileResult]]:
    """Find ``.cs`` files under ``root``.

    ``root`` may itself be a file. Directories in ``SKIPPED_DIR_NAMES`` are
    not entered; files over the size limit are returned as skipped results.
    """
    limit = max_file_size_mb * 1024 * 1024 if max_file_size_mb else None
    if root.is_file():
        candidates = [root]
    else:
        candidates = []
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if d not in SKIPPED_DIR_NAMES)
            candidates.extend(
                Path(dirpath) / name for name in sorted(filenames) if name.endswith(CSHARP_SUFFIX)
            )

    files: list[Path] = []
    skipped: list[FileResult] = []
    for path in candidates:
        if limit is not None and path.stat().st_size > limit:
            log.info("file_skipped", path=str(path), reason="too_large")
            skipped.append(FileResult(path=str(path), status="skipped", error_detail="file too large"))
            continue
        files.append(path)
    return files, skipped


def select_rules(rule_ids: Sequence[str] | None) -> list[Rule]:
    """Resolve rule IDs against the registry (all rules when None)."""
    if not rule_ids:
        return registry.all()
    rules: list[Rule] = []
    for rule_id in rule_ids:
        rule = registry.get(rule_id)
        if rule is None:
            raise AnalysisError.unknown_rule(rule_id, [r.rule_id for r in registry.all()])
        rules.append(rule)
    return rules


class AnalyzerOps:
    """Analysis operations for a Unity project.

    Files are parsed once on a worker thread, then analyzed concurrently;
    each per-file analysis only reads its own tree and the shared,
    read-only compilation.
    """

    def __init__(self, project_root: Path, config: ZGameAnalyzersConfig | None = None) -> None:
        self._project_root = project_root
        self._config = config or ZGameAnalyzersConfig()
        self._parser = CSharpParser()
        self._catalog = SymbolCatalog.from_config(self._config.catalog)

    @property
    def config(self) -> ZGameAnalyzersConfig:
        return self._config

    def parse_files(self, files: Sequence[Path]) -> tuple[list[SyntaxTree], list[FileResult]]:
        """Parse files, turning unreadable ones into error results."""
        trees: list[SyntaxTree] = []
        failures: list[FileResult] = []
        for path in files:
            try:
                tree = self._parser.parse(self._display_path(path), path.read_bytes())
            except OSError as e:
                log.warning("file_unreadable", path=str(path), error=str(e))
                failures.append(FileResult(path=str(path), status="error", error_detail=str(e)))
                continue
            except ZGameAnalyzersError as e:
                log.warning("file_parse_failed", path=str(path), error=e.message)
                failures.append(FileResult(path=str(path), status="error", error_detail=e.message))
                continue
            if tree.has_errors:
                log.debug("file_has_syntax_errors", path=tree.path, errors=tree.error_count)
            trees.append(tree)
        return trees, failures

    def build_compilation(self, trees: Sequence[SyntaxTree]) -> Compilation:
        return Compilation(trees, self._catalog)

    async def check(
        self,
        *,
        paths: Sequence[Path] | None = None,
        rule_ids: Sequence[str] | None = None,
        cancel_event: CancelSignal | None = None,
    ) -> AnalysisResult:
        """Run the selected rules over the project (or ``paths`` within it).

        Args:
            paths: Files or directories to check (default: project root)
            rule_ids: Specific rule IDs to run (default: all registered)
            cancel_event: Checked between node visits; cancelled files report
                no diagnostics.

        Returns:
            AnalysisResult with one FileResult per discovered file.

        Raises:
            AnalysisError: If a rule ID is unknown.
        """
        start_time = time.time()
        rules = select_rules(rule_ids)

        files: list[Path] = []
        results: list[FileResult] = []
        for root in paths or [self._project_root]:
            found, skipped = discover_files(root, max_file_size_mb=self._config.analysis.max_file_size_mb)
            files.extend(found)
            results.extend(skipped)

        trees, failures = await asyncio.to_thread(self.parse_files, files)
        results.extend(failures)
        compilation = await asyncio.to_thread(self.build_compilation, trees)

        sem = asyncio.Semaphore(self._config.analysis.max_workers)

        async def run_file(tree: SyntaxTree) -> FileResult:
            if cancel_event is not None and cancel_event.is_set():
                return FileResult(path=tree.path, status="cancelled")
            async with sem:
                model = compilation.model(tree)
                return await asyncio.to_thread(
                    analyze_tree, tree, model, rules, self._config, cancel_event
                )

        analyzed = await asyncio.gather(*(run_file(tree) for tree in trees))
        results.extend(analyzed)

        result = AnalysisResult(files=results, duration_seconds=time.time() - start_time)
        log.info(
            "analysis_complete",
            files=len(results),
            diagnostics=result.total_diagnostics,
            duration_seconds=round(result.duration_seconds, 3),
        )
        return result

    def _display_path(self, path: Path) -> str:
        """Project-relative path with forward slashes, or the path as given."""
        try:
            return path.resolve().relative_to(self._project_root.resolve()).as_posix()
        except ValueError:
            return path.as_posix()
