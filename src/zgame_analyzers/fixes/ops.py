"""Fix operations - analyze, apply fixes, write or preview."""

from __future__ import annotations

import asyncio
import difflib
import os
import tempfile
import time
from collections.abc import Sequence
from pathlib import Path

from zgame_analyzers.analysis.models import Diagnostic
from zgame_analyzers.analysis.ops import AnalyzerOps
from zgame_analyzers.config.models import ZGameAnalyzersConfig
from zgame_analyzers.core.errors import FixError
from zgame_analyzers.core.logging import get_logger
from zgame_analyzers.fixes.models import CodeFix, Document, FileFix, FixResult
from zgame_analyzers.fixes.providers import FixProviderRegistry, fix_registry
from zgame_analyzers.parsing.treesitter import CSharpParser

log = get_logger(__name__)


def unified_diff(path: str, before: bytes, after: bytes) -> str:
    """Unified diff between two versions of a file."""
    return "".join(
        difflib.unified_diff(
            before.decode("utf-8", errors="replace").splitlines(keepends=True),
            after.decode("utf-8", errors="replace").splitlines(keepends=True),
            fromfile=f"a/{path}",
            tofile=f"b/{path}",
        )
    )


def write_atomic(path: Path, content: bytes) -> None:
    """Write via a temp file in the same directory, then replace.

    Raises:
        FixError: If the file cannot be written.
    """
    try:
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as tmp:
                tmp.write(content)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as e:
        raise FixError.write_failed(str(path), str(e)) from e


class FixOps:
    """Fix operations for a Unity project.

    Runs analysis, asks the fix providers for an edit per diagnostic and
    applies all edits of a file in one pass.
    """

    def __init__(
        self,
        project_root: Path,
        config: ZGameAnalyzersConfig | None = None,
        *,
        providers: FixProviderRegistry | None = None,
    ) -> None:
        self._project_root = project_root
        self._config = config or ZGameAnalyzersConfig()
        self._providers = providers or fix_registry
        self._analyzer = AnalyzerOps(project_root, self._config)

    async def fix(
        self,
        *,
        paths: Sequence[Path] | None = None,
        rule_ids: Sequence[str] | None = None,
        dry_run: bool = False,
    ) -> FixResult:
        """Fix diagnostics in the project (or ``paths`` within it).

        Args:
            paths: Files or directories to fix (default: project root)
            rule_ids: Only fix diagnostics of these rules (default: all)
            dry_run: Return unified diffs instead of writing files

        Returns:
            FixResult with one FileFix per changed file.

        Raises:
            AnalysisError: If a rule ID is unknown.
            FixError: If a fixed file cannot be written.
        """
        start_time = time.time()
        analysis = await self._analyzer.check(paths=paths, rule_ids=rule_ids)

        by_path: dict[str, list[Diagnostic]] = {}
        for diagnostic in analysis.diagnostics:
            by_path.setdefault(diagnostic.path, []).append(diagnostic)

        files = await asyncio.to_thread(self._fix_files, by_path, dry_run)

        result = FixResult(dry_run=dry_run, files=files, duration_seconds=time.time() - start_time)
        log.info(
            "fix_complete",
            dry_run=dry_run,
            files_changed=result.files_changed,
            fixes=result.total_fixes,
        )
        return result

    def _fix_files(self, by_path: dict[str, list[Diagnostic]], dry_run: bool) -> list[FileFix]:
        parser = CSharpParser()
        results: list[FileFix] = []
        for path, diagnostics in sorted(by_path.items()):
            file_fix = self.fix_document(parser, path, diagnostics, dry_run=dry_run)
            if file_fix is not None:
                results.append(file_fix)
        return results

    def fix_document(
        self,
        parser: CSharpParser,
        path: str,
        diagnostics: Sequence[Diagnostic],
        *,
        dry_run: bool,
    ) -> FileFix | None:
        """Apply fixes for ``diagnostics`` to one file. Returns None if nothing changed."""
        disk_path = self._disk_path(path)
        source = disk_path.read_bytes()
        tree = parser.parse(path, source)

        fixes: list[CodeFix] = []
        for diagnostic in diagnostics:
            fix = self._providers.fix_for(tree, diagnostic)
            # Two LINQ calls on one line share the same annotation
            if fix is not None and all(fix.edits != f.edits for f in fixes):
                fixes.append(fix)

        before = Document(path=path, source=source)
        after = before.apply(edit for fix in fixes for edit in fix.edits)
        if after.source == before.source:
            return None

        old_lines = before.source.splitlines()
        new_lines = after.source.splitlines()
        file_fix = FileFix(
            path=path,
            fixes=fixes,
            old_hash=before.content_hash,
            new_hash=after.content_hash,
            insertions=max(0, len(new_lines) - len(old_lines)),
            deletions=max(0, len(old_lines) - len(new_lines)),
        )

        if dry_run:
            file_fix.diff = unified_diff(path, before.source, after.source)
        else:
            write_atomic(disk_path, after.source)
            file_fix.written = True
            log.info("fix_applied", path=path, fixes=len(fixes))
        return file_fix

    def _disk_path(self, path: str) -> Path:
        candidate = Path(path)
        return candidate if candidate.is_absolute() else self._project_root / candidate
