"""Deep phase: catch modules the quick pass missed and measure the code."""

from __future__ import annotations

import logging
import os

from codescout.exceptions import ClassificationError, ModuleAnalysisError
from codescout.file_operations import count_lines, holds_any, is_within
from codescout.models import ModuleInfo, ScanPhase
from codescout.scanner import PhaseRunner, ScanContext

logger = logging.getLogger(__name__)


class DeepScanPhase(PhaseRunner):
    """Discovery with outermost-wins pruning, then a line count.

    Roots inside an already known module are left alone, as are roots
    holding no scanned file.
    """

    phase = ScanPhase.DEEP

    def run(self, context: ScanContext) -> None:
        result = context.result
        limits = context.config.performance_limits

        context.report_progress(0, 100, "Searching for additional modules")
        known = [m.path for m in result.modules]
        scanned_dirs = {os.path.dirname(f.path) for f in result.scanned_files}
        added: list[ModuleInfo] = []
        for path in context.registry.find_modules(context.root, limits.max_depth):
            context.check_limits()
            if any(is_within(path, k) for k in known):
                continue
            if not holds_any(path, scanned_dirs):
                continue
            try:
                module = context.registry.analyze_module(path)
            except (ClassificationError, ModuleAnalysisError) as e:
                logger.warning("Skipping module %s: %s", path, e)
                continue
            added.append(module)
            known.append(path)
        if added:
            logger.info("Deep scan found %d additional modules", len(added))
        result.modules.extend(added)
        result.statistics.modules_found = len(result.modules)

        context.report_progress(50, 100, "Counting lines of code")
        total = len(result.scanned_files)
        lines = 0
        for index, info in enumerate(result.scanned_files, start=1):
            if info.size <= limits.max_file_size:
                lines += count_lines(info.path)
            context.record.files_processed = index
        result.statistics.lines_of_code = lines
        context.report_progress(100, 100, f"Counted {lines} lines in {total} files")
