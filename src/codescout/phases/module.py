"""Module phase: full analysis of every module the quick phase found."""

from __future__ import annotations

import logging

from codescout.exceptions import ModuleAnalysisError
from codescout.models import ScanPhase
from codescout.scanner import PhaseRunner, ScanContext

logger = logging.getLogger(__name__)


class ModuleScanPhase(PhaseRunner):
    phase = ScanPhase.MODULE

    def run(self, context: ScanContext) -> None:
        result = context.result
        total = len(result.modules)
        context.report_progress(0, total, f"Analyzing {total} modules")

        analyzed = []
        for index, module in enumerate(result.modules, start=1):
            context.check_limits()
            try:
                analyzed.append(context.registry.analyze_module(module.path, module.type))
            except ModuleAnalysisError as e:
                # keep the quick-phase record so the module is still listed
                logger.warning("Keeping minimal record for %s: %s", module.path, e)
                analyzed.append(module)
            context.record.files_processed = index
            context.report_progress(index, total, f"Analyzed {module.name}")

        result.modules = analyzed
        result.statistics.modules_found = len(analyzed)
