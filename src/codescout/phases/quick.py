"""Quick phase: one cheap pass producing an approximate inventory."""

from __future__ import annotations

import logging
import os

from codescout.constants import MODULE_CONTAINER_DIRS, MODULE_INDICATORS, PROGRESS_INTERVAL
from codescout.detectors.base import module_name_from_path
from codescout.exceptions import ScanError
from codescout.file_operations import holds_any, walk_files
from codescout.models import FileInfo, ModuleInfo, ProjectType, ScanPhase
from codescout.recommendations import quick_recommendations
from codescout.scanner import PhaseRunner, ScanContext

logger = logging.getLogger(__name__)


class QuickScanPhase(PhaseRunner):
    """Enumerate, filter and classify without reading any manifest contents.

    Modules found here are minimal records (type and name only); the module
    phase fills in the rest.
    """

    phase = ScanPhase.QUICK

    def run(self, context: ScanContext) -> None:
        root = context.root
        try:
            self._run(context)
        except ScanError:
            raise
        except Exception as e:
            raise ScanError(
                f"Quick scan failed: {e}", "QUICK_SCAN_FAILED", root, ScanPhase.QUICK
            ) from e

    def _run(self, context: ScanContext) -> None:
        root = context.root
        result = context.result
        context.report_progress(0, 100, "Starting quick scan")

        # 1. ignore file
        context.filter_engine.load_ignore_file(root, context.config.ignore_file)
        context.check_limits()

        # 2. enumerate
        all_files = self._enumerate(context)
        context.check_limits()
        context.report_progress(30, 100, f"Found {len(all_files)} files, filtering")

        # 3. filter
        scanned = context.filter_engine.filter_file_infos(all_files, root)
        included = {info.path for info in scanned}
        result.scanned_files = scanned
        result.ignored_files = [info for info in all_files if info.path not in included]
        context.check_limits()
        context.report_progress(50, 100, "Filtering complete, detecting modules")

        # 4. project type
        result.project_type = context.registry.detect_project_type(root)
        context.check_limits()

        # 5. candidates, 6. detect-only classification
        candidates = self._candidate_roots(context, scanned)
        result.modules = self._classify(context, candidates)
        context.report_progress(70, 100, f"Identified {len(result.modules)} modules")

        # 7. statistics
        stats = result.statistics
        stats.total_files = len(all_files)
        stats.scanned_files = len(scanned)
        stats.ignored_files = len(all_files) - len(scanned)
        stats.modules_found = len(result.modules)
        stats.update_coverage()
        context.check_limits()
        context.report_progress(90, 100, "Statistics updated")

        # 8. recommendations
        result.recommendations = quick_recommendations(result)
        context.record.files_processed = stats.total_files
        context.report_progress(100, 100, "Quick scan complete")

    def _enumerate(self, context: ScanContext) -> list[FileInfo]:
        stats = context.result.statistics
        stats.total_files = 0
        stats.total_size = 0
        limits = context.config.performance_limits
        files: list[FileInfo] = []

        for info in walk_files(
            context.root,
            limits.max_depth,
            follow_symlinks=context.config.follow_symlinks,
            checkpoint=context.check_limits,
        ):
            files.append(info)
            stats.total_files += 1
            stats.total_size += info.size
            if len(files) % PROGRESS_INTERVAL == 0:
                context.record.files_processed = len(files)
                context.report_progress(
                    min(len(files) * 30 // 1000, 30), 100, f"Scanned {len(files)} files"
                )
        return files

    def _candidate_roots(self, context: ScanContext, scanned: list[FileInfo]) -> list[str]:
        root = context.root
        candidates: dict[str, None] = {}
        for info in scanned:
            if info.name in MODULE_INDICATORS:
                candidates[os.path.dirname(info.path)] = None

        for container in MODULE_CONTAINER_DIRS:
            container_path = os.path.join(root, container)
            if not os.path.isdir(container_path):
                continue
            try:
                with os.scandir(container_path) as it:
                    children = sorted(
                        e.path for e in it if e.is_dir() and not e.name.startswith(".")
                    )
            except OSError as e:
                logger.warning("Cannot list %s: %s", container_path, e)
                continue
            for child in children:
                if context.registry.is_module_root(child):
                    candidates.setdefault(child, None)

        # a module must own at least one file that survived filtering
        scanned_dirs = {os.path.dirname(info.path) for info in scanned}
        return [c for c in candidates if holds_any(c, scanned_dirs)]

    def _classify(self, context: ScanContext, candidates: list[str]) -> list[ModuleInfo]:
        modules: list[ModuleInfo] = []
        for path in candidates:
            context.check_limits()
            project_type = context.registry.detect_project_type(path)
            if project_type is ProjectType.UNKNOWN:
                logger.debug("Candidate %s is not a recognizable module", path)
                continue
            modules.append(
                ModuleInfo(path=path, name=module_name_from_path(path), type=project_type)
            )
        return modules
