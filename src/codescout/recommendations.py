"""Follow-up suggestions derived from a scan result."""

from __future__ import annotations

from collections.abc import Iterable

from codescout.models import (
    ProjectScanResult,
    ProjectType,
    Recommendation,
    RecommendationPriority,
    RecommendationType,
    ScanPhase,
)

LOW_COVERAGE_THRESHOLD = 30.0


def quick_recommendations(
    result: ProjectScanResult, suggest_module_pass: bool = True
) -> list[Recommendation]:
    """Fixed-threshold checks run after the quick inventory.

    The checks are independent, so any combination may fire.
    """
    stats = result.statistics
    recommendations: list[Recommendation] = []

    if stats.modules_found == 0:
        recommendations.append(
            Recommendation(
                type=RecommendationType.SCAN_DEEPER,
                priority=RecommendationPriority.HIGH,
                title="No modules found, consider a deeper scan",
                description=(
                    "The quick scan did not find any project modules. Enable the module "
                    "and deep phases for a more accurate analysis."
                ),
                action="Run a full scan with --phases quick module deep",
            )
        )

    if stats.coverage < LOW_COVERAGE_THRESHOLD:
        recommendations.append(
            Recommendation(
                type=RecommendationType.SCAN_DEEPER,
                priority=RecommendationPriority.MEDIUM,
                title="Low scan coverage",
                description=(
                    f"Only {stats.coverage:.1f}% of files were scanned. Review the file "
                    "filter configuration or run a deep scan."
                ),
                action="Adjust the filter configuration or enable the deep phase",
            )
        )

    if result.project_type is ProjectType.UNKNOWN:
        recommendations.append(
            Recommendation(
                type=RecommendationType.ADD_CONFIG,
                priority=RecommendationPriority.MEDIUM,
                title="Unrecognized project type",
                description=(
                    "The project type could not be determined. Configure it manually or "
                    "register a custom detector."
                ),
                action="Specify the project type or add a custom detector",
            )
        )

    if suggest_module_pass and stats.modules_found > 0:
        recommendations.append(
            Recommendation(
                type=RecommendationType.SCAN_DEEPER,
                priority=RecommendationPriority.LOW,
                title="Analyze modules in depth",
                description=(
                    f"Found {stats.modules_found} module(s). Run the module phase for "
                    "detailed dependency and structure information."
                ),
                action="Run with --phases module",
            )
        )

    return recommendations


def final_recommendations(
    result: ProjectScanResult, completed_phases: Iterable[ScanPhase] = ()
) -> list[Recommendation]:
    """Recommendations for the finished scan, replacing any phase-local ones.

    Modules only carry doc listings once the module phase has analyzed them,
    so the missing-docs check waits for that phase.
    """
    completed = set(completed_phases)
    module_pass_done = ScanPhase.MODULE in completed
    recommendations = quick_recommendations(result, suggest_module_pass=not module_pass_done)

    if module_pass_done:
        undocumented = [m for m in result.modules if not m.docs]
        if undocumented:
            recommendations.append(
                Recommendation(
                    type=RecommendationType.ADD_DOCS,
                    priority=RecommendationPriority.HIGH,
                    title="Add documentation to modules",
                    description=(
                        f"{len(undocumented)} module(s) have no documentation. "
                        "Add a README or API docs."
                    ),
                    target_path=", ".join(m.path for m in undocumented),
                )
            )

    return recommendations
