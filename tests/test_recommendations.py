from codescout.models import (
    ModuleInfo,
    ProjectScanResult,
    ProjectType,
    RecommendationPriority,
    RecommendationType,
    ScanPhase,
    ScanStatistics,
)
from codescout.recommendations import final_recommendations, quick_recommendations


def make_result(modules=(), coverage=100.0, project_type=ProjectType.GO):
    modules = list(modules)
    return ProjectScanResult(
        root_path="/repo",
        project_type=project_type,
        modules=modules,
        statistics=ScanStatistics(
            total_files=10, scanned_files=10, modules_found=len(modules), coverage=coverage
        ),
    )


def summary(recommendations):
    return [(r.type, r.priority) for r in recommendations]


def test_all_quick_checks_can_fire_together():
    result = make_result(coverage=12.345, project_type=ProjectType.UNKNOWN)
    recs = quick_recommendations(result)
    assert summary(recs) == [
        (RecommendationType.SCAN_DEEPER, RecommendationPriority.HIGH),
        (RecommendationType.SCAN_DEEPER, RecommendationPriority.MEDIUM),
        (RecommendationType.ADD_CONFIG, RecommendationPriority.MEDIUM),
    ]
    assert "12.3%" in recs[1].description


def test_module_pass_suggested_when_modules_found():
    module = ModuleInfo(path="/repo/a", name="a", type=ProjectType.GO)
    recs = quick_recommendations(make_result([module]))
    assert summary(recs) == [(RecommendationType.SCAN_DEEPER, RecommendationPriority.LOW)]
    assert "1 module" in recs[0].description


def test_coverage_threshold_is_strict():
    assert quick_recommendations(make_result(coverage=30.0)) != []
    assert all(
        r.priority is not RecommendationPriority.MEDIUM
        for r in quick_recommendations(make_result(coverage=30.0))
    )


def test_final_pass_after_module_phase():
    documented = ModuleInfo(path="/repo/a", name="a", type=ProjectType.GO, docs=["/repo/a/README.md"])
    bare = ModuleInfo(path="/repo/b", name="b", type=ProjectType.PYTHON)
    result = make_result([documented, bare])

    recs = final_recommendations(result, [ScanPhase.QUICK, ScanPhase.MODULE])
    assert summary(recs) == [(RecommendationType.ADD_DOCS, RecommendationPriority.HIGH)]
    assert recs[0].target_path == "/repo/b"


def test_final_pass_without_module_phase_matches_quick():
    module = ModuleInfo(path="/repo/a", name="a", type=ProjectType.GO)
    result = make_result([module])
    assert summary(final_recommendations(result, [ScanPhase.QUICK])) == summary(
        quick_recommendations(result)
    )
