"""codescout: inventory a source repository before documenting it.

This package walks a repository, applies ignore rules and file filters,
classifies sub-trees into modules per ecosystem and reports coverage and
follow-up recommendations.
"""

from codescout.config import ScanConfig, create_default_config, validate_config
from codescout.detectors import DetectorRegistry, ProjectDetector
from codescout.exceptions import CodeScoutError, ConfigurationError, ScanError
from codescout.filters import FileFilterEngine
from codescout.models import ModuleInfo, ProjectScanResult, ProjectType, ScanPhase
from codescout.scanner import Scanner, scan_project

__version__ = "0.1.0"
__all__ = [
    "CodeScoutError",
    "ConfigurationError",
    "DetectorRegistry",
    "FileFilterEngine",
    "ModuleInfo",
    "ProjectDetector",
    "ProjectScanResult",
    "ProjectType",
    "ScanConfig",
    "ScanError",
    "ScanPhase",
    "Scanner",
    "create_default_config",
    "scan_project",
    "validate_config",
]
