"""Per-ecosystem project detectors and the registry that arbitrates between them."""

from codescout.detectors.base import ProjectDetector
from codescout.detectors.go import GoDetector, parse_go_mod
from codescout.detectors.java import JavaDetector
from codescout.detectors.javascript import JavaScriptDetector, TypeScriptDetector
from codescout.detectors.python import PythonDetector, parse_requirements_text, parse_setup_py
from codescout.detectors.registry import DetectorRegistry, default_detectors
from codescout.detectors.rust import RustDetector

__all__ = [
    "DetectorRegistry",
    "GoDetector",
    "JavaDetector",
    "JavaScriptDetector",
    "ProjectDetector",
    "PythonDetector",
    "RustDetector",
    "TypeScriptDetector",
    "default_detectors",
    "parse_go_mod",
    "parse_requirements_text",
    "parse_setup_py",
]
