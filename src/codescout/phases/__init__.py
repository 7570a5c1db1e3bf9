"""Phase implementations run by :class:`codescout.scanner.Scanner`."""

from codescout.phases.deep import DeepScanPhase
from codescout.phases.module import ModuleScanPhase
from codescout.phases.quick import QuickScanPhase

__all__ = ["DeepScanPhase", "ModuleScanPhase", "QuickScanPhase"]
