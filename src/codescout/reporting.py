"""Serialization and plain-text summaries of scan results."""

from __future__ import annotations

import dataclasses
from collections import Counter
from datetime import datetime
from enum import Enum
from typing import Any

from codescout.models import ProjectScanResult


def format_size(size_bytes: float) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted string like "1.5 MB"
    """
    for unit in ["B", "KB", "MB", "GB"]:
        if size_bytes < 1024.0:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024.0
    return f"{size_bytes:.1f} TB"


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(v) for v in value]
    return value


def result_to_dict(result: ProjectScanResult, include_files: bool = False) -> dict[str, Any]:
    """Convert a scan result into JSON-ready primitives.

    Args:
        result: Finished scan result
        include_files: Also emit the per-file scanned/ignored listings

    Returns:
        Nested dict with enums as their values and datetimes in ISO format
    """
    data = dataclasses.asdict(result)
    if not include_files:
        data.pop("scanned_files")
        data.pop("ignored_files")
    return _to_jsonable(data)


def generate_summary(result: ProjectScanResult) -> str:
    """Render a short human-readable report of a scan."""
    stats = result.statistics
    lines = [
        f"📦 Project: {result.root_path}",
        f"🔍 Type: {result.project_type.value}",
        "",
        "## 📊 Statistics",
        f"- Total files: {stats.total_files}",
        f"- Scanned files: {stats.scanned_files}",
        f"- Ignored files: {stats.ignored_files}",
        f"- Coverage: {stats.coverage:.1f}%",
        f"- Total size: {format_size(stats.total_size)}",
        f"- Lines of code: {stats.lines_of_code:,}",
        f"- Duration: {stats.duration:.2f}s",
    ]

    lines.append("")
    lines.append(f"## 📁 Modules ({stats.modules_found})")
    for module in sorted(result.modules, key=lambda m: m.path):
        detail = f"- {module.name} [{module.type.value}] {module.path}"
        if module.dependencies or module.dev_dependencies:
            detail += (
                f" ({len(module.dependencies)} deps, {len(module.dev_dependencies)} dev deps)"
            )
        lines.append(detail)

    by_type = Counter(m.type.value for m in result.modules)
    if len(by_type) > 1:
        lines.append("")
        lines.append("### By Type")
        for type_name, count in by_type.most_common():
            lines.append(f"- {type_name}: {count}")

    if result.phases:
        lines.append("")
        lines.append("## ⏱️ Phases")
        for record in result.phases:
            line = f"- {record.phase.value}: {record.status.value} in {record.duration:.2f}s"
            if record.error:
                line += f" ({record.error})"
            lines.append(line)

    if result.recommendations:
        lines.append("")
        lines.append("## 💡 Recommendations")
        for rec in result.recommendations:
            lines.append(f"- [{rec.priority.value}] {rec.title}: {rec.description}")

    return "\n".join(lines) + "\n"
