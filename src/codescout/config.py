"""Scan configuration models and shape validation.

Configuration arrives fully formed (from code, or from whatever loader the
caller uses); this module only validates its shape. Filters and ignore rules
listed here are applied on top of the built-in rule set.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PositiveFloat,
    PositiveInt,
    ValidationError,
    field_validator,
)

from codescout.constants import (
    DEFAULT_IGNORE_FILE,
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_FILE_SIZE,
    DEFAULT_MAX_FILES,
    DEFAULT_MEMORY_LIMIT,
    DEFAULT_TIMEOUT,
)
from codescout.detectors.base import ProjectDetector
from codescout.exceptions import ConfigurationError
from codescout.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class FilterAction(str, Enum):
    INCLUDE = "include"
    EXCLUDE = "exclude"


class IgnoreRule(BaseModel):
    """A pattern that unconditionally removes matching paths from the scan."""

    model_config = ConfigDict(frozen=True)

    pattern: str = Field(min_length=1)
    description: str = Field(min_length=1)
    priority: int = 0
    is_global: bool = False


class FileFilter(BaseModel):
    """An include/exclude rule consulted only for paths no ignore rule matched.

    ``pattern`` is a glob string, or a compiled regular expression that is
    searched against the root-relative path.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    pattern: str | re.Pattern[str]
    action: FilterAction
    priority: int = 0

    @field_validator("pattern")
    @classmethod
    def _pattern_not_empty(cls, value: str | re.Pattern[str]) -> str | re.Pattern[str]:
        if isinstance(value, str) and not value.strip():
            raise ValueError("pattern must not be empty")
        return value


class PerformanceLimits(BaseModel):
    max_files: PositiveInt = DEFAULT_MAX_FILES
    max_file_size: PositiveInt = DEFAULT_MAX_FILE_SIZE
    max_depth: PositiveInt = DEFAULT_MAX_DEPTH
    timeout: PositiveFloat = DEFAULT_TIMEOUT  # advisory, seconds
    memory_limit: PositiveInt = DEFAULT_MEMORY_LIMIT

    @classmethod
    def from_settings(cls, settings: Settings) -> PerformanceLimits:
        return cls(
            max_files=settings.max_files,
            max_file_size=settings.max_file_size,
            max_depth=settings.max_depth,
            timeout=settings.timeout,
            memory_limit=settings.memory_limit,
        )


class ScanConfig(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    file_filters: list[FileFilter] = Field(default_factory=list)
    detectors: list[ProjectDetector] = Field(default_factory=list)
    ignore_rules: list[IgnoreRule] = Field(default_factory=list)
    performance_limits: PerformanceLimits = Field(default_factory=PerformanceLimits)
    ignore_file: str = DEFAULT_IGNORE_FILE
    follow_symlinks: bool = False


def _format_errors(exc: ValidationError) -> list[str]:
    messages = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", []))
        messages.append(f"{loc}: {err.get('msg', 'validation error')}")
    return messages


def validate_config(data: ScanConfig | Mapping[str, Any]) -> ScanConfig:
    """Validate a configuration mapping and return the typed config.

    Raises:
        ConfigurationError: listing every shape problem found
    """
    if isinstance(data, ScanConfig):
        return data
    try:
        return ScanConfig.model_validate(dict(data))
    except ValidationError as exc:
        errors = _format_errors(exc)
        logger.warning("Rejected scan configuration: %s", "; ".join(errors))
        raise ConfigurationError(errors) from exc


def create_default_config(
    performance_limits: Mapping[str, Any] | None = None,
    custom_filters: Iterable[FileFilter] = (),
    custom_ignore_rules: Iterable[IgnoreRule] = (),
    settings: Settings | None = None,
) -> ScanConfig:
    """Build a config from settings, with optional limit overrides and extra rules."""
    settings = settings or get_settings()
    limits = PerformanceLimits.from_settings(settings).model_dump()
    if performance_limits:
        limits.update(performance_limits)
    return validate_config(
        {
            "file_filters": list(custom_filters),
            "ignore_rules": list(custom_ignore_rules),
            "performance_limits": limits,
            "ignore_file": settings.ignore_file,
        }
    )
