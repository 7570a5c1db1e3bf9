import pytest

from codescout.config import (
    FileFilter,
    FilterAction,
    IgnoreRule,
    PerformanceLimits,
    ScanConfig,
    create_default_config,
    validate_config,
)
from codescout.constants import DEFAULT_MAX_FILES
from codescout.exceptions import ConfigurationError
from codescout.settings import Settings


def test_default_config_uses_settings():
    config = create_default_config(settings=Settings())
    assert config.performance_limits.max_files == DEFAULT_MAX_FILES
    assert config.ignore_file == ".gitignore"
    assert config.file_filters == []
    assert not config.follow_symlinks


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("CODESCOUT_MAX_DEPTH", "4")
    monkeypatch.setenv("CODESCOUT_IGNORE_FILE", ".scanignore")
    config = create_default_config(settings=Settings())
    assert config.performance_limits.max_depth == 4
    assert config.ignore_file == ".scanignore"


def test_limit_overrides_and_custom_rules():
    rule = IgnoreRule(pattern="fixtures/**", description="test fixtures", priority=4)
    config = create_default_config(
        performance_limits={"max_files": 50},
        custom_ignore_rules=[rule],
        settings=Settings(),
    )
    assert config.performance_limits.max_files == 50
    assert config.ignore_rules == [rule]


@pytest.mark.parametrize("field", ["max_files", "max_file_size", "max_depth", "timeout", "memory_limit"])
def test_non_positive_limits_are_rejected(field):
    with pytest.raises(ConfigurationError) as excinfo:
        validate_config({"performance_limits": {field: 0}})
    assert any(field in error for error in excinfo.value.errors)


def test_filter_shape_is_validated():
    with pytest.raises(ConfigurationError) as excinfo:
        validate_config(
            {
                "file_filters": [
                    {"name": "no action", "pattern": "**/*.py"},
                    {"name": "bad action", "pattern": "**/*.py", "action": "maybe"},
                    {"pattern": "**/*.py", "action": "include"},
                ]
            }
        )
    errors = excinfo.value.errors
    assert len(errors) >= 3
    assert "Invalid scan configuration" in str(excinfo.value)


def test_empty_pattern_rejected():
    with pytest.raises(ConfigurationError):
        validate_config({"file_filters": [{"name": "x", "pattern": "  ", "action": "exclude"}]})


def test_valid_mapping_round_trips_into_models():
    config = validate_config(
        {
            "file_filters": [{"name": "docs", "pattern": "docs/**", "action": "exclude", "priority": 3}],
            "performance_limits": {"max_depth": 3},
        }
    )
    assert isinstance(config, ScanConfig)
    assert config.file_filters[0] == FileFilter(
        name="docs", pattern="docs/**", action=FilterAction.EXCLUDE, priority=3
    )
    assert config.performance_limits == PerformanceLimits(max_depth=3)
