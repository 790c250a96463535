"""Tests for collector configuration."""

from pathlib import Path

import pytest

from suite_result.config import CollectorConfig, load_collector_config
from suite_result.models.issue import IssueKind


def test_defaults() -> None:
    """Default settings are lenient and drop all suppressed issues."""
    config = CollectorConfig()

    assert config.strict is False
    assert config.ignore_suppression_of == frozenset()


def test_parses_json() -> None:
    """Settings can be read from JSON."""
    config = CollectorConfig.model_validate_json(
        '{"strict": true, "ignore_suppression_of": ["runtime-deprecation"]}'
    )

    assert config.strict is True
    assert config.ignore_suppression_of == {IssueKind.RUNTIME_DEPRECATION}


class TestLoadCollectorConfig:
    """Tests for load_collector_config function."""

    def test_loads_valid_yaml(self, tmp_path: Path) -> None:
        """Loads and parses a valid settings file."""
        path = tmp_path / "collector.yaml"
        path.write_text(
            """
strict: true
ignore_suppression_of:
  - runtime-notice
  - runtime-warning
"""
        )

        config = load_collector_config(path)

        assert config.strict is True
        assert config.ignore_suppression_of == {
            IssueKind.RUNTIME_NOTICE,
            IssueKind.RUNTIME_WARNING,
        }

    def test_omitted_fields_use_defaults(self, tmp_path: Path) -> None:
        """Missing keys fall back to defaults."""
        path = tmp_path / "collector.yaml"
        path.write_text("strict: true\n")

        config = load_collector_config(path)

        assert config.ignore_suppression_of == frozenset()

    def test_raises_for_missing_file(self, tmp_path: Path) -> None:
        """Raises FileNotFoundError for a missing file."""
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_collector_config(tmp_path / "missing.yaml")

    def test_raises_for_invalid_yaml(self, tmp_path: Path) -> None:
        """Raises ValueError for malformed YAML."""
        path = tmp_path / "collector.yaml"
        path.write_text("invalid: yaml: content: [")

        with pytest.raises(ValueError, match="Invalid YAML"):
            load_collector_config(path)

    def test_raises_for_empty_file(self, tmp_path: Path) -> None:
        """Raises ValueError for an empty file."""
        path = tmp_path / "collector.yaml"
        path.write_text("")

        with pytest.raises(ValueError, match="Empty config file"):
            load_collector_config(path)

    def test_raises_for_unknown_issue_kind(self, tmp_path: Path) -> None:
        """Raises ValueError for kinds outside the taxonomy."""
        path = tmp_path / "collector.yaml"
        path.write_text("ignore_suppression_of:\n  - fatal\n")

        with pytest.raises(ValueError, match="Invalid collector config schema"):
            load_collector_config(path)

    def test_raises_for_unknown_setting(self, tmp_path: Path) -> None:
        """Raises ValueError for settings that do not exist."""
        path = tmp_path / "collector.yaml"
        path.write_text("stric: true\n")

        with pytest.raises(ValueError, match="Invalid collector config schema"):
            load_collector_config(path)
