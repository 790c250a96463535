"""Configuration for the result collector."""

import logging
from pathlib import Path

import yaml
from pydantic import Field, ValidationError

from suite_result.models.base import Model
from suite_result.models.issue import IssueKind

log = logging.getLogger(__name__)


class CollectorConfig(Model):
    """Settings controlling how the collector builds a result."""

    strict: bool = Field(
        default=False,
        description="Check the finalized result for consistency and fail if not",
    )
    ignore_suppression_of: frozenset[IssueKind] = Field(
        default_factory=frozenset,
        description="Issue kinds that are kept even when their trigger was suppressed",
    )


def load_collector_config(path: Path) -> CollectorConfig:
    """Load collector settings from a YAML file.

    Args:
        path: Path to the YAML file

    Returns:
        The validated settings

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is empty, is not valid YAML or does not match
            the settings schema

    """
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        raise ValueError(f"Empty config file: {path}")

    try:
        config = CollectorConfig.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid collector config schema in {path}: {e}") from e

    log.debug("Loaded collector config from %s: %s", path, config)
    return config
