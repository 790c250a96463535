"""Events emitted by the execution engine while a suite runs."""

from enum import StrEnum
from typing import Self

from pydantic import Field, model_validator

from suite_result.models.base import Model


class EventKind(StrEnum):
    """Kinds of run events the collector buckets."""

    ERRORED = "errored"
    FAILED = "failed"
    SUITE_SKIPPED = "suite-skipped"
    TEST_SKIPPED = "test-skipped"
    MARKED_INCOMPLETE = "marked-incomplete"
    CONSIDERED_RISKY = "considered-risky"
    RUNNER_TRIGGERED_DEPRECATION = "runner-triggered-deprecation"
    RUNNER_TRIGGERED_WARNING = "runner-triggered-warning"
    TEST_TRIGGERED_FRAMEWORK_DEPRECATION = "test-triggered-framework-deprecation"
    TEST_TRIGGERED_ERROR = "test-triggered-error"
    TEST_TRIGGERED_FRAMEWORK_ERROR = "test-triggered-framework-error"
    TEST_TRIGGERED_FRAMEWORK_WARNING = "test-triggered-framework-warning"

    @property
    def is_test_scoped(self) -> bool:
        """Whether events of this kind belong to exactly one test."""
        return self not in _RUN_SCOPED_KINDS

    @property
    def is_grouped_by_test(self) -> bool:
        """Whether the result keeps these events in a per-test mapping."""
        return self in _GROUPED_BY_TEST_KINDS


_RUN_SCOPED_KINDS = frozenset(
    {
        EventKind.SUITE_SKIPPED,
        EventKind.RUNNER_TRIGGERED_DEPRECATION,
        EventKind.RUNNER_TRIGGERED_WARNING,
    }
)

_GROUPED_BY_TEST_KINDS = frozenset(
    {
        EventKind.CONSIDERED_RISKY,
        EventKind.TEST_TRIGGERED_FRAMEWORK_DEPRECATION,
        EventKind.TEST_TRIGGERED_ERROR,
        EventKind.TEST_TRIGGERED_FRAMEWORK_ERROR,
        EventKind.TEST_TRIGGERED_FRAMEWORK_WARNING,
    }
)


class RunEvent(Model):
    """Something that happened during the run, optionally scoped to one test.

    Errors raised before the first test method of a class ran are reported as
    ``errored`` events carrying the class as their test id.
    """

    kind: EventKind = Field(..., description="What happened")
    test_id: str | None = Field(
        default=None, description="Owning test, set for test-scoped kinds only"
    )
    message: str = Field(default="", description="Message or reason text")

    @model_validator(mode="after")
    def _check_scope(self) -> Self:
        if self.kind.is_test_scoped and self.test_id is None:
            raise ValueError(f"Event of kind '{self.kind}' requires a test_id")
        if not self.kind.is_test_scoped and self.test_id is not None:
            raise ValueError(f"Event of kind '{self.kind}' cannot carry a test_id")
        return self
