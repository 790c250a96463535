"""Diagnostic issues raised while a suite runs."""

from collections import Counter
from collections.abc import Mapping
from enum import StrEnum
from types import MappingProxyType
from typing import Any, Literal

from pydantic import Field, PositiveInt, field_validator

from suite_result.models.base import Model

type Severity = Literal["deprecation", "notice", "warning"]


class IssueKind(StrEnum):
    """Closed set of issue kinds.

    The unprefixed kinds are raised by the testing framework's own assertions and
    utilities, the ``runtime-`` kinds by the language runtime.
    """

    DEPRECATION = "deprecation"
    NOTICE = "notice"
    WARNING = "warning"
    RUNTIME_DEPRECATION = "runtime-deprecation"
    RUNTIME_NOTICE = "runtime-notice"
    RUNTIME_WARNING = "runtime-warning"

    @property
    def severity(self) -> Severity:
        """Severity shared by the framework and runtime variant of a kind."""
        match self:
            case IssueKind.DEPRECATION | IssueKind.RUNTIME_DEPRECATION:
                return "deprecation"
            case IssueKind.NOTICE | IssueKind.RUNTIME_NOTICE:
                return "notice"
            case IssueKind.WARNING | IssueKind.RUNTIME_WARNING:
                return "warning"

    @property
    def is_runtime(self) -> bool:
        """Whether the issue originates from the language runtime."""
        return self in {
            IssueKind.RUNTIME_DEPRECATION,
            IssueKind.RUNTIME_NOTICE,
            IssueKind.RUNTIME_WARNING,
        }


type IssueIdentity = tuple[IssueKind, str, int, str]


class Issue(Model):
    """One distinct diagnostic, with the tests that triggered it.

    Trigger counts are stored as ``(test_id, count)`` pairs in first-trigger
    order and exposed read-only through ``triggering_tests``.
    """

    kind: IssueKind = Field(..., description="Kind tag, bound at construction")
    message: str = Field(..., description="Diagnostic message text")
    file: str = Field(..., description="Source file the issue was raised in")
    line: int = Field(..., ge=0, description="Source line the issue was raised on")
    test_triggers: tuple[tuple[str, PositiveInt], ...] = Field(
        default=(),
        description="Number of times each test triggered this issue",
    )
    run_triggers: int = Field(
        default=0,
        ge=0,
        description="Number of times the issue was triggered outside any test",
    )

    @field_validator("test_triggers", mode="before")
    @classmethod
    def _pairs_from_mapping(cls, value: Any) -> Any:
        if isinstance(value, Mapping):
            return tuple(value.items())
        return value

    @property
    def triggering_tests(self) -> Mapping[str, int]:
        """Read-only view of the trigger count of each test."""
        return MappingProxyType(dict(self.test_triggers))

    def identity(self) -> IssueIdentity:
        """Key under which repeated triggers collapse into one issue."""
        return (self.kind, self.file, self.line, self.message)

    def triggered_by(self, test_id: str | None) -> "Issue":
        """Return a copy with one more trigger by ``test_id``, or by the run if None."""
        if test_id is None:
            return self._with_triggers(dict(self.test_triggers), self.run_triggers + 1)
        counts = Counter(dict(self.test_triggers))
        counts[test_id] += 1
        return self._with_triggers(counts, self.run_triggers)

    def combined_with(self, other: "Issue") -> "Issue":
        """Return a copy holding the triggers of both issues.

        Raises:
            ValueError: If the issues have different identities

        """
        if other.identity() != self.identity():
            raise ValueError(
                f"Cannot combine issues {self.identity()} and {other.identity()}"
            )
        counts = Counter(dict(self.test_triggers))
        counts.update(dict(other.test_triggers))
        return self._with_triggers(counts, self.run_triggers + other.run_triggers)

    def number_of_times_triggered(self) -> int:
        """Total triggers by tests and by the run, at least one."""
        return max(1, self.run_triggers + sum(count for _, count in self.test_triggers))

    def is_deprecation(self) -> bool:
        """Whether the framework raised a deprecation."""
        return self.kind is IssueKind.DEPRECATION

    def is_notice(self) -> bool:
        """Whether the framework raised a notice."""
        return self.kind is IssueKind.NOTICE

    def is_warning(self) -> bool:
        """Whether the framework raised a warning."""
        return self.kind is IssueKind.WARNING

    def is_runtime_deprecation(self) -> bool:
        """Whether the language runtime raised a deprecation."""
        return self.kind is IssueKind.RUNTIME_DEPRECATION

    def is_runtime_notice(self) -> bool:
        """Whether the language runtime raised a notice."""
        return self.kind is IssueKind.RUNTIME_NOTICE

    def is_runtime_warning(self) -> bool:
        """Whether the language runtime raised a warning."""
        return self.kind is IssueKind.RUNTIME_WARNING

    def _with_triggers(
        self, test_triggers: Mapping[str, int], run_triggers: int
    ) -> "Issue":
        # Built through validation so the pairs are checked and stored as tuples.
        return Issue(
            kind=self.kind,
            message=self.message,
            file=self.file,
            line=self.line,
            test_triggers=test_triggers,
            run_triggers=run_triggers,
        )
