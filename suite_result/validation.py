"""Consistency checks for results built in strict mode."""

from collections.abc import Mapping, Sequence

from suite_result.models.events import EventKind, RunEvent
from suite_result.models.issue import Issue
from suite_result.models.result import (
    EVENT_FIELDS,
    EVENTS_BY_TEST_FIELDS,
    ISSUE_FIELDS,
    TestResult,
)


class InconsistentResultError(ValueError):
    """Raised when a result violates one or more of its invariants."""

    def __init__(self, violations: Sequence[str]) -> None:
        self.violations = tuple(violations)
        super().__init__(
            f"Inconsistent test result ({len(self.violations)} violation(s)): "
            + "; ".join(self.violations)
        )


def check_result(result: TestResult) -> None:
    """Verify the invariants a well-formed result satisfies.

    Raises:
        InconsistentResultError: Listing every violation found

    """
    violations: list[str] = []

    for name in ("number_of_tests", "number_of_tests_run", "number_of_assertions"):
        if (value := getattr(result, name)) < 0:
            violations.append(f"{name} is negative ({value})")

    if result.number_of_tests_run > result.number_of_tests:
        violations.append(
            f"number_of_tests_run ({result.number_of_tests_run}) exceeds "
            f"number_of_tests ({result.number_of_tests})"
        )

    for kind, name in EVENT_FIELDS.items():
        events: Sequence[RunEvent] = getattr(result, name)
        violations.extend(_wrong_event_kinds(name, events, kind))

    for kind, name in EVENTS_BY_TEST_FIELDS.items():
        events_by_test: Mapping[str, Sequence[RunEvent]] = getattr(result, name)
        for test_id, events in events_by_test.items():
            if not events:
                violations.append(f"{name}[{test_id!r}] is empty")
            violations.extend(_wrong_event_kinds(f"{name}[{test_id!r}]", events, kind))
            violations.extend(
                f"{name}[{test_id!r}] holds an event of test {event.test_id!r}"
                for event in events
                if event.test_id != test_id
            )

    for issue_kind, name in ISSUE_FIELDS.items():
        issues: Sequence[Issue] = getattr(result, name)
        violations.extend(
            f"{name} holds a {issue.kind} issue"
            for issue in issues
            if issue.kind is not issue_kind
        )

    if violations:
        raise InconsistentResultError(violations)


def _wrong_event_kinds(
    location: str, events: Sequence[RunEvent], kind: EventKind
) -> list[str]:
    return [
        f"{location} holds a {event.kind} event"
        for event in events
        if event.kind is not kind
    ]
