"""The immutable result of one completed test run."""

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from itertools import chain
from types import MappingProxyType

from suite_result.models.events import EventKind, RunEvent
from suite_result.models.issue import Issue, IssueKind

EventsByTest = Mapping[str, Sequence[RunEvent]]


def _no_events_by_test() -> EventsByTest:
    return MappingProxyType({})


@dataclass(frozen=True, kw_only=True)
class TestResult:
    """Final buckets of one run and the success policy derived from them.

    Flat sequences keep emission order. Per-test mappings are keyed by test id and
    only hold tests with at least one event of that kind, so the
    ``number_of_tests_with_*`` counts are distinct tests, not events.

    The stored buckets are never validated here, see
    ``suite_result.validation.check_result`` for the strict checks.
    """

    __test__ = False

    number_of_tests: int
    number_of_tests_run: int
    number_of_assertions: int

    test_errored_events: Sequence[RunEvent] = ()
    test_failed_events: Sequence[RunEvent] = ()
    test_considered_risky_events: EventsByTest = field(
        default_factory=_no_events_by_test
    )
    test_suite_skipped_events: Sequence[RunEvent] = ()
    test_skipped_events: Sequence[RunEvent] = ()
    test_marked_incomplete_events: Sequence[RunEvent] = ()
    test_triggered_framework_deprecation_events: EventsByTest = field(
        default_factory=_no_events_by_test
    )
    test_triggered_error_events: EventsByTest = field(
        default_factory=_no_events_by_test
    )
    test_triggered_framework_error_events: EventsByTest = field(
        default_factory=_no_events_by_test
    )
    test_triggered_framework_warning_events: EventsByTest = field(
        default_factory=_no_events_by_test
    )
    test_runner_triggered_deprecation_events: Sequence[RunEvent] = ()
    test_runner_triggered_warning_events: Sequence[RunEvent] = ()

    deprecations: Sequence[Issue] = ()
    notices: Sequence[Issue] = ()
    warnings: Sequence[Issue] = ()
    runtime_deprecations: Sequence[Issue] = ()
    runtime_notices: Sequence[Issue] = ()
    runtime_warnings: Sequence[Issue] = ()

    def number_of_test_errored_events(self) -> int:
        """Number of errored events."""
        return len(self.test_errored_events)

    def has_test_errored_events(self) -> bool:
        """Whether any errored events were recorded."""
        return self.number_of_test_errored_events() > 0

    def number_of_test_failed_events(self) -> int:
        """Number of failed events."""
        return len(self.test_failed_events)

    def has_test_failed_events(self) -> bool:
        """Whether any failed events were recorded."""
        return self.number_of_test_failed_events() > 0

    def number_of_tests_with_test_considered_risky_events(self) -> int:
        """Number of distinct tests with considered-risky events."""
        return len(self.test_considered_risky_events)

    def has_test_considered_risky_events(self) -> bool:
        """Whether any considered-risky events were recorded."""
        return self.number_of_tests_with_test_considered_risky_events() > 0

    def number_of_test_suite_skipped_events(self) -> int:
        """Number of suite-skipped events."""
        return len(self.test_suite_skipped_events)

    def has_test_suite_skipped_events(self) -> bool:
        """Whether any suite-skipped events were recorded."""
        return self.number_of_test_suite_skipped_events() > 0

    def number_of_test_skipped_events(self) -> int:
        """Number of test-skipped events."""
        return len(self.test_skipped_events)

    def has_test_skipped_events(self) -> bool:
        """Whether any test-skipped events were recorded."""
        return self.number_of_test_skipped_events() > 0

    def number_of_test_marked_incomplete_events(self) -> int:
        """Number of marked-incomplete events."""
        return len(self.test_marked_incomplete_events)

    def has_test_marked_incomplete_events(self) -> bool:
        """Whether any marked-incomplete events were recorded."""
        return self.number_of_test_marked_incomplete_events() > 0

    def number_of_tests_with_test_triggered_framework_deprecation_events(self) -> int:
        """Number of distinct tests with test-triggered framework deprecation events."""
        return len(self.test_triggered_framework_deprecation_events)

    def has_test_triggered_framework_deprecation_events(self) -> bool:
        """Whether any test-triggered framework deprecation events were recorded."""
        return (
            self.number_of_tests_with_test_triggered_framework_deprecation_events() > 0
        )

    def number_of_tests_with_test_triggered_error_events(self) -> int:
        """Number of distinct tests with test-triggered error events."""
        return len(self.test_triggered_error_events)

    def has_test_triggered_error_events(self) -> bool:
        """Whether any test-triggered error events were recorded."""
        return self.number_of_tests_with_test_triggered_error_events() > 0

    def number_of_tests_with_test_triggered_framework_error_events(self) -> int:
        """Number of distinct tests with test-triggered framework error events."""
        return len(self.test_triggered_framework_error_events)

    def has_test_triggered_framework_error_events(self) -> bool:
        """Whether any test-triggered framework error events were recorded."""
        return self.number_of_tests_with_test_triggered_framework_error_events() > 0

    def number_of_tests_with_test_triggered_framework_warning_events(self) -> int:
        """Number of distinct tests with test-triggered framework warning events."""
        return len(self.test_triggered_framework_warning_events)

    def has_test_triggered_framework_warning_events(self) -> bool:
        """Whether any test-triggered framework warning events were recorded."""
        return (
            self.number_of_tests_with_test_triggered_framework_warning_events() > 0
        )

    def number_of_test_runner_triggered_deprecation_events(self) -> int:
        """Number of runner-triggered deprecation events."""
        return len(self.test_runner_triggered_deprecation_events)

    def has_test_runner_triggered_deprecation_events(self) -> bool:
        """Whether any runner-triggered deprecation events were recorded."""
        return self.number_of_test_runner_triggered_deprecation_events() > 0

    def number_of_test_runner_triggered_warning_events(self) -> int:
        """Number of runner-triggered warning events."""
        return len(self.test_runner_triggered_warning_events)

    def has_test_runner_triggered_warning_events(self) -> bool:
        """Whether any runner-triggered warning events were recorded."""
        return self.number_of_test_runner_triggered_warning_events() > 0

    def was_successful(self) -> bool:
        """No errors or failures, and no warnings raised by the framework."""
        return (
            self.was_successful_ignoring_framework_warnings()
            and not self.has_test_runner_triggered_warning_events()
            and not self.has_test_triggered_framework_warning_events()
        )

    def was_successful_ignoring_framework_warnings(self) -> bool:
        """No errored and no failed tests."""
        return not self.has_test_errored_events() and not self.has_test_failed_events()

    def was_successful_and_no_test_has_issues(self) -> bool:
        """Successful, and no test-quality issue was recorded."""
        return self.was_successful() and not self.has_tests_with_issues()

    def has_tests_with_issues(self) -> bool:
        """Whether any test-quality issue was recorded.

        Skipped tests are not an issue.
        """
        return (
            self.has_risky_tests()
            or self.has_incomplete_tests()
            or self.has_deprecations()
            or len(self.test_errored_events) > 0
            or self.has_notices()
            or self.has_warnings()
        )

    def issues(self) -> Iterator[Issue]:
        """Iterate over all six issue lists."""
        return chain(
            self.deprecations,
            self.notices,
            self.warnings,
            self.runtime_deprecations,
            self.runtime_notices,
            self.runtime_warnings,
        )

    def has_tests(self) -> bool:
        """Whether the run announced any tests."""
        return self.number_of_tests > 0

    def has_deprecations(self) -> bool:
        """Whether any deprecation of any origin was recorded."""
        return self.number_of_deprecations() > 0

    def number_of_deprecations(self) -> int:
        """Deprecations of every origin.

        Sums issue and runner event counts with the number of tests that
        triggered framework deprecations, not the number of those events.
        """
        return (
            len(self.deprecations)
            + len(self.runtime_deprecations)
            + len(self.test_triggered_framework_deprecation_events)
            + len(self.test_runner_triggered_deprecation_events)
        )

    def has_notices(self) -> bool:
        """Whether any notice was recorded."""
        return self.number_of_notices() > 0

    def number_of_notices(self) -> int:
        """Framework and runtime notices."""
        return len(self.notices) + len(self.runtime_notices)

    def has_warnings(self) -> bool:
        """Whether any warning of any origin was recorded."""
        return self.number_of_warnings() > 0

    def number_of_warnings(self) -> int:
        """Warnings of every origin, counted like ``number_of_deprecations``."""
        return (
            len(self.warnings)
            + len(self.runtime_warnings)
            + len(self.test_triggered_framework_warning_events)
            + len(self.test_runner_triggered_warning_events)
        )

    def has_errors(self) -> bool:
        """Whether a test errored or the framework raised an error in a test."""
        return (
            len(self.test_errored_events) > 0
            or len(self.test_triggered_framework_error_events) > 0
        )

    def has_incomplete_tests(self) -> bool:
        """Whether any test was marked incomplete."""
        return len(self.test_marked_incomplete_events) > 0

    def has_risky_tests(self) -> bool:
        """Whether any test was considered risky."""
        return len(self.test_considered_risky_events) > 0

    def has_skipped_tests(self) -> bool:
        """Whether any test was skipped."""
        return len(self.test_skipped_events) > 0


EVENT_FIELDS: Mapping[EventKind, str] = MappingProxyType(
    {
        EventKind.ERRORED: "test_errored_events",
        EventKind.FAILED: "test_failed_events",
        EventKind.SUITE_SKIPPED: "test_suite_skipped_events",
        EventKind.TEST_SKIPPED: "test_skipped_events",
        EventKind.MARKED_INCOMPLETE: "test_marked_incomplete_events",
        EventKind.RUNNER_TRIGGERED_DEPRECATION: (
            "test_runner_triggered_deprecation_events"
        ),
        EventKind.RUNNER_TRIGGERED_WARNING: "test_runner_triggered_warning_events",
    }
)
"""Flat event sequence field of each run-ordered event kind."""

EVENTS_BY_TEST_FIELDS: Mapping[EventKind, str] = MappingProxyType(
    {
        EventKind.CONSIDERED_RISKY: "test_considered_risky_events",
        EventKind.TEST_TRIGGERED_FRAMEWORK_DEPRECATION: (
            "test_triggered_framework_deprecation_events"
        ),
        EventKind.TEST_TRIGGERED_ERROR: "test_triggered_error_events",
        EventKind.TEST_TRIGGERED_FRAMEWORK_ERROR: (
            "test_triggered_framework_error_events"
        ),
        EventKind.TEST_TRIGGERED_FRAMEWORK_WARNING: (
            "test_triggered_framework_warning_events"
        ),
    }
)
"""Per-test mapping field of each event kind grouped by test."""

ISSUE_FIELDS: Mapping[IssueKind, str] = MappingProxyType(
    {
        IssueKind.DEPRECATION: "deprecations",
        IssueKind.NOTICE: "notices",
        IssueKind.WARNING: "warnings",
        IssueKind.RUNTIME_DEPRECATION: "runtime_deprecations",
        IssueKind.RUNTIME_NOTICE: "runtime_notices",
        IssueKind.RUNTIME_WARNING: "runtime_warnings",
    }
)
"""Issue list field of each issue kind."""
