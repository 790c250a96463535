"""Collector that buckets run events and builds the final test result."""

import logging
from collections.abc import Sequence
from types import MappingProxyType
from typing import Any

from suite_result.config import CollectorConfig
from suite_result.models.events import EventKind, RunEvent
from suite_result.models.issue import Issue, IssueIdentity, IssueKind
from suite_result.models.result import (
    EVENT_FIELDS,
    EVENTS_BY_TEST_FIELDS,
    ISSUE_FIELDS,
    TestResult,
)
from suite_result.validation import InconsistentResultError, check_result

log = logging.getLogger(__name__)

# Counted as run when no test is prepared: errors before the first test method
# and tests skipped before they were prepared never reach test_finished.
_RUN_WITHOUT_FINISH_KINDS = frozenset({EventKind.ERRORED, EventKind.TEST_SKIPPED})


class CollectorFinalizedError(Exception):
    """Raised when a collector is used after its result was built."""


class ResultCollector:
    """Accumulates the events of one run into a single ``TestResult``.

    A collector is fed sequentially by one execution engine. Runs executed by
    parallel workers use one collector per worker and combine them with
    ``ResultCollector.merged`` before building the result.
    """

    def __init__(self, config: CollectorConfig | None = None) -> None:
        self._config = config or CollectorConfig()
        self._number_of_tests = 0
        self._number_of_tests_run = 0
        self._number_of_assertions = 0
        self._prepared_test: str | None = None
        self._events: dict[EventKind, list[RunEvent]] = {
            kind: [] for kind in EVENT_FIELDS
        }
        self._events_by_test: dict[EventKind, dict[str, list[RunEvent]]] = {
            kind: {} for kind in EVENTS_BY_TEST_FIELDS
        }
        self._issues: dict[IssueIdentity, Issue] = {}
        self._result: TestResult | None = None

    @property
    def config(self) -> CollectorConfig:
        return self._config

    @property
    def finalized(self) -> bool:
        """Whether ``result`` has already built the final result."""
        return self._result is not None

    @classmethod
    def merged(
        cls,
        collectors: Sequence["ResultCollector"],
        config: CollectorConfig | None = None,
    ) -> "ResultCollector":
        """Combine per-worker collectors into a new one.

        Buckets are concatenated in the order of ``collectors``, so events keep
        their emission order within each worker. Test counts and assertions are
        summed, and issues with the same identity are combined with their
        trigger counts added up.

        Raises:
            CollectorFinalizedError: If any of the collectors is finalized

        """
        merged = cls(config)
        for collector in collectors:
            merged._absorb(collector)
        log.debug("Merged %d collector(s)", len(collectors))
        return merged

    def execution_started(self, number_of_tests: int) -> None:
        """Record the number of tests the run is going to execute."""
        self._ensure_open()
        self._number_of_tests = number_of_tests

    def test_prepared(self, test_id: str) -> None:
        self._ensure_open()
        self._prepared_test = test_id

    def test_finished(self, test_id: str, number_of_assertions: int) -> None:
        self._ensure_open()
        self._number_of_tests_run += 1
        self._number_of_assertions += number_of_assertions
        self._prepared_test = None
        log.debug("Test finished: %s (%d assertion(s))", test_id, number_of_assertions)

    def record(self, event: RunEvent) -> None:
        """Put an event into the bucket of its kind."""
        self._ensure_open()

        if event.kind in _RUN_WITHOUT_FINISH_KINDS and self._prepared_test is None:
            self._number_of_tests_run += 1

        if event.kind.is_grouped_by_test:
            if event.test_id is None:
                raise ValueError(f"Event of kind '{event.kind}' requires a test_id")
            self._events_by_test[event.kind].setdefault(event.test_id, []).append(
                event
            )
        else:
            self._events[event.kind].append(event)

        log.debug("Recorded %s event (test=%s)", event.kind, event.test_id)

    def record_issue(
        self,
        kind: IssueKind,
        message: str,
        file: str,
        line: int,
        test_id: str | None = None,
        *,
        suppressed: bool = False,
    ) -> Issue | None:
        """Record a triggered issue.

        Repeated triggers of the same issue are collapsed into the first one,
        which keeps its position and counts the triggers of each test as well as
        those raised outside any test.

        Args:
            kind: Kind of the issue
            message: Diagnostic message text
            file: Source file the issue was raised in
            line: Source line the issue was raised on
            test_id: Test that triggered the issue, None when the run did
            suppressed: Whether the trigger was suppressed at its source

        Returns:
            The stored issue, or None if the suppressed issue was dropped

        """
        self._ensure_open()

        if suppressed and kind not in self._config.ignore_suppression_of:
            log.debug("Dropped suppressed %s at %s:%d", kind, file, line)
            return None

        issue = Issue(kind=kind, message=message, file=file, line=line)
        issue = self._issues.get(issue.identity(), issue).triggered_by(test_id)
        self._issues[issue.identity()] = issue

        log.debug("Recorded %s at %s:%d (test=%s)", kind, file, line, test_id)
        return issue

    def result(self) -> TestResult:
        """Build the result of the run.

        The first call finalizes the collector; later calls return the same
        result.

        Raises:
            InconsistentResultError: If strict mode is enabled and the collected
                data violates the result invariants

        """
        if self._result is not None:
            return self._result

        result = self._build()

        if self._config.strict:
            try:
                check_result(result)
            except InconsistentResultError as e:
                log.error("Collected result is inconsistent: %s", e)
                raise

        log.info(
            "Result finalized: tests=%d run=%d assertions=%d errors=%d failures=%d "
            "warnings=%d deprecations=%d notices=%d",
            result.number_of_tests,
            result.number_of_tests_run,
            result.number_of_assertions,
            result.number_of_test_errored_events(),
            result.number_of_test_failed_events(),
            result.number_of_warnings(),
            result.number_of_deprecations(),
            result.number_of_notices(),
        )

        self._result = result
        return result

    def _build(self) -> TestResult:
        issues: dict[IssueKind, list[Issue]] = {kind: [] for kind in ISSUE_FIELDS}
        for issue in self._issues.values():
            issues[issue.kind].append(issue)

        buckets: dict[str, Any] = {}
        for kind, name in EVENT_FIELDS.items():
            buckets[name] = tuple(self._events[kind])
        for kind, name in EVENTS_BY_TEST_FIELDS.items():
            buckets[name] = MappingProxyType(
                {
                    test_id: tuple(events)
                    for test_id, events in self._events_by_test[kind].items()
                }
            )
        for issue_kind, name in ISSUE_FIELDS.items():
            buckets[name] = tuple(issues[issue_kind])

        return TestResult(
            number_of_tests=self._number_of_tests,
            number_of_tests_run=self._number_of_tests_run,
            number_of_assertions=self._number_of_assertions,
            **buckets,
        )

    def _absorb(self, other: "ResultCollector") -> None:
        if other.finalized:
            raise CollectorFinalizedError(
                "Cannot merge a collector whose result was already built"
            )

        self._number_of_tests += other._number_of_tests
        self._number_of_tests_run += other._number_of_tests_run
        self._number_of_assertions += other._number_of_assertions

        for kind, events in other._events.items():
            self._events[kind].extend(events)
        for kind, events_by_test in other._events_by_test.items():
            for test_id, events in events_by_test.items():
                self._events_by_test[kind].setdefault(test_id, []).extend(events)

        for identity, issue in other._issues.items():
            if (existing := self._issues.get(identity)) is None:
                self._issues[identity] = issue
            else:
                self._issues[identity] = existing.combined_with(issue)

    def _ensure_open(self) -> None:
        if self._result is not None:
            raise CollectorFinalizedError(
                "Cannot record into a collector whose result was already built"
            )
