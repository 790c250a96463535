"""Test factories for generating test data."""

from uuid import uuid4

from polyfactory import Use
from polyfactory.factories import DataclassFactory
from polyfactory.factories.pydantic_factory import ModelFactory

from suite_result.models.events import EventKind, RunEvent
from suite_result.models.issue import Issue
from suite_result.models.result import TestResult


class RunEventFactory(ModelFactory[RunEvent]):
    """Factory for RunEvent.

    Builds test-scoped events; pass ``test_id=None`` with run-scoped kinds.
    """

    kind = EventKind.FAILED
    test_id = Use(lambda: f"tests/test_suite.py::test_{uuid4().hex[:8]}")


class IssueFactory(ModelFactory[Issue]):
    """Factory for Issue."""

    test_triggers = ()
    run_triggers = 0


class TestResultFactory(DataclassFactory[TestResult]):
    """Factory for a clean TestResult with empty buckets."""

    __test__ = False
    __model__ = TestResult
    __use_defaults__ = True

    number_of_tests = 10
    number_of_tests_run = 10
    number_of_assertions = 20
