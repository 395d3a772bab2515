"""Type definitions of the aggregated run report and the ledger's answer to it."""

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class TestRecord:
    """One test result as submitted to the ledger."""
    __test__ = False

    title: str
    duration: int
    passed: bool
    failed: bool
    skipped: bool
    retries: int
    errors: list[str]  # all errors seen so far for this test, including earlier attempts


@dataclass
class SuiteRecord:
    """One spec file run on one capability set, as submitted to the ledger."""

    title: str
    spec_file: str
    filepath: str
    capabilities: Any
    duration: int
    retries: int
    passed: bool
    failed: bool
    skipped: bool
    start: str
    tests: list[TestRecord] = field(default_factory=list)


@dataclass
class RunMetadata:
    """Information about the run as a whole."""

    project_id: Any = None
    uuid: Optional[str] = None
    group_uuid: Optional[str] = None  # groups runs together, e.g. when sharding
    main_run: Optional[int] = None
    title: str = ''
    site: Optional[str] = None        # site the tests were run on
    build_url: Optional[str] = None
    run_date: str = ''                # ISO 8601 start time in UTC
    duration: int = 0                 # milliseconds
    version: str = ''
    suites_ran: str = ''
    issue_user: Optional[str] = None
    issue_summary: Optional[str] = None
    enable_flaky: int = 0


@dataclass
class RunReport(RunMetadata):
    """The complete report of a run."""

    passed: int = 1
    failed: int = 0
    suites: list[SuiteRecord] = field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        """Return the report as the body of a POST /runs request."""
        return dataclasses.asdict(self)

    def all_tests(self) -> list[TestRecord]:
        return [t for s in self.suites for t in s.tests]


@dataclass
class TestIds:
    """Server IDs of a single test."""
    __test__ = False

    test_id: Any
    suite_id: Any


@dataclass
class RunResult:
    """The ledger's response to a submitted run.

    suites maps the result suite key to the server's suite ID and tests maps the result test key
    to the server's test and suite IDs. See keys.py.
    """

    ok: bool = False
    status: Optional[str] = None
    suites: dict[str, Any] = field(default_factory=dict)
    tests: dict[str, TestIds] = field(default_factory=dict)

    @classmethod
    def empty(cls, status: Optional[str] = None) -> 'RunResult':
        """Return a result with which no artifact can be associated."""
        return cls(ok=False, status=status)
