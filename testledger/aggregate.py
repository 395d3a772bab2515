"""Combine the reporter log files of a run into a single run report.

Every worker writes one log file per spec file it ran. A spec file that was retried shows up in
more than one log, and a test that was retried shows up more than once in a log. This folds all of
them into one list of suites.

Merging rules:
- Suites and tests are matched only by their composite key (see keys.py), which includes the
  worker identifier from the file name, the spec file, the capabilities and the titles.
- Every occurrence of a test is kept as its own test record, but its errors list holds the errors
  of every earlier occurrence with the same key, followed by its own. Records already emitted are
  not updated when later occurrences come along.
- Hooks are moved to the end of their suite's test list, after the real tests.
- The run failed if any suite failed.
"""

import logging
import os
from dataclasses import dataclass, field, replace
from typing import Optional

from testledger import diagnostics
from testledger import keys
from testledger.errors import AggregationError, LogParseError
from testledger.logdef import LogRecord, TestOccurrence
from testledger.logparser import reporterlog
from testledger.reportdef import RunMetadata, RunReport, SuiteRecord, TestRecord


# What to do when a log file name does not contain a worker identifier
POLICY_STRICT = 'strict'   # abort aggregation
POLICY_SKIP = 'skip'       # ignore the file
NAME_POLICIES = frozenset((POLICY_STRICT, POLICY_SKIP))


@dataclass
class _SuiteEntry:
    """A suite under construction, with its hooks kept aside until the end."""

    suite: SuiteRecord
    hooks: list[TestRecord] = field(default_factory=list)


@dataclass
class _AggregationState:
    """Tables that live only for the duration of one aggregate() call."""

    suites: dict[str, _SuiteEntry] = field(default_factory=dict)
    errors: dict[str, list[str]] = field(default_factory=dict)


def list_log_files(directory: str) -> list[str]:
    """Return the names of the log files in the directory, in processing order.

    Raises AggregationError if the directory cannot be read.
    """
    if not directory:
        raise AggregationError('No reporter output directory given')
    try:
        names = os.listdir(directory)
    except OSError as e:
        raise AggregationError(f'Cannot read directory {directory}: {e.strerror or e}') from e
    return sorted(n for n in names if reporterlog.is_log_file(n))


def _make_test_record(test: TestOccurrence, errors: list[str]) -> TestRecord:
    return TestRecord(
        title=test.title,
        duration=test.duration,
        passed=test.passed,
        failed=test.failed,
        skipped=test.skipped,
        retries=test.retries,
        errors=list(errors),
    )


def _make_suite_record(record: LogRecord) -> SuiteRecord:
    return SuiteRecord(
        title=record.title,
        spec_file=record.spec_file,
        filepath=record.filepath,
        capabilities=record.capabilities,
        duration=record.duration,
        retries=record.retries,
        passed=record.passed,
        failed=record.failed,
        skipped=record.skipped,
        start=record.start,
    )


def fold_record(state: _AggregationState, identifier: str, record: LogRecord):
    """Add the suite and tests of one log file to the aggregation state."""
    skey = keys.suite_key(identifier, record.spec_file, record.capabilities, record.title)
    newsuite = _make_suite_record(record)
    entry = state.suites.get(skey)
    if entry:
        # The same suite was seen in an earlier log; the latest results win but the tests
        # found so far are kept.
        logging.debug('Merging another log into suite %s', record.title)
        entry.suite = replace(newsuite, tests=entry.suite.tests)
    else:
        entry = state.suites[skey] = _SuiteEntry(newsuite)

    for test in record.tests:
        tkey = keys.suite_test_key(identifier, record.spec_file, record.capabilities,
                                   record.title, test.title)
        accumulated = state.errors.setdefault(tkey, [])
        accumulated.extend(test.errors)
        testrec = _make_test_record(test, accumulated)
        if test.is_hook:
            entry.hooks.append(testrec)
        else:
            entry.suite.tests.append(testrec)


def aggregate(directory: str, skip_passed: bool,
              sink: Optional[diagnostics.DiagnosticSink] = None,
              prefix: str = 'wdio', name_policy: str = POLICY_STRICT,
              metadata: Optional[RunMetadata] = None) -> RunReport:
    """Build a run report from all the log files in a directory.

    A log file that can't be read or parsed is skipped and noted in the sink. A log file whose
    name has no worker identifier raises AggregationError under the strict policy, as does a
    directory that can't be read.

    Args:
        directory: path to the reporter output directory
        skip_passed: leave out any suite that passed
        sink: where to record problems with individual files
        prefix: log file name prefix before the worker identifier
        name_policy: POLICY_STRICT or POLICY_SKIP
        metadata: run metadata to copy into the report

    Returns:
        the run report
    """
    if name_policy not in NAME_POLICIES:
        raise AggregationError(f'Unknown log name policy {name_policy}')
    if sink is None:
        sink = diagnostics.DiagnosticSink()

    state = _AggregationState()
    for fn in list_log_files(directory):
        identifier = reporterlog.worker_id(fn, prefix)
        if not identifier:
            if name_policy == POLICY_STRICT:
                raise AggregationError(f'Log file {fn} has no worker ID in its name')
            sink.add(diagnostics.AGGREGATE, f'Skipping {fn}: no worker ID in its name')
            continue

        try:
            record = reporterlog.parse_log_file(os.path.join(directory, fn))
        except LogParseError as e:
            sink.add(diagnostics.AGGREGATE, f'Skipping log {e}', logging.ERROR)
            continue

        if skip_passed and record.passed:
            logging.debug('Skipping passed suite %s in %s', record.title, fn)
            continue

        logging.debug('Folding %s (%d tests) from %s', record.title, len(record.tests), fn)
        fold_record(state, identifier, record)

    suites = []
    for entry in state.suites.values():
        entry.suite.tests.extend(entry.hooks)
        suites.append(entry.suite)

    report = RunReport(**vars(metadata)) if metadata else RunReport()
    report.suites = suites
    if any(s.failed for s in suites):
        report.passed = 0
        report.failed = 1
    else:
        report.passed = 1
        report.failed = 0
    logging.info('Aggregated %d suites from %s', len(suites), directory)
    return report
