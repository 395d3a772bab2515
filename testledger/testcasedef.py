"""Test case data."""

from enum import IntEnum


class TestResult(IntEnum):
    """Enumeration of the results of a test or suite, as derived from the runner's flags."""
    __test__ = False

    UNKNOWN = 0     # no flag was set
    PASS = 1        # test succeeded
    FAIL = 2        # test failed
    SKIP = 3        # test was skipped


def verdict(passed: bool, failed: bool, skipped: bool) -> TestResult:
    """Return the single result represented by the runner's flags.

    The runner should only ever set one of them, but if it sets more, failure wins over skipping
    which wins over passing.
    """
    if failed:
        return TestResult.FAIL
    if skipped:
        return TestResult.SKIP
    if passed:
        return TestResult.PASS
    return TestResult.UNKNOWN
