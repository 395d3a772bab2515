"""Type definitions of parsed reporter logs."""

from dataclasses import dataclass, field
from typing import Any


HOOK_TYPE = 'hook'


@dataclass
class TestOccurrence:
    """Class to hold one entry in the test list of a reporter log.

    The same test shows up more than once when it was retried.
    """
    __test__ = False

    title: str
    type: str = 'test'  # noqa: A003
    duration: int = 0   # milliseconds
    passed: bool = False
    failed: bool = False
    skipped: bool = False
    retries: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def is_hook(self) -> bool:
        return self.type == HOOK_TYPE


@dataclass
class LogRecord:
    """Class to hold the contents of one reporter log file (one spec on one worker)."""

    spec_file: str
    title: str
    capabilities: Any = ''
    filepath: str = ''
    duration: int = 0   # milliseconds
    start: str = ''
    passed: bool = False
    failed: bool = False
    skipped: bool = False
    retries: int = 0
    tests: list[TestOccurrence] = field(default_factory=list)
