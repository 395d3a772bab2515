"""Collection point for problems found while reporting a run.

Nothing in the reporting pipeline is allowed to stop the test runner, so instead of raising,
each stage records what went wrong here. The caller can then inspect the problems or ignore them.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional


# Stage names
AGGREGATE = 'aggregate'
SUBMIT = 'submit'
COLLECT = 'collect'
UPLOAD = 'upload'
PIPELINE = 'pipeline'

STATUS_FILE_FMT = 'testledger-{stage}.txt'


@dataclass
class Diagnostic:
    """One problem found in one pipeline stage."""

    stage: str
    message: str
    level: int = logging.WARNING


class DiagnosticSink:
    """Logs problems and keeps them for later inspection.

    If status_dir is given, the most recent message for each stage is also written to a
    testledger-<stage>.txt file in that directory, for CI systems that only keep files.
    """

    def __init__(self, status_dir: Optional[str] = None):
        self.entries = []  # type: list[Diagnostic]
        self.status_dir = status_dir

    def add(self, stage: str, message: str, level: int = logging.WARNING):
        logging.log(level, '%s: %s', stage, message)
        self.entries.append(Diagnostic(stage, message, level))
        if self.status_dir:
            self._write_status(stage, message)

    def _write_status(self, stage: str, message: str):
        fn = os.path.join(self.status_dir, STATUS_FILE_FMT.format(stage=stage))
        try:
            with open(fn, 'w', encoding='utf-8') as f:
                f.write(message)
        except OSError as e:
            # Status files are a convenience only
            logging.debug('Could not write status file %s: %s', fn, e)

    def for_stage(self, stage: str) -> list[Diagnostic]:
        return [d for d in self.entries if d.stage == stage]

    @property
    def has_errors(self) -> bool:
        return any(d.level >= logging.ERROR for d in self.entries)

    def __len__(self) -> int:
        return len(self.entries)
