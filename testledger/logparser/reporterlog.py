"""Parses the JSON log files written by the test reporter.

The reporter running in each test worker writes one file per spec file, named like
wdio-0-1-reporter.log, where 0-1 identifies the worker. Each file holds a single JSON object
describing the spec file's suite and every test (and hook) that ran in it, including retries.
"""

import json
import os
import re
from typing import Any, Optional, Union

from testledger.errors import LogParseError
from testledger.logdef import LogRecord, TestOccurrence


# Which directory entries are log files at all
LOG_FILE_RE = re.compile(r'\.log')

# Worker identifier pattern, after the prefix
WORKER_ID_FMT = r'{prefix}-(\d+-\d+)-'

# Characters the log files are assumed to be written in
CHARMAP = 'UTF-8'


def is_log_file(filename: str) -> bool:
    return bool(LOG_FILE_RE.search(filename))


def worker_id(filename: str, prefix: str) -> Optional[str]:
    """Return the N-M worker identifier in the log file name, or None if there is none."""
    r = re.search(WORKER_ID_FMT.format(prefix=re.escape(prefix)), filename)
    return r.group(1) if r else None


def _flag(data: dict[str, Any], name: str) -> bool:
    return bool(data.get(name))


def _number(data: dict[str, Any], name: str) -> Union[int, float]:
    val = data.get(name)
    if val is None:
        return 0
    if isinstance(val, bool) or not isinstance(val, (int, float)):
        raise TypeError(f'{name} is not a number: {val!r}')
    return val


def parse_test(data: Any) -> TestOccurrence:
    if not isinstance(data, dict):
        raise TypeError(f'test entry is not an object: {data!r}')
    errors = data.get('errors') or []
    if not isinstance(errors, list):
        raise TypeError(f'errors is not a list: {errors!r}')
    return TestOccurrence(
        title=str(data['title']),
        type=data.get('type') or 'test',
        duration=_number(data, 'duration'),
        passed=_flag(data, 'passed'),
        failed=_flag(data, 'failed'),
        skipped=_flag(data, 'skipped'),
        retries=int(_number(data, 'retries')),
        errors=[str(e) for e in errors],
    )


def parse_log_record(data: Any) -> LogRecord:
    """Convert a decoded log file into a LogRecord.

    Raises KeyError or TypeError if the data does not have the expected shape.
    """
    if not isinstance(data, dict):
        raise TypeError('log is not a JSON object')
    tests = data.get('tests') or []
    if not isinstance(tests, list):
        raise TypeError('tests is not a list')
    spec_file = data['spec_file']
    if not isinstance(spec_file, str):
        raise TypeError(f'spec_file is not a string: {spec_file!r}')
    return LogRecord(
        spec_file=spec_file,
        title=data['title'],
        capabilities=data.get('capabilities', ''),
        filepath=data.get('filepath', ''),
        duration=_number(data, 'duration'),
        start=data.get('start', ''),
        passed=_flag(data, 'passed'),
        failed=_flag(data, 'failed'),
        skipped=_flag(data, 'skipped'),
        retries=int(_number(data, 'retries')),
        tests=[parse_test(t) for t in tests],
    )


def parse_log_file(path: str) -> LogRecord:
    """Read and parse a single reporter log file.

    Raises LogParseError if the file cannot be read or does not hold a valid log.
    """
    fn = os.path.basename(path)
    try:
        with open(path, encoding=CHARMAP) as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise LogParseError(fn, f'cannot read: {e}') from e

    if not text.strip():
        raise LogParseError(fn, 'file is empty')

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise LogParseError(fn, f'invalid JSON: {e}') from e

    try:
        return parse_log_record(data)
    except KeyError as e:
        raise LogParseError(fn, f'missing field {e.args[0]}') from e
    except TypeError as e:
        raise LogParseError(fn, str(e)) from e
