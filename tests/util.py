"""Utility functions used in multiple tests."""

import json
import os
from typing import Any, Optional
from unittest.mock import Mock, patch

import requests

from testledger import config


# Directory holding test data files
DATADIR = 'data'


def data_file(fn: str) -> str:
    """Return the path to a given test data file."""
    return os.path.join(os.path.dirname(__file__), DATADIR, fn)


def patch_config_get(key: str, value):
    """Mock config.get() to return a specific value for a given key.

    All other keys return the originally-configured value. Multiple items can be overridden by
    calling this more than once, but it cannot be used as a decorator in that case; it must
    be called within the test (for example as a context manager) because each patch must have access
    to the mock installed by the previous call, which isn't the case when called as a decorator.
    """
    def side_effect(k: str):
        return value if k == key else orig_get(k)

    # Use the original (or the previously-patched) get() for unmatched keys
    orig_get = config.get
    return patch('testledger.config.get', side_effect=side_effect)


def make_test(title: str, passed: bool = True, errors: Optional[list[str]] = None,
              hook: bool = False, **kwargs) -> dict[str, Any]:
    """Return a test entry as written by the reporter."""
    return {
        'title': title,
        'type': 'hook' if hook else 'test',
        'duration': kwargs.get('duration', 10),
        'passed': passed,
        'failed': not passed and not kwargs.get('skipped', False),
        'skipped': kwargs.get('skipped', False),
        'retries': kwargs.get('retries', 0),
        'errors': errors or [],
    }


def make_log(spec_file: str, title: str, tests: list[dict[str, Any]],
             passed: Optional[bool] = None, capabilities: Any = 'chrome') -> dict[str, Any]:
    """Return a reporter log record; the suite passes iff all its tests did, unless given."""
    if passed is None:
        passed = all(t['passed'] or t['skipped'] for t in tests)
    return {
        'spec_file': spec_file,
        'filepath': '/src/test/specs/' + spec_file,
        'title': title,
        'capabilities': capabilities,
        'duration': 100,
        'start': '2024-05-01T10:00:00.000Z',
        'passed': passed,
        'failed': not passed,
        'skipped': False,
        'retries': 0,
        'tests': tests,
    }


def write_log(directory: str, fn: str, record: Any):
    """Write a reporter log file; a str record is written verbatim."""
    with open(os.path.join(directory, fn), 'w', encoding='utf-8') as f:
        f.write(record if isinstance(record, str) else json.dumps(record))


def write_file(directory: str, fn: str, data: bytes = b'data') -> str:
    """Write a binary file, creating subdirectories as needed, and return its path."""
    path = os.path.join(directory, fn)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, 'wb') as f:
        f.write(data)
    return path


def http_error(status: int) -> requests.exceptions.HTTPError:
    """Return an HTTPError like the one raised by raise_for_status()."""
    resp = requests.models.Response()
    resp.status_code = status
    return requests.exceptions.HTTPError(f'{status} Error', response=resp)


def json_response(data: Any, status: int = 200) -> Mock:
    """Return a mock requests response holding JSON data."""
    resp = Mock()
    resp.status_code = status
    resp.text = json.dumps(data)
    if status >= 400:
        resp.raise_for_status.side_effect = http_error(status)
    return resp
