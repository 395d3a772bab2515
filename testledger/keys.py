"""Keys used to correlate suites and tests.

Two kinds of keys exist:

Composite keys identify a suite or test across the log files of a run. They include the worker
identifier from the log file name, so the same spec run on two workers produces two suites. They
are base64-encoded JSON arrays so that no choice of titles can make two different identities
collide.

Result keys are the plain keys the ledger uses in its response to a submitted run. The client
computes them from the suites it submitted in order to find the IDs the server assigned.
"""

import base64
import json
from typing import Any


def _key_part(value: Any) -> Any:
    """Return a JSON-encodable, stable representation of a key component."""
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    # Capabilities may be an object; sort it so equal objects encode equally
    return json.dumps(value, sort_keys=True, separators=(',', ':'))


def composite_key(*parts: Any) -> str:
    """Encode the given parts, in order, into a single key."""
    encoded = json.dumps([_key_part(p) for p in parts], separators=(',', ':'))
    return base64.b64encode(encoded.encode('utf-8')).decode('ascii')


def suite_key(identifier: str, spec_file: str, capabilities: Any, title: str) -> str:
    return composite_key(identifier, spec_file, capabilities, title)


def suite_test_key(identifier: str, spec_file: str, capabilities: Any, title: str,
                   test_title: str) -> str:
    return composite_key(identifier, spec_file, capabilities, title, test_title)


def _result_part(value: Any) -> str:
    if isinstance(value, str):
        return value
    if value is None:
        return ''
    return json.dumps(value, sort_keys=True, separators=(',', ':'))


def result_suite_key(title: str, spec_file: str, capabilities: Any) -> str:
    """Return the key under which the ledger reports the ID of a submitted suite."""
    return ':'.join(_result_part(p) for p in (title, spec_file, capabilities))
