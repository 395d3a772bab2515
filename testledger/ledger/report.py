"""Submit an aggregated run report to the ledger."""

import logging
from typing import Any, Optional

from testledger import diagnostics
from testledger.ledger import ledgerapi
from testledger.reportdef import RunReport, RunResult, TestIds


SUCCESS_STATUS = 'success'


def parse_run_result(response: Any) -> RunResult:
    """Convert the response to POST /runs into a RunResult.

    Raises ValueError if the response isn't shaped as expected.
    """
    if not isinstance(response, dict):
        raise ValueError(f'Unexpected response type {type(response).__name__}')
    status = response.get('status')
    if status != SUCCESS_STATUS:
        return RunResult.empty(status)

    result = RunResult(ok=True, status=status)
    try:
        for suite in response.get('suites') or []:
            result.suites[suite['suite_key']] = suite['id']
        for test in response.get('tests') or []:
            result.tests[test['suite_test_key']] = TestIds(test['id'],
                                                           test.get('test_run_suite_id'))
    except (KeyError, TypeError) as e:
        raise ValueError(f'Malformed run result: {e!r}') from e
    return result


class RunReporter:
    def __init__(self, api: ledgerapi.LedgerApi,
                 sink: Optional[diagnostics.DiagnosticSink] = None):
        self.api = api
        self.sink = sink if sink is not None else diagnostics.DiagnosticSink()

    def submit(self, report: RunReport) -> RunResult:
        """Send the report to the ledger.

        Any failure is recorded in the sink and results in an empty result, with which no
        artifacts can be associated.
        """
        logging.info('Submitting run with %d suites and %d tests',
                     len(report.suites), len(report.all_tests()))
        try:
            response = self.api.post_run(report.to_json())
        except ledgerapi.HTTPError as e:
            self.sink.add(diagnostics.SUBMIT,
                          f'Run submission rejected with HTTP {e.response.status_code}',
                          logging.ERROR)
            return RunResult.empty()
        except ledgerapi.RequestException as e:
            self.sink.add(diagnostics.SUBMIT, f'Run submission failed: {e}', logging.ERROR)
            return RunResult.empty()
        except ValueError as e:
            self.sink.add(diagnostics.SUBMIT, f'Run submission returned invalid JSON: {e}',
                          logging.ERROR)
            return RunResult.empty()

        try:
            result = parse_run_result(response)
        except ValueError as e:
            self.sink.add(diagnostics.SUBMIT, str(e), logging.ERROR)
            return RunResult.empty()

        if not result.ok:
            self.sink.add(diagnostics.SUBMIT,
                          f'Run submission returned status {result.status!r}', logging.ERROR)
        else:
            logging.info('Run submitted; %d suites and %d tests were assigned IDs',
                         len(result.suites), len(result.tests))
        return result
