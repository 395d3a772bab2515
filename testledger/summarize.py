"""Summarize aggregated reports and upload results for display"""

import io
from typing import List

from testledger.artifactdef import UploadSummary
from testledger.reportdef import RunReport, TestRecord
from testledger.testcasedef import TestResult, verdict


def record_verdict(test: TestRecord) -> TestResult:
    return verdict(test.passed, test.failed, test.skipped)


def show_totals(report: RunReport, details: bool = False):
    print(''.join(summarize_totals(report, details)))


def summarize_totals(report: RunReport, details: bool = False) -> List[str]:
    tests = report.all_tests()
    results = [record_verdict(t) for t in tests]
    f = io.StringIO()
    print('RESULT:', 'FAILED' if report.failed else 'PASSED', file=f)
    print('SUITES:', len(report.suites), file=f)
    print('SUITES FAILED:', len([1 for s in report.suites if s.failed]), file=f)
    print('OK:', results.count(TestResult.PASS), file=f)
    print('FAILED:', results.count(TestResult.FAIL), file=f)
    print('SKIPPED:', results.count(TestResult.SKIP), file=f)
    if count := results.count(TestResult.UNKNOWN):
        print('UNKNOWN:', count, file=f)
    print('TOTAL:', len(tests), file=f)
    if details:
        # Display the tests that need attention
        for suite in report.suites:
            for test in suite.tests:
                result = record_verdict(test)
                if result not in frozenset((TestResult.PASS, TestResult.SKIP)):
                    print(f'{suite.spec_file}: {test.title}: {result.name}', file=f)
                    for error in test.errors:
                        print(f'    {error}', file=f)
    f.seek(0)
    return f.readlines()


def summarize_upload(summary: UploadSummary) -> List[str]:
    f = io.StringIO()
    print('ARTIFACTS:', summary.artifacts, file=f)
    print('UPLOAD URLS:', summary.targets, file=f)
    print('UPLOADED:', summary.uploaded, file=f)
    print('UPLOAD FAILED:', summary.failed, file=f)
    print('CONFIRMED:', len(summary.confirmed_ids) if summary.confirmed else 0, file=f)
    if summary.error:
        print('ERROR:', summary.error, file=f)
    f.seek(0)
    return f.readlines()
