"""Reports a finished test run, and its screenshots and videos, to Test Ledger."""

import argparse
import logging
import sys

from testledger import argparsing
from testledger import diagnostics
from testledger import log
from testledger import pipeline
from testledger import settings
from testledger import summarize
from testledger.errors import ConfigError


def parse_args(args=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description='Aggregate test reporter logs and submit them to Test Ledger')
    argparsing.arguments_logging(parser)
    argparsing.arguments_config(parser)
    argparsing.arguments_output(parser)
    argparsing.arguments_ledger(parser)
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help="Aggregate and show the report but don't send anything")
    argparsing.arguments_run(parser)
    argparsing.arguments_artifacts(parser)
    return parser.parse_args(args=args)


def dry_run(reporter_settings: settings.ReporterSettings, args: argparse.Namespace) -> int:
    sink = diagnostics.DiagnosticSink()
    report = pipeline.build_report(reporter_settings, sink)
    if report:
        if args.verbose:
            for n, v in report.to_json().items():
                if n != 'suites':
                    print(f'{n}={v}')
        summarize.show_totals(report, details=args.debug)
    return 0


def main() -> int:
    args = parse_args()
    log.setup(args, subprogram='dry-run' if args.dry_run else '')

    try:
        # A token is not needed when nothing is sent
        reporter_settings = settings.from_args(args, require_token=not args.dry_run)
    except ConfigError as e:
        logging.error('%s', e)
        return 1

    if args.dry_run:
        return dry_run(reporter_settings, args)

    outcome = pipeline.report_run(reporter_settings)
    if args.verbose:
        if outcome.report:
            summarize.show_totals(outcome.report, details=args.debug)
        if outcome.upload:
            print(''.join(summarize.summarize_upload(outcome.upload)))
    # The exit status reflects only whether the reporter was usable, never the report outcome
    return 0


if __name__ == '__main__':
    sys.exit(main())
