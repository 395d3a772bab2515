"""Prepares the reporter output directory before a test run starts."""

import argparse
import datetime
import logging
import os
import shutil
import sys

from testledger import argparsing
from testledger import config
from testledger import log
from testledger import settings


def parse_args(args=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description='Empty the reporter output directory and record the run start time')
    argparsing.arguments_logging(parser)
    argparsing.arguments_config(parser)
    argparsing.arguments_output(parser)
    return parser.parse_args(args=args)


def empty_dir(directory: str):
    """Remove everything inside directory, creating it if necessary."""
    os.makedirs(directory, exist_ok=True)
    with os.scandir(directory) as it:
        entries = list(it)
    for entry in entries:
        logging.debug('Removing %s', entry.path)
        if entry.is_dir(follow_symlinks=False):
            shutil.rmtree(entry.path)
        else:
            os.unlink(entry.path)


def prepare(output_dir: str, start: datetime.datetime):
    empty_dir(output_dir)
    settings.write_start_time(output_dir, start)
    logging.info('Run started at %s', start.isoformat())


def main() -> int:
    args = parse_args()
    log.setup(args)

    output_dir = os.path.expanduser(args.output_dir or config.expand('reporter_output_dir'))
    if not output_dir:
        logging.error('No reporter output directory specified')
        return 1

    try:
        prepare(output_dir, datetime.datetime.now(datetime.timezone.utc))
    except OSError as e:
        logging.error('Cannot prepare %s: %s', output_dir, e)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
