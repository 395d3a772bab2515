"""Argument parser helpers shared by the command-line programs."""

import argparse
import ast
import os
from typing import Optional

from testledger import config


class ReadableFileName:
    """argparse type that checks that a regular file can be read.

    User directories with tildes (e.g. ~user/token) are expanded first. The name is returned
    rather than an open file (unlike argparse.FileType) so that a secret is only read when it's
    actually needed.
    """

    def __call__(self, filename: str) -> str:
        fn = os.path.expanduser(filename)
        if not os.path.isfile(fn):
            raise argparse.ArgumentTypeError(f'{fn} is not a file')
        if not os.access(fn, os.R_OK):
            raise argparse.ArgumentTypeError(f'{fn} is not readable')
        return fn


class StoreMultipleConstAction(argparse.Action):
    """Store the const value (default True) to dest and to every attribute named in attrs."""

    def __init__(self,
                 option_strings,
                 dest: str,
                 const: bool = True,
                 attrs: Optional[list[str]] = None,
                 default=None,
                 required: bool = False,
                 help=None):     # noqa: A002
        super().__init__(
            option_strings=option_strings,
            dest=dest,
            nargs=0,
            const=const,
            default=default,
            required=required,
            help=help)
        self.attrs = attrs or []

    def __call__(self, parser, namespace, values, option_string=None):
        for attr in [self.dest, *self.attrs]:
            setattr(namespace, attr, self.const)


class OverrideConfigAction(argparse.Action):
    """argparse action that overrides a configuration variable with NAME=VALUE.

    VALUE is a Python literal (e.g. True, 42 or 'text'); an empty VALUE is the empty string.
    """
    def __init__(self,
                 option_strings,
                 dest: str,
                 default=None,
                 required: bool = False,
                 help=None):     # noqa: A002
        super().__init__(
            option_strings=option_strings,
            dest=dest,
            nargs=1,
            default=default,
            required=required,
            metavar='NAME=VALUE',
            help=help)

    def __call__(self, parser, namespace, values, option_string=None):
        for assignment in values:
            name, sep, rawval = assignment.partition('=')
            if not sep:
                raise argparse.ArgumentError(self, f'Missing = in {assignment}')
            if not config.is_known(name):
                raise argparse.ArgumentError(self, f'Unknown config variable {name}')
            try:
                val = ast.literal_eval(rawval) if rawval else ''
            except (ValueError, SyntaxError) as e:
                raise argparse.ArgumentError(
                    self, f'{name} value is not a Python literal: {rawval}') from e
            config.add_override(name, val)


def arguments_config(parser: argparse.ArgumentParser):
    """Add arguments needed for manipulating the configuration."""
    parser.add_argument(
        '--set',
        action=OverrideConfigAction,
        help='Override a config value; may be given more than once')


def arguments_logging(parser: argparse.ArgumentParser):
    """Add arguments needed for logging."""
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Show more log messages and a summary of the run')
    parser.add_argument(
        '--debug',
        action=StoreMultipleConstAction,
        attrs=['verbose'],
        help='Show debug level log messages')
    parser.add_argument(
        '--level-prefix',
        action='store_true',
        help='Include syslog priority level in log message as <N> prefix')


def arguments_output(parser: argparse.ArgumentParser):
    """Add arguments needed to find the reporter output directory."""
    parser.add_argument(
        '--output-dir',
        help='Directory holding the test reporter log files '
             '(default: reporter_output_dir config value)')


def arguments_ledger(parser: argparse.ArgumentParser):
    """Add arguments needed for talking to the ledger."""
    parser.add_argument(
        '--authfile',
        type=ReadableFileName(),
        help='File holding the API token, if TESTLEDGER_API_TOKEN is not set')
    parser.add_argument(
        '--api-url',
        help='Base URL of the Test Ledger API (default: api_url config value)')
    parser.add_argument(
        '--project-id',
        help='Test Ledger project ID (default: project_id config value)')


def arguments_run(parser: argparse.ArgumentParser):
    """Add arguments describing how the test runner was invoked."""
    parser.add_argument(
        '--suite',
        action='append',
        help='Name of a suite the runner was asked to run; use once per suite')
    parser.add_argument(
        '--repeat',
        action='store_true',
        help='The runner was asked to repeat specs')


def arguments_artifacts(parser: argparse.ArgumentParser):
    """Add arguments controlling the screenshot and video upload."""
    parser.add_argument(
        '--upload-artifacts',
        action='store_true',
        help='Upload screenshots and videos (default: upload_artifacts config value)')
    parser.add_argument(
        '--screenshot-dir',
        help='Directory tree holding screenshots (default: screenshot_dir config value)')
    parser.add_argument(
        '--video-dir',
        help='Directory tree holding videos (default: video_dir config value)')
