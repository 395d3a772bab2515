"""Logging setup shared by the command-line programs
"""

import argparse
import logging
import os
import shlex
import sys
from typing import Optional


# Message format for each verbosity level; {program} becomes the program name
FORMATS = {
    logging.DEBUG: '{program} %(levelno)s %(filename)s: %(message)s',
    logging.INFO: '{program} %(filename)s: %(message)s',
    logging.WARNING: '{program}: %(message)s',
}

# Highest logging level mapping to each syslog priority
SYSLOG_PRIORITIES = (
    (logging.DEBUG, 7),    # KERN_DEBUG
    (logging.INFO, 6),     # KERN_INFO
    (logging.WARNING, 4),  # KERN_WARNING
    (logging.ERROR, 3),    # KERN_ERR
)
SYSLOG_CRITICAL = 2        # KERN_CRIT

# Libraries that are too chatty at INFO level
QUIET_LOGGERS = ('urllib3', 'requests')


def calling_program() -> str:
    "Return the name of the program that started us"
    return os.path.basename(sys.argv[0])


def logging_level_to_syslog(level: int) -> int:
    "Converts a logging level into a syslog priority"
    for highest, priority in SYSLOG_PRIORITIES:
        if level <= highest:
            return priority
    return SYSLOG_CRITICAL


class SyslogFormatter(logging.Formatter):
    "Prefixes each message with its syslog priority, like <4>"

    def __init__(self, fmt: str):
        super().__init__(fmt)
        self.base_format = fmt

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003
        self._style._fmt = f'<{logging_level_to_syslog(record.levelno)}>' + self.base_format
        return super().format(record)


def verbosity(args: argparse.Namespace) -> int:
    """Return the logging level selected by --debug and -v."""
    if args.debug:
        return logging.DEBUG
    if args.verbose:
        return logging.INFO
    return logging.WARNING


def setup(args: argparse.Namespace, program: Optional[str] = None, subprogram: str = ''):
    """Set up logging for a command-line program.

    program defaults to the name of the running program and subprogram, if given, is appended
    to it to show the operating mode.
    """
    if not program:
        program = shlex.quote(calling_program())
    if subprogram:
        program = f'{program}|{subprogram}'
    level = verbosity(args)
    # Escape percents to pass through the % formatting of logging
    fmt = FORMATS[level].replace('{program}', program.replace('%', '%%'))
    logging.basicConfig(level=level, format=fmt)
    if level > logging.DEBUG:
        # Connection details only matter when debugging
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
    if args.level_prefix:
        for handler in logging.getLogger().handlers:
            handler.setFormatter(SyslogFormatter(fmt))
