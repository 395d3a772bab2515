"""Test log."""

import argparse
import logging
import unittest

from .context import testledger  # noqa: F401

from testledger import log  # noqa: I100


class TestLog(unittest.TestCase):
    def test_syslog_levels(self):
        for level, priority in [
                (logging.DEBUG, 7),
                (logging.INFO, 6),
                (logging.WARNING, 4),
                (logging.ERROR, 3),
                (logging.CRITICAL, 2),
        ]:
            with self.subTest(level=level):
                self.assertEqual(log.logging_level_to_syslog(level), priority)

    def test_verbosity(self):
        for debug, verbose, level in [
                (False, False, logging.WARNING),
                (False, True, logging.INFO),
                (True, True, logging.DEBUG),
        ]:
            with self.subTest(debug=debug, verbose=verbose):
                args = argparse.Namespace(debug=debug, verbose=verbose)
                self.assertEqual(log.verbosity(args), level)

    def test_syslog_formatter(self):
        formatter = log.SyslogFormatter('tlreportrun: %(message)s')
        record = logging.LogRecord('root', logging.ERROR, __file__, 1, 'Upload failed', None,
                                   None)
        self.assertEqual(formatter.format(record), '<3>tlreportrun: Upload failed')
