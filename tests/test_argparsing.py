"""Test argparsing."""

import argparse
import contextlib
import io
import os
import tempfile
import unittest

from .context import testledger  # noqa: F401

from testledger import argparsing  # noqa: I100
from testledger import config


def make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser()
    argparsing.arguments_logging(parser)
    argparsing.arguments_config(parser)
    argparsing.arguments_ledger(parser)
    return parser


class TestArgparsing(unittest.TestCase):
    def setUp(self):
        super().setUp()
        self.addCleanup(config.get.cache_clear)
        self.addCleanup(config.expand.cache_clear)
        self.addCleanup(config.overrides.clear)

    def parse_error(self, args: list[str]):
        with contextlib.redirect_stderr(io.StringIO()) as err:
            with self.assertRaises(SystemExit):
                make_parser().parse_args(args)
        return err.getvalue()

    def test_debug_implies_verbose(self):
        args = make_parser().parse_args(['--debug'])
        self.assertTrue(args.debug)
        self.assertTrue(args.verbose)

        args = make_parser().parse_args(['-v'])
        self.assertFalse(args.debug)
        self.assertTrue(args.verbose)

    def test_set(self):
        make_parser().parse_args(['--set', 'project_id=17', '--set', "api_url='ledger.local'",
                                  '--set', 'video_dir='])
        self.assertEqual(config.get('project_id'), 17)
        self.assertEqual(config.get('api_url'), 'ledger.local')
        self.assertEqual(config.get('video_dir'), '')

    def test_set_errors(self):
        for assignment, message in [
                ('project_id', 'Missing ='),
                ('no_such_thing=1', 'Unknown config variable'),
                ('api_url=not quoted', 'not a Python literal'),
        ]:
            with self.subTest(assignment=assignment):
                self.assertIn(message, self.parse_error(['--set', assignment]))

    def test_authfile(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            fn = os.path.join(tmpdir, 'token')
            with open(fn, 'w', encoding='utf-8') as f:
                f.write('secret')
            self.assertEqual(make_parser().parse_args(['--authfile', fn]).authfile, fn)
            self.assertIn('is not a file', self.parse_error(['--authfile', tmpdir]))
            self.assertIn('is not a file',
                          self.parse_error(['--authfile', os.path.join(tmpdir, 'missing')]))
