"""Test diagnostics."""

import logging
import os
import tempfile
import unittest

from .context import testledger  # noqa: F401

from testledger import diagnostics  # noqa: I100


class TestDiagnosticSink(unittest.TestCase):
    """Test diagnostics.DiagnosticSink."""

    def test_add(self):
        sink = diagnostics.DiagnosticSink()
        with self.assertLogs(level='INFO') as cm:
            sink.add(diagnostics.AGGREGATE, 'Skipping wdio.log')
            sink.add(diagnostics.UPLOAD, 'No upload URLs returned', logging.INFO)
        self.assertEqual(cm.output, ['WARNING:root:aggregate: Skipping wdio.log',
                                     'INFO:root:upload: No upload URLs returned'])
        self.assertEqual(len(sink), 2)
        self.assertFalse(sink.has_errors)
        self.assertEqual(sink.for_stage(diagnostics.UPLOAD),
                         [diagnostics.Diagnostic('upload', 'No upload URLs returned',
                                                 logging.INFO)])
        self.assertEqual(sink.for_stage(diagnostics.SUBMIT), [])

        with self.assertLogs(level='ERROR'):
            sink.add(diagnostics.SUBMIT, 'Run submission failed', logging.ERROR)
        self.assertTrue(sink.has_errors)

    def test_status_files(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            sink = diagnostics.DiagnosticSink(tmpdir)
            with self.assertLogs(level='WARNING'):
                sink.add(diagnostics.COLLECT, 'first')
                sink.add(diagnostics.COLLECT, 'second')
                sink.add(diagnostics.UPLOAD, 'third')
            self.assertEqual(sorted(os.listdir(tmpdir)),
                             ['testledger-collect.txt', 'testledger-upload.txt'])
            with open(os.path.join(tmpdir, 'testledger-collect.txt'), encoding='utf-8') as f:
                self.assertEqual(f.read(), 'second')

    def test_status_dir_missing(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            sink = diagnostics.DiagnosticSink(os.path.join(tmpdir, 'gone'))
            with self.assertLogs(level='WARNING'):
                sink.add(diagnostics.AGGREGATE, 'problem')
            self.assertEqual(len(sink), 1)
