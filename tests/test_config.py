"""Test config."""

import os
import tempfile
import textwrap
import unittest
from unittest.mock import patch

from .context import testledger  # noqa: F401

from testledger import config  # noqa: I100


class TestConfig(unittest.TestCase):
    def setUp(self):
        super().setUp()
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        # Force the config file to be loaded afresh, and forgotten afterward
        self.addCleanup(config.get.cache_clear)
        self.addCleanup(config.expand.cache_clear)
        self.addCleanup(setattr, config, 'config_module', None)
        config.config_module = None
        config.get.cache_clear()
        config.expand.cache_clear()

    def write_config(self, text: str) -> str:
        fn = os.path.join(self.tmpdir.name, 'testledgerrc')
        with open(fn, 'w', encoding='utf-8') as f:
            f.write(textwrap.dedent(text))
        return fn

    def test_config_file(self):
        with patch.dict(os.environ, {'XDG_CONFIG_HOME': '/etc/xdg'}, clear=True):
            self.assertEqual(config.config_file(), '/etc/xdg/testledgerrc')
        with patch.dict(os.environ, {'HOME': '/home/ci'}, clear=True):
            self.assertEqual(config.config_file(), '/home/ci/.config/testledgerrc')
        with patch.dict(os.environ, {'HOME': '/home/ci', 'TESTLEDGER_CONFIG': '/repo/rc'},
                        clear=True):
            self.assertEqual(config.config_file(), '/repo/rc')

    def test_is_known(self):
        self.assertTrue(config.is_known('api_url'))
        self.assertTrue(config.is_known('log_name_policy'))
        self.assertFalse(config.is_known('api_token'))
        self.assertFalse(config.is_known('__doc__'))

    def test_config_file_values(self):
        fn = self.write_config("""\
            import os
            project_id = 12
            screenshot_dir = '{reporter_output_dir}/screenshots'
            reporter_output_dir = '{HOME}/wdio'
            """)
        with patch.dict(os.environ, {'TESTLEDGER_CONFIG': fn, 'HOME': '/home/ci'}, clear=True):
            self.assertEqual(config.get('project_id'), 12)
            self.assertEqual(config.get('upload_artifacts'), False)
            self.assertEqual(config.expand('reporter_output_dir'), '/home/ci/wdio')
            self.assertEqual(config.expand('screenshot_dir'), '{HOME}/wdio/screenshots')

    def test_unknown_variable(self):
        fn = self.write_config("""\
            projectid = 12
            """)
        with patch.dict(os.environ, {'TESTLEDGER_CONFIG': fn}, clear=True):
            with self.assertLogs(level='WARNING') as cm:
                config.config()
        self.assertIn('projectid', cm.output[0])

    def test_missing_file(self):
        with patch.dict(os.environ, {'TESTLEDGER_CONFIG': '/nonexistent/rc'}, clear=True):
            self.assertEqual(config.get('log_file_prefix'), 'wdio')

    def test_getenv(self):
        with patch.dict(os.environ, {'A': 'x', 'EMPTY': '', 'N': '3', 'BAD': 'three'},
                        clear=True):
            self.assertEqual(config.getenv('A'), 'x')
            self.assertIsNone(config.getenv('EMPTY'))
            self.assertEqual(config.getenv('MISSING', 'dflt'), 'dflt')
            self.assertEqual(config.getenv_int('N'), 3)
            self.assertIsNone(config.getenv_int('MISSING'))
            with self.assertLogs(level='WARNING'):
                self.assertIsNone(config.getenv_int('BAD'))

    def test_override_var(self):
        class Holder:
            value = 1

        with self.assertRaises(RuntimeError):
            with config.override_var(Holder, 'value', 2) as saved:
                self.assertEqual(saved, 1)
                self.assertEqual(Holder.value, 2)
                raise RuntimeError('restore anyway')
        self.assertEqual(Holder.value, 1)
