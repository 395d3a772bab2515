import unittest
from unittest.mock import patch

from .context import testledger  # noqa: F401

from testledger import netreq  # noqa: I100


class TestNetreq(unittest.TestCase):
    @patch('requests.put')
    def test_put(self, put_mock):
        netreq.put('https://bucket.example.com/a', b'data')
        put_mock.assert_called_once_with(url='https://bucket.example.com/a', data=b'data',
                                         headers={'User-Agent': netreq.USER_AGENT})

        # Supplied headers are sent exactly as given
        put_mock.reset_mock()
        netreq.put('https://bucket.example.com/a', b'data', {'Content-Type': 'image/png'},
                   timeout=30)
        put_mock.assert_called_once_with(url='https://bucket.example.com/a', data=b'data',
                                         headers={'Content-Type': 'image/png'}, timeout=30)

    def test_session(self):
        session = netreq.Session()
        adapter = session.get_adapter('https://ledger.example.com/')
        self.assertEqual(adapter.max_retries.total, 0)
        self.assertEqual(session.headers['User-Agent'], netreq.USER_AGENT)

        self.assertIs(session.get_adapter('http://ledger.example.com/'), adapter)
