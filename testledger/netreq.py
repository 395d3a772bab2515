"""Network API functions
"""

from typing import Optional

import requests
from requests import adapters

import testledger


HTTPError = requests.exceptions.HTTPError
RequestException = requests.exceptions.RequestException

# The User-Agent: header to use
USER_AGENT = f'testledger/{testledger.__version__}'


def put(url: str, data: bytes, headers: Optional[dict[str, str]] = None,
        **args) -> requests.Response:
    """Perform an HTTP PUT of raw data.

    No User-Agent: is added if headers are supplied, since presigned storage URLs may be signed
    over the exact header set.
    """
    if headers is None:
        headers = {'User-Agent': USER_AGENT}
    return requests.put(url=url, data=data, headers=headers, **args)


class Session(requests.Session):
    """Set up a requests session with a standard configuration

    Reporting is best-effort and single-attempt, so no request is ever retried, not even on
    connection errors.
    """

    def __init__(self):
        super().__init__()
        adapter = adapters.HTTPAdapter(max_retries=adapters.Retry(total=0, read=False))
        self.mount('https://', adapter)
        self.mount('http://', adapter)
        self.headers['User-Agent'] = USER_AGENT
