"""Access the Test Ledger API

All calls are authenticated with a project API token sent as a bearer token. Request and response
bodies are JSON. Artifact bytes are not sent to the ledger itself but to the presigned object
storage URLs it hands out.
"""

import json
import logging
from typing import Any, Optional

from testledger import netreq


HTTPError = netreq.HTTPError
RequestException = netreq.RequestException

DEFAULT_API_URL = 'https://app-api.testledger.dev'
RUNS_PATH = '/runs'
PRESIGNED_PATH = '/artifacts/presigned-upload'
CONFIRM_PATH = '/artifacts/confirm'
DATA_TYPE = 'application/json'


def normalize_api_url(url: Optional[str]) -> str:
    """Return the API base URL in the form https://host[/path], without a trailing slash.

    The scheme is optional in the configured value; https is always used.
    """
    if not url:
        url = DEFAULT_API_URL
    for scheme in ('https://', 'http://'):
        if url.startswith(scheme):
            if scheme == 'http://':
                logging.warning('Ignoring insecure scheme in API URL %s', url)
            url = url[len(scheme):]
            break
    return 'https://' + url.rstrip('/')


class LedgerApi:
    def __init__(self, token: str, api_url: Optional[str] = None):
        self.token = token
        self.api_url = normalize_api_url(api_url)
        # Reporting is single-attempt, so no retries
        self.http = netreq.Session()

    def _url(self, path: str) -> str:
        return self.api_url + path

    def _standard_headers(self) -> dict[str, str]:
        headers = {'Content-Type': DATA_TYPE,
                   'Accept': DATA_TYPE,
                   'User-Agent': netreq.USER_AGENT,
                   }
        if self.token:
            headers['Authorization'] = 'Bearer ' + self.token
        else:
            logging.warning('No API token available for %s', self.api_url)
        return headers

    def _post_json(self, path: str, data: Any, allow_empty: bool = False) -> Any:
        """POST a JSON body and return the decoded JSON response.

        Raises an exception in case of network error, a non-success HTTP status or a response
        that isn't JSON (json.JSONDecodeError, a ValueError). If allow_empty, an empty response
        body returns None instead.
        """
        url = self._url(path)
        logging.debug('POST %s', url)
        resp = self.http.post(url, headers=self._standard_headers(), data=json.dumps(data))
        resp.raise_for_status()
        if allow_empty and not resp.text.strip():
            return None
        return json.loads(resp.text)

    def post_run(self, report: dict[str, Any]) -> dict[str, Any]:
        """Submits a run report and returns the IDs the server assigned to its suites & tests"""
        return self._post_json(RUNS_PATH, report)

    def request_presigned_urls(self, artifacts: list[dict[str, Any]]) -> dict[str, Any]:
        """Requests one upload URL per artifact descriptor, in the same order"""
        return self._post_json(PRESIGNED_PATH, {'artifacts': artifacts})

    def confirm_uploads(self, artifact_ids: list[Any]) -> Optional[dict[str, Any]]:
        """Tells the server which artifacts were successfully stored

        The server may acknowledge with an empty body, in which case None is returned.
        """
        return self._post_json(CONFIRM_PATH, {'artifact_ids': artifact_ids}, allow_empty=True)

    def put_artifact(self, presigned_url: str, data: bytes, mime_type: str):
        """Stores artifact data at a presigned URL

        The URL points to the object store, not the ledger, so no authentication is sent.
        Raises HTTPError on a non-success HTTP status.
        """
        logging.debug('PUT %d bytes of %s', len(data), mime_type)
        resp = netreq.put(presigned_url, data=data, headers={'Content-Type': mime_type})
        resp.raise_for_status()
