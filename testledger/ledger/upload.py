"""Upload screenshots and videos to the ledger.

This happens in three steps:
1. Ask the ledger for one presigned object storage URL per artifact, in a single request.
2. PUT each artifact to its URL, one at a time. A failed transfer doesn't stop the others.
3. Tell the ledger which artifacts were transferred successfully, in a single request.

Nothing is retried. An artifact that was transferred but whose confirmation failed stays in
object storage without the ledger knowing about it.
"""

import logging
from typing import Any, Optional

from testledger import diagnostics
from testledger.artifactdef import Artifact, UploadResult, UploadSummary, UploadTarget
from testledger.ledger import ledgerapi


def parse_upload_targets(response: Any) -> list[UploadTarget]:
    """Return the upload targets in the ledger's response, in order.

    A response without any targets yields an empty list. Raises ValueError if a target is
    malformed.
    """
    if not isinstance(response, dict):
        raise ValueError(f'Unexpected response type {type(response).__name__}')
    try:
        return [UploadTarget(u['artifact_id'], u['presigned_url'])
                for u in response.get('uploads') or []]
    except (KeyError, TypeError) as e:
        raise ValueError(f'Malformed upload target: {e!r}') from e


class ArtifactUploader:
    def __init__(self, api: ledgerapi.LedgerApi,
                 sink: Optional[diagnostics.DiagnosticSink] = None):
        self.api = api
        self.sink = sink if sink is not None else diagnostics.DiagnosticSink()

    def _fail(self, summary: UploadSummary, message: str) -> UploadSummary:
        self.sink.add(diagnostics.UPLOAD, message, logging.ERROR)
        summary.error = message
        return summary

    def request_targets(self, artifacts: list[Artifact]) -> list[UploadTarget]:
        response = self.api.request_presigned_urls([a.descriptor() for a in artifacts])
        return parse_upload_targets(response)

    def transfer(self, target: UploadTarget, artifact: Artifact) -> UploadResult:
        """Transfer one artifact to its target and return the outcome; never raises."""
        try:
            with open(artifact.path, 'rb') as f:
                data = f.read()
            self.api.put_artifact(target.presigned_url, data, artifact.mime_type)
        except ledgerapi.HTTPError as e:
            error = f'HTTP {e.response.status_code}'
        except (OSError, ledgerapi.RequestException) as e:
            error = str(e)
        else:
            logging.debug('Uploaded %s as artifact %s', artifact.filename, target.artifact_id)
            return UploadResult(target.artifact_id, True)

        logging.warning('Upload of %s failed: %s', artifact.filename, error)
        return UploadResult(target.artifact_id, False, error)

    def transfer_all(self, targets: list[UploadTarget],
                     artifacts: list[Artifact]) -> list[UploadResult]:
        """Transfer every artifact that has a target, in order."""
        if len(targets) > len(artifacts):
            logging.warning('Ignoring %d upload targets without an artifact',
                            len(targets) - len(artifacts))
        elif len(targets) < len(artifacts):
            logging.warning('Only %d of %d artifacts received an upload target',
                            len(targets), len(artifacts))
        return [self.transfer(target, artifact) for target, artifact in zip(targets, artifacts)]

    def upload(self, artifacts: list[Artifact]) -> UploadSummary:
        """Upload all artifacts and confirm the ones that made it.

        Problems are recorded in the sink and in the summary rather than raised.
        """
        summary = UploadSummary(artifacts=len(artifacts))
        if not artifacts:
            logging.info('No artifacts to upload')
            return summary

        try:
            targets = self.request_targets(artifacts)
        except ledgerapi.HTTPError as e:
            return self._fail(summary, f'Upload URL request rejected with HTTP '
                              f'{e.response.status_code}')
        except (ledgerapi.RequestException, ValueError) as e:
            return self._fail(summary, f'Upload URL request failed: {e}')

        summary.targets = len(targets)
        if not targets:
            self.sink.add(diagnostics.UPLOAD, 'No upload URLs returned', logging.INFO)
            return summary

        summary.results = self.transfer_all(targets, artifacts)
        summary.confirmed_ids = [r.artifact_id for r in summary.results if r.success]
        if not summary.confirmed_ids:
            return self._fail(summary, f'All {len(summary.results)} artifact transfers failed')

        try:
            self.api.confirm_uploads(summary.confirmed_ids)
        except ledgerapi.HTTPError as e:
            return self._fail(summary, f'Upload confirmation rejected with HTTP '
                              f'{e.response.status_code}')
        except (ledgerapi.RequestException, ValueError) as e:
            return self._fail(summary, f'Upload confirmation failed: {e}')
        summary.confirmed = True

        logging.info('Uploaded %d/%d artifacts', len(summary.confirmed_ids), len(artifacts))
        return summary
