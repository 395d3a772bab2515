"""Run all the reporting stages in order.

aggregate -> submit -> collect artifacts -> upload artifacts

Each stage only uses the output of the previous one. Reporting must never change the outcome of
the test run itself, so no exception leaves report_run(); problems end up in the diagnostic sink.
"""

import datetime
import logging
from dataclasses import dataclass, field
from typing import Optional

from testledger import aggregate
from testledger import artifacts
from testledger import diagnostics
from testledger import settings as settingsmod
from testledger.artifactdef import Artifact, UploadSummary
from testledger.errors import AggregationError
from testledger.ledger import ledgerapi
from testledger.ledger import report as reportmod
from testledger.ledger import upload
from testledger.reportdef import RunReport, RunResult


@dataclass
class PipelineOutcome:
    """What each stage produced; None for stages that didn't run."""

    report: Optional[RunReport] = None
    result: Optional[RunResult] = None
    artifacts: list[Artifact] = field(default_factory=list)
    upload: Optional[UploadSummary] = None


def build_report(settings: settingsmod.ReporterSettings, sink: diagnostics.DiagnosticSink,
                 start: Optional[datetime.datetime] = None) -> Optional[RunReport]:
    """Aggregate the logs into a report, or return None if that's impossible."""
    end = datetime.datetime.now(datetime.timezone.utc)
    if not start:
        start = settingsmod.read_start_time(settings.output_dir) or end
    metadata = settingsmod.run_metadata(settings, start, end)
    try:
        return aggregate.aggregate(settings.output_dir, settings.skip_passed, sink,
                                   prefix=settings.log_file_prefix,
                                   name_policy=settings.log_name_policy,
                                   metadata=metadata)
    except AggregationError as e:
        sink.add(diagnostics.AGGREGATE, str(e), logging.ERROR)
        return None


def _run_stages(settings: settingsmod.ReporterSettings, sink: diagnostics.DiagnosticSink,
                api: ledgerapi.LedgerApi, outcome: PipelineOutcome,
                start: Optional[datetime.datetime]):
    outcome.report = build_report(settings, sink, start)
    if not outcome.report:
        return

    outcome.result = reportmod.RunReporter(api, sink).submit(outcome.report)
    if not settings.upload_artifacts:
        logging.debug('Artifact upload is disabled')
        return
    if not outcome.result.ok:
        logging.info('Skipping artifact upload since the run was not accepted')
        return

    collector = artifacts.ArtifactCollector(sink)
    outcome.artifacts = collector.collect(outcome.report, outcome.result,
                                          settings.screenshot_dir, settings.video_dir)
    outcome.upload = upload.ArtifactUploader(api, sink).upload(outcome.artifacts)


def report_run(settings: settingsmod.ReporterSettings,
               sink: Optional[diagnostics.DiagnosticSink] = None,
               api: Optional[ledgerapi.LedgerApi] = None,
               start: Optional[datetime.datetime] = None) -> PipelineOutcome:
    """Report a finished run to the ledger.

    Args:
        settings: reporter settings
        sink: where problems are recorded; a new one is made if not given
        api: ledger API client; one is made from the settings if not given
        start: run start time; read from the start file if not given

    Returns:
        the output of every stage that ran
    """
    if sink is None:
        sink = diagnostics.DiagnosticSink(settings.output_dir if settings.write_status_files
                                          else None)
    if api is None:
        api = ledgerapi.LedgerApi(settings.api_token, settings.api_url)

    outcome = PipelineOutcome()
    try:
        _run_stages(settings, sink, api, outcome, start)
    except Exception as e:  # noqa: B902
        # Nothing may propagate to the test runner
        logging.exception('Unexpected error while reporting run')
        sink.add(diagnostics.PIPELINE, f'Unexpected error: {e}', logging.ERROR)
    return outcome
