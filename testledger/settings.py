"""Gather everything the reporter needs to know about a run.

Settings come from three places, in increasing order of precedence: the defaults in configdef.py
and the user's testledgerrc file, environment variables set by the CI job, and command-line
options. Run metadata (UUIDs, site, build URL, etc.) is only taken from the environment.
"""

import argparse
import datetime
import logging
import os
from dataclasses import dataclass, field
from typing import Optional

from testledger import config
from testledger.errors import ConfigError
from testledger.reportdef import RunMetadata


TOKEN_ENV = 'TESTLEDGER_API_TOKEN'
DEFAULT_VERSION = '0.0.1'

# suites_ran value when the runner was asked to repeat specs
REPEAT_RUN = 'RepeatRun'


@dataclass
class ReporterSettings:
    """Settings controlling one reporter run."""

    output_dir: str
    api_token: str
    api_url: str = ''
    project_id: object = 0
    app_version: str = DEFAULT_VERSION
    enable_flaky: int = 0
    skip_passed: bool = False
    upload_artifacts: bool = False
    screenshot_dir: Optional[str] = None
    video_dir: Optional[str] = None
    log_file_prefix: str = 'wdio'
    log_name_policy: str = 'strict'
    write_status_files: bool = False
    suites: list[str] = field(default_factory=list)
    repeat: bool = False

    def validate(self, require_token: bool = True):
        if not self.output_dir:
            raise ConfigError('No reporter output directory specified')
        if require_token and not self.api_token:
            raise ConfigError(f'No API token specified. Set {TOKEN_ENV} or use --authfile.')

    @property
    def suites_ran(self) -> str:
        """Describe which suites the runner was asked to run."""
        if self.suites:
            return ', '.join(self.suites)
        return REPEAT_RUN if self.repeat else ''


def read_token(authfile: Optional[str]) -> str:
    """Return the API token from the environment, or else the given file."""
    token = config.getenv(TOKEN_ENV)
    if token:
        return token
    if authfile:
        try:
            with open(authfile, encoding='utf-8') as f:
                return f.read().strip()
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(f'Cannot read API token from {authfile}: {e}') from e
    return ''


def _optional_dir(value: Optional[str]) -> Optional[str]:
    return os.path.expanduser(value) if value else None


def from_args(args: argparse.Namespace, require_token: bool = True) -> ReporterSettings:
    """Build the settings from the config and the parsed command line.

    Raises ConfigError if a required setting is missing.
    """
    settings = ReporterSettings(
        output_dir=os.path.expanduser(args.output_dir or config.expand('reporter_output_dir')),
        api_token=read_token(args.authfile),
        api_url=args.api_url or config.expand('api_url'),
        project_id=args.project_id or config.get('project_id'),
        app_version=config.get('app_version') or DEFAULT_VERSION,
        enable_flaky=config.getenv_int('ENABLE_FLAKY') or int(config.get('enable_flaky')),
        skip_passed=config.getenv_int('SKIP_PASSED_UPLOADS') == 1,
        upload_artifacts=args.upload_artifacts or bool(config.get('upload_artifacts')),
        screenshot_dir=_optional_dir(args.screenshot_dir or config.expand('screenshot_dir')),
        video_dir=_optional_dir(args.video_dir or config.expand('video_dir')),
        log_file_prefix=config.get('log_file_prefix'),
        log_name_policy=config.get('log_name_policy'),
        write_status_files=bool(config.get('write_status_files')),
        suites=args.suite or [],
        repeat=args.repeat,
    )
    settings.validate(require_token)
    return settings


def start_file_path(output_dir: str) -> str:
    return os.path.join(output_dir, config.get('start_file'))


def write_start_time(output_dir: str, start: datetime.datetime):
    with open(start_file_path(output_dir), 'w', encoding='utf-8') as f:
        f.write(start.isoformat())


def read_start_time(output_dir: str) -> Optional[datetime.datetime]:
    """Return the run start time stored by the prepare step, or None if unavailable."""
    fn = start_file_path(output_dir)
    try:
        with open(fn, encoding='utf-8') as f:
            start = datetime.datetime.fromisoformat(f.read().strip())
        # Naive times are local
        return start if start.tzinfo else start.astimezone()
    except FileNotFoundError:
        logging.info('No start time file %s', fn)
    except (OSError, ValueError) as e:
        logging.warning('Invalid start time file %s: %s', fn, e)
    return None


def iso_utc(timestamp: datetime.datetime) -> str:
    """Format a time like JavaScript's Date.toISOString(): UTC, milliseconds and a Z."""
    utc = timestamp.astimezone(datetime.timezone.utc)
    return utc.strftime('%Y-%m-%dT%H:%M:%S.') + f'{utc.microsecond // 1000:03d}Z'


def run_metadata(settings: ReporterSettings, start: datetime.datetime,
                 end: datetime.datetime) -> RunMetadata:
    """Return the metadata of the run, mostly taken from the CI job's environment."""
    return RunMetadata(
        project_id=settings.project_id,
        uuid=config.getenv('RUN_UUID'),
        group_uuid=config.getenv('GROUP_UUID'),
        main_run=config.getenv_int('MAIN_RUN'),
        title=config.getenv('RUN_TITLE') or iso_utc(start),
        site=config.getenv('SITE'),
        build_url=config.getenv('BUILD_URL'),
        run_date=iso_utc(start),
        duration=int((end - start).total_seconds() * 1000),
        version=(config.getenv('APP_VERSION') or config.getenv('CODE_VERSION')
                 or settings.app_version),
        suites_ran=settings.suites_ran,
        issue_user=config.getenv('ISSUE_USER'),
        issue_summary=config.getenv('ISSUE_SUMMARY'),
        enable_flaky=settings.enable_flaky,
    )
