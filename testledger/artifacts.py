"""Find screenshots and videos from a run and work out which suite each belongs to.

Test frameworks don't record which test produced which screenshot or video, so artifacts are
matched to suites by file name: an artifact belongs to the first suite (in report order) whose
spec file base name appears anywhere in the artifact's file name. If no suite matches, the
artifact is attached to the first suite in the report rather than being dropped. This is a
heuristic; if one spec base name is a substring of another (login vs. login-sso), artifacts of
the longer one may be attributed to the shorter one if it comes first.

Artifacts are only ever associated with a suite, never with an individual test.
"""

import logging
import os
from typing import Callable, Optional

from testledger import diagnostics
from testledger import keys
from testledger.artifactdef import SCREENSHOT, VIDEO, Artifact, Association
from testledger.reportdef import RunReport, RunResult, SuiteRecord


MIME_TYPES = {
    '.png': 'image/png',
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.gif': 'image/gif',
    '.webp': 'image/webp',
    '.webm': 'video/webm',
    '.mp4': 'video/mp4',
    '.mov': 'video/quicktime',
}

SCREENSHOT_EXTENSIONS = frozenset(('.png', '.jpg', '.jpeg', '.gif', '.webp'))
VIDEO_EXTENSIONS = frozenset(('.webm', '.mp4', '.mov'))

# Type used if an extension is somehow missing from MIME_TYPES
DEFAULT_MIME_TYPES = {
    SCREENSHOT: 'image/png',
    VIDEO: 'video/webm',
}

# A function that returns the suite with which an artifact file should be associated
MatchStrategy = Callable[[str, list[SuiteRecord], dict[str, object]], Optional[Association]]


def find_files(directory: str, extensions: frozenset[str],
               on_error: Optional[Callable[[str, OSError], None]] = None) -> list[str]:
    """Return all files below directory having one of the given extensions.

    Extensions are compared case-insensitively. Entries are returned in sorted order, depth first.
    Symbolic links to directories are not followed. A directory that can't be read is skipped
    after calling on_error with its path and the exception; without on_error the exception is
    raised.
    """
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        if not on_error:
            raise
        on_error(directory, e)
        return []

    files = []
    for entry in entries:
        if entry.is_dir(follow_symlinks=False):
            files.extend(find_files(entry.path, extensions, on_error))
        elif os.path.splitext(entry.name)[1].lower() in extensions:
            files.append(entry.path)
    return files


def spec_base_name(spec_file: str) -> str:
    """Return the lower case name of the spec file without directory or extension."""
    return os.path.splitext(os.path.basename(spec_file))[0].lower()


def _suite_association(suite: SuiteRecord,
                       suite_map: dict[str, object]) -> Optional[Association]:
    suite_id = suite_map.get(keys.result_suite_key(suite.title, suite.spec_file,
                                                   suite.capabilities))
    if suite_id is not None:
        return Association(suite_id)
    return None


def match_file_to_suite(filename: str, suites: list[SuiteRecord],
                        suite_map: dict[str, object]) -> Optional[Association]:
    """Return the suite with which an artifact file should be associated.

    The first suite whose spec base name is contained in the file name and which the server has
    assigned an ID wins. If there is none, the first suite in the list is used. If there are no
    suites, or the server didn't assign an ID to the chosen one, None is returned.
    """
    lower_filename = filename.lower()
    for suite in suites:
        base = spec_base_name(suite.spec_file)
        if base in lower_filename:
            if association := _suite_association(suite, suite_map):
                return association

    if suites:
        return _suite_association(suites[0], suite_map)
    return None


class ArtifactCollector:
    def __init__(self, sink: Optional[diagnostics.DiagnosticSink] = None,
                 matcher: MatchStrategy = match_file_to_suite):
        self.sink = sink if sink is not None else diagnostics.DiagnosticSink()
        self.matcher = matcher

    def _collect_type(self, artifact_type: str, directory: Optional[str],
                      extensions: frozenset[str], report: RunReport,
                      result: RunResult) -> list[Artifact]:
        if not directory:
            return []
        if not os.path.isdir(directory):
            logging.info('No %s directory %s', artifact_type, directory)
            return []

        def skip_dir(path: str, e: OSError):
            self.sink.add(diagnostics.COLLECT, f'Cannot search {path}: {e}')

        paths = find_files(directory, extensions, skip_dir)
        artifacts = []
        for path in paths:
            filename = os.path.basename(path)
            association = self.matcher(filename, report.suites, result.suites)
            if not association:
                logging.info('No suite found for %s', filename)
                continue
            try:
                size = os.stat(path).st_size
            except OSError as e:
                self.sink.add(diagnostics.COLLECT, f'Cannot read {path}: {e}')
                continue
            ext = os.path.splitext(filename)[1].lower()
            artifacts.append(Artifact(
                type=artifact_type,
                filename=filename,
                path=path,
                mime_type=MIME_TYPES.get(ext, DEFAULT_MIME_TYPES[artifact_type]),
                file_size=size,
                suite_id=association.suite_id,
                test_id=association.test_id,
            ))
        return artifacts

    def collect(self, report: RunReport, result: RunResult,
                screenshot_dir: Optional[str] = None,
                video_dir: Optional[str] = None) -> list[Artifact]:
        """Return all screenshots and videos that could be associated with a suite."""
        if not result.ok:
            logging.info('No run result, so artifacts cannot be associated')
            return []
        artifacts = self._collect_type(SCREENSHOT, screenshot_dir, SCREENSHOT_EXTENSIONS,
                                       report, result)
        artifacts.extend(self._collect_type(VIDEO, video_dir, VIDEO_EXTENSIONS, report, result))
        logging.info('Found %d artifacts', len(artifacts))
        return artifacts
