"""Type definitions of uploadable artifacts."""

from dataclasses import dataclass, field
from typing import Any, NamedTuple, Optional


SCREENSHOT = 'screenshot'
VIDEO = 'video'


class Association(NamedTuple):
    """Server IDs with which an artifact is associated."""

    suite_id: Any
    test_id: Any = None


@dataclass
class Artifact:
    """One screenshot or video file to upload."""

    type: str       # noqa: A003
    filename: str   # base name only
    path: str
    mime_type: str
    file_size: int
    suite_id: Any
    test_id: Any = None

    def descriptor(self) -> dict[str, Any]:
        """Return the description of this artifact sent when requesting an upload URL."""
        return {
            'test_run_suite_test_id': self.test_id,
            'test_run_suite_id': self.suite_id,
            'artifact_type': self.type,
            'filename': self.filename,
            'mime_type': self.mime_type,
            'file_size': self.file_size,
        }


@dataclass
class UploadTarget:
    """A one-time upload location for a single artifact."""

    artifact_id: Any
    presigned_url: str


@dataclass
class UploadResult:
    """The outcome of transferring one artifact."""

    artifact_id: Any
    success: bool
    error: Optional[str] = None


@dataclass
class UploadSummary:
    """The outcome of the whole artifact upload stage."""

    artifacts: int = 0      # number of artifacts offered
    targets: int = 0        # number of upload URLs received
    results: list[UploadResult] = field(default_factory=list)
    confirmed_ids: list[Any] = field(default_factory=list)
    confirmed: bool = False  # whether the ledger accepted the confirmation
    error: Optional[str] = None  # reason the stage ended early, if it did

    @property
    def uploaded(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.success)
