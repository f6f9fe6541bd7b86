from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Mapping, Protocol, Sequence

from engagement_audit.config import AppConfig
from engagement_audit.pipeline.evaluate import SubmissionVerdict, evaluate_series
from engagement_audit.platforms import Platform
from engagement_audit.preprocess.normalize import normalize_scans

LOGGER = logging.getLogger(__name__)


class MissingSubmissionError(LookupError):
    pass


class ScanRepository(Protocol):
    def load_scans(
        self, submission_id: int
    ) -> tuple[Platform | str, Sequence[Mapping[str, Any]]]:
        """Return the platform and the oldest-first, non-extended scans of a submission.

        Raises MissingSubmissionError for an unknown submission.
        """
        ...


class NotesWriter(Protocol):
    def append_notes(self, submission_id: int, internal_notes: str) -> None: ...


def append_audit_notes(existing_notes: str, verdict: SubmissionVerdict) -> str:
    """Append the verdict's reason lines to a submission's internal notes."""
    if not verdict.botted_reason.strip():
        return existing_notes
    entry = f"shouldReject: {verdict.should_reject}\n{verdict.botted_reason}"
    return f"{existing_notes}\n\n{entry}" if existing_notes else entry


def detect_during_scan(
    submission_id: int,
    repository: ScanRepository,
    notes_writer: NotesWriter,
    *,
    existing_notes: str = "",
    config: AppConfig | None = None,
    evaluated_at: datetime | None = None,
) -> bool | None:
    """Evaluate a stored submission and persist its audit trail.

    Returns the reject decision, or None when there are too few scans to decide.
    """
    platform, records = repository.load_scans(submission_id)
    series = normalize_scans(records)
    verdict = evaluate_series(series, platform, config=config, evaluated_at=evaluated_at)
    if verdict is None:
        LOGGER.info("Submission %s: insufficient scan data", submission_id)
        return None

    notes_writer.append_notes(submission_id, append_audit_notes(existing_notes, verdict))
    return verdict.should_reject
