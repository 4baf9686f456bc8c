"""
notebook_orders.worker

Artifact worker: turns one paid order into a PDF refill and a download grant.

Flow
  1) begin_generation() guard (paid_processing -> generating_artifact). Losing the
     guard means someone else is on it, or it is already done: skip, touch nothing.
  2) validate fiscal year / calendar id / storage target
  3) fiscal-year dates -> calendar source -> described days
  4) render (cover + one page per week)
  5) upload to system-notebook/<owner>/<fiscal_year>-<calendar_id>-<epoch_ms>.pdf
  6) signed download URL (NOTEBOOK_DOWNLOAD_TTL_SECONDS)
  7) complete_generation()

Any error in 2..6 ends the order in `failed` with the error message on both
records. An order is never left in generating_artifact by this worker.

Triggers: POST /api/jobs/generate/, the post_save hook (opt-in), the
process_notebook_orders command and the debug trigger all call run().

========= CHANGE LOG =========
2026-02-02 • ADD: ArtifactWorker with injectable source/renderer/blob store/clock.
2026-02-09 • CHANGE: failures carry the exception message instead of a generic string.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional

from django.conf import settings
from django.utils import timezone

from academic_calendars.services.descriptions import build_notebook_days
from academic_calendars.services.fiscal_year import fiscal_year_dates, parse_fiscal_year
from academic_calendars.services.sources import CalendarSource, DatabaseCalendarSource

from .exceptions import GenerationFailed
from .services.renderer import NotebookRenderer
from .state import begin_generation, complete_generation, fail_generation
from .storage import BlobStore, artifact_path

log = logging.getLogger("refillstore")

SKIPPED = "skipped"
COMPLETED = "completed"
FAILED = "failed"


@dataclass(frozen=True)
class WorkerOutcome:
    session_id: str
    result: str
    error_message: str = ""
    download_url: Optional[str] = None
    page_count: int = 0

    def as_dict(self) -> Dict[str, Any]:
        return {
            "sessionId": self.session_id,
            "result": self.result,
            "errorMessage": self.error_message or None,
            "downloadUrl": self.download_url,
            "pageCount": self.page_count,
        }


def _download_ttl() -> timedelta:
    return timedelta(seconds=int(getattr(settings, "NOTEBOOK_DOWNLOAD_TTL_SECONDS", 7 * 24 * 3600)))


class ArtifactWorker:
    def __init__(
        self,
        source_factory: Optional[Callable[..., CalendarSource]] = None,
        renderer: Optional[NotebookRenderer] = None,
        blob_store_factory: Optional[Callable[[str], BlobStore]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.source_factory = source_factory or DatabaseCalendarSource.load
        self.renderer = renderer or NotebookRenderer.from_settings()
        self.blob_store_factory = blob_store_factory or BlobStore
        self.clock = clock or timezone.now

    def run(self, session_id: str) -> WorkerOutcome:
        session_id = (session_id or "").strip()
        ticket = begin_generation(session_id)
        if ticket is None:
            log.info("[worker] session=%s not eligible for generation; skipped", session_id)
            return WorkerOutcome(session_id=session_id, result=SKIPPED)

        log.info(
            "[worker] session=%s owner=%s fiscal_year=%s calendar=%s: generating",
            session_id,
            ticket.user_id,
            ticket.fiscal_year,
            ticket.calendar_id,
        )

        try:
            try:
                year = parse_fiscal_year(ticket.fiscal_year)
            except ValueError:
                raise GenerationFailed(f"Invalid fiscalYear: {ticket.fiscal_year!r}") from None
            if not ticket.calendar_id:
                raise GenerationFailed("Missing calendarId")
            store = self.blob_store_factory(ticket.storage_alias)

            source = self.source_factory(
                fiscal_year=ticket.fiscal_year,
                calendar_id=ticket.calendar_id,
                dates=fiscal_year_dates(year),
            )
            days = build_notebook_days(year, source)
            rendered = self.renderer.render(
                days,
                watermark=ticket.buyer_email,
                fiscal_year=ticket.fiscal_year,
                calendar_id=ticket.calendar_id,
            )

            now = self.clock()
            path = artifact_path(ticket.user_id, ticket.fiscal_year, ticket.calendar_id, int(now.timestamp() * 1000))
            saved_path = store.put(path, rendered.pdf)
            grant = store.signed_url(saved_path, _download_ttl(), now=now)
        except Exception as e:
            message = str(e) or e.__class__.__name__
            log.exception("[worker] session=%s generation failed: %s", session_id, message)
            fail_generation(session_id, message)
            return WorkerOutcome(session_id=session_id, result=FAILED, error_message=message)

        if not complete_generation(session_id, grant):
            # the watchdog got there first; the artifact stays in storage unreferenced
            log.warning("[worker] session=%s left generating_artifact before completion", session_id)
            return WorkerOutcome(session_id=session_id, result=SKIPPED, error_message="Order no longer generating")

        log.info("[worker] session=%s completed pages=%s path=%s", session_id, rendered.page_count, saved_path)
        return WorkerOutcome(
            session_id=session_id,
            result=COMPLETED,
            download_url=grant.url,
            page_count=rendered.page_count,
        )
