# -*- coding: utf-8 -*-
"""
CHANGE LOG
- 2026-02-06: Initial creation of management command `process_notebook_orders`.
  Out-of-band trigger for orders sitting in paid_processing (no dispatch URL
  configured, or dispatch failed). Meant for cron / a scheduled task.

- 2026-02-09: Add stale-generation sweep before processing.
  * Orders stuck in generating_artifact longer than
    NOTEBOOK_GENERATION_TIMEOUT_SECONDS are failed with "Generation timed out".
"""

from __future__ import annotations

from datetime import timedelta

from django.conf import settings
from django.core.management.base import BaseCommand, CommandParser

from notebook_orders.models import NotebookOrder, Status
from notebook_orders.state import sweep_stale_generations
from notebook_orders.worker import COMPLETED, FAILED, SKIPPED, ArtifactWorker


class Command(BaseCommand):
    help = "Generates refills for paid_processing orders and sweeps stale generations."

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument(
            "--session",
            action="append",
            default=[],
            help="Process only this checkout session id (repeatable).",
        )
        parser.add_argument(
            "--limit",
            type=int,
            default=20,
            help="Max orders to process in one run (default: 20).",
        )
        parser.add_argument(
            "--no-sweep",
            action="store_true",
            help="Skip the stale generating_artifact sweep.",
        )

    def handle(self, *args, **opts) -> None:
        if not opts.get("no_sweep"):
            timeout = int(getattr(settings, "NOTEBOOK_GENERATION_TIMEOUT_SECONDS", 300))
            swept = sweep_stale_generations(timedelta(seconds=timeout))
            self.stdout.write(self.style.NOTICE(f"[orders] swept={len(swept)} timeout={timeout}s"))

        session_ids = [s.strip() for s in opts.get("session") or [] if s.strip()]
        if not session_ids:
            limit = max(0, int(opts.get("limit") or 0))
            session_ids = list(
                NotebookOrder.objects.filter(status=Status.PAID_PROCESSING)
                .order_by("status_updated_at")
                .values_list("session_id", flat=True)[:limit]
            )

        worker = ArtifactWorker()
        counts = {COMPLETED: 0, FAILED: 0, SKIPPED: 0}
        for session_id in session_ids:
            outcome = worker.run(session_id)
            counts[outcome.result] = counts.get(outcome.result, 0) + 1
            line = f"[orders] {session_id}: {outcome.result}"
            if outcome.result == FAILED:
                self.stdout.write(self.style.ERROR(f"{line} ({outcome.error_message})"))
            elif outcome.result == COMPLETED:
                self.stdout.write(self.style.SUCCESS(line))
            else:
                self.stdout.write(line)

        self.stdout.write(
            self.style.NOTICE(
                f"[orders] done completed={counts[COMPLETED]} failed={counts[FAILED]} skipped={counts[SKIPPED]}"
            )
        )
