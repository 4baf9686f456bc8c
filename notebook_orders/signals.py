"""
notebook_orders.signals

Out-of-band generation trigger. When NOTEBOOK_GENERATE_ON_COMMIT is on, an order
that is saved into paid_processing gets the artifact worker scheduled for after the
surrounding transaction commits. This is the in-process stand-in for a queue when
NOTEBOOK_DISPATCH_URL is not configured.
"""
from __future__ import annotations

import logging

from django.conf import settings
from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import NotebookOrder, Status

log = logging.getLogger("refillstore")


def _run_worker(session_id: str) -> None:
    from .worker import ArtifactWorker

    outcome = ArtifactWorker().run(session_id)
    log.info("[signals] on-commit generation session=%s result=%s", session_id, outcome.result)


@receiver(post_save, sender=NotebookOrder, dispatch_uid="notebook_orders.generate_on_commit")
def schedule_generation(sender, instance: NotebookOrder, created: bool, update_fields=None, **kwargs):
    if not getattr(settings, "NOTEBOOK_GENERATE_ON_COMMIT", False):
        return
    if instance.status != Status.PAID_PROCESSING:
        return
    if update_fields is not None and "status" not in update_fields:
        return

    session_id = instance.session_id
    log.info("[signals] scheduling generation for session=%s on commit", session_id)
    transaction.on_commit(lambda: _run_worker(session_id))
