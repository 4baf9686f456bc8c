"""
notebook_orders.state

Order state store: guarded, transactional status transitions over the mirrored
NotebookOrder / NotebookOwner pair.

Rules
- Both rows are written through one StatusWriteSet inside one transaction.atomic()
  block, so a committed transition always leaves them agreeing on status.
- A guarded transition re-reads the order under select_for_update() and only
  commits if the current status is one of the expected predecessors. Anything
  else is a quiet no-op (returns None/False), never an error.
- DatabaseError surfaces as StoreUnavailable; nothing partial is committed.

========= CHANGE LOG =========
2026-02-01 • ADD: StatusWriteSet + begin/complete/fail transitions.
2026-02-09 • ADD: sweep_stale_generations (watchdog for crashed workers).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Iterable, List, Optional

from django.db import DatabaseError, transaction
from django.utils import timezone

from .exceptions import StoreUnavailable
from .models import TERMINAL_STATUSES, DownloadGrant, NotebookOrder, NotebookOwner, Status

log = logging.getLogger("refillstore")

NON_TERMINAL = tuple(s for s in Status if s not in TERMINAL_STATUSES)

GENERATION_TIMED_OUT = "Generation timed out"


class StatusWriteSet:
    """
    Pending field updates for an owner and (optionally) one of its orders.

    Fields are applied to both rows on save(); callers never save the rows themselves.
    """

    def __init__(self, owner: NotebookOwner, order: Optional[NotebookOrder] = None):
        self.owner = owner
        self.order = order
        self._fields: Dict[str, Any] = {}
        self._owner_only: Dict[str, Any] = {}
        self._order_only: Dict[str, Any] = {}

    def set(self, **fields: Any) -> "StatusWriteSet":
        self._fields.update(fields)
        return self

    def set_owner_only(self, **fields: Any) -> "StatusWriteSet":
        """Owner-specific columns (e.g. processed_event_ids) that have no Order counterpart."""
        self._owner_only.update(fields)
        return self

    def set_order_only(self, **fields: Any) -> "StatusWriteSet":
        self._order_only.update(fields)
        return self

    def set_status(self, status: str, *, now: Optional[datetime] = None, error_message: Optional[str] = None) -> "StatusWriteSet":
        self._fields["status"] = status
        self._fields["status_updated_at"] = now or timezone.now()
        if error_message is not None:
            self._fields["error_message"] = error_message
        return self

    def set_grant(self, grant: DownloadGrant, *, now: Optional[datetime] = None) -> "StatusWriteSet":
        self._fields.update(
            download_url=grant.url,
            download_expires_at=grant.expires_at,
            download_path=grant.path,
            download_updated_at=now or timezone.now(),
        )
        return self

    def clear_owner_grant(self) -> "StatusWriteSet":
        """The owner's grant belongs to its current session; drop it when a new session takes over."""
        self._owner_only.update(
            download_url="",
            download_expires_at=None,
            download_path="",
            download_updated_at=None,
        )
        return self

    def save(self) -> None:
        with transaction.atomic():
            self._apply(self.owner, {**self._fields, **self._owner_only})
            if self.order is not None:
                self._apply(self.order, {**self._fields, **self._order_only})

    @staticmethod
    def _apply(obj, fields: Dict[str, Any]) -> None:
        for name, value in fields.items():
            setattr(obj, name, value)
        if obj.pk is None:
            obj.save()
        else:
            obj.save(update_fields=[*fields.keys(), "updated_at"])


@dataclass(frozen=True)
class GenerationTicket:
    """What the worker needs after winning begin_generation()."""
    session_id: str
    user_id: str
    fiscal_year: str
    calendar_id: str
    buyer_email: str
    storage_alias: str

    @classmethod
    def from_order(cls, order: NotebookOrder) -> "GenerationTicket":
        return cls(
            session_id=order.session_id,
            user_id=order.owner.user_id,
            fiscal_year=(order.fiscal_year or "").strip(),
            calendar_id=(order.calendar_id or "").strip(),
            buyer_email=(order.buyer_email or "").strip(),
            storage_alias=(order.storage_alias or "").strip(),
        )


def guarded_transition(
    session_id: str,
    *,
    expected: Iterable[str],
    target: str,
    error_message: Optional[str] = None,
    grant: Optional[DownloadGrant] = None,
    predicate: Optional[Callable[[NotebookOrder], bool]] = None,
    now: Optional[datetime] = None,
) -> Optional[NotebookOrder]:
    """
    Move an order (and its owner) to `target` iff its locked, freshly read status is in
    `expected` and `predicate` (if given) holds. Returns the updated order, or None.
    """
    expected = tuple(expected)
    now = now or timezone.now()
    try:
        with transaction.atomic():
            order = (
                NotebookOrder.objects.select_for_update()
                .select_related("owner")
                .filter(session_id=session_id)
                .first()
            )
            if order is None:
                log.info("[state] %s -> %s skipped: order %s not found", "/".join(expected), target, session_id)
                return None
            if order.status not in expected or (predicate is not None and not predicate(order)):
                log.info(
                    "[state] %s -> %s skipped: order %s is %s",
                    "/".join(expected),
                    target,
                    session_id,
                    order.status,
                )
                return None

            ws = StatusWriteSet(order.owner, order).set_status(target, now=now, error_message=error_message)
            if grant is not None:
                ws.set_grant(grant, now=now)
            ws.save()
    except DatabaseError as e:
        raise StoreUnavailable(f"State store unavailable: {e}") from e

    log.info("[state] order %s: %s -> %s", session_id, "/".join(expected), target)
    return order


def begin_generation(session_id: str) -> Optional[GenerationTicket]:
    """
    paid_processing -> generating_artifact. Exactly one concurrent caller wins;
    everyone else gets None and must not generate.
    """
    order = guarded_transition(
        session_id,
        expected=(Status.PAID_PROCESSING,),
        target=Status.GENERATING_ARTIFACT,
        error_message="",
    )
    return GenerationTicket.from_order(order) if order is not None else None


def complete_generation(session_id: str, grant: DownloadGrant) -> bool:
    order = guarded_transition(
        session_id,
        expected=(Status.GENERATING_ARTIFACT,),
        target=Status.COMPLETED,
        error_message="",
        grant=grant,
    )
    return order is not None


def fail_generation(session_id: str, message: str) -> bool:
    message = (message or "").strip() or "Generation failed"
    order = guarded_transition(
        session_id,
        expected=NON_TERMINAL,
        target=Status.FAILED,
        error_message=message[:2000],
    )
    return order is not None


def sweep_stale_generations(older_than: timedelta, *, now: Optional[datetime] = None) -> List[str]:
    """
    Fail orders stuck in generating_artifact since before `now - older_than`
    (worker crashed or was killed by its host). Returns the swept session ids.
    """
    now = now or timezone.now()
    cutoff = now - older_than
    candidates = list(
        NotebookOrder.objects.filter(
            status=Status.GENERATING_ARTIFACT,
            status_updated_at__lt=cutoff,
        ).values_list("session_id", flat=True)
    )

    swept: List[str] = []
    for session_id in candidates:
        order = guarded_transition(
            session_id,
            expected=(Status.GENERATING_ARTIFACT,),
            target=Status.FAILED,
            error_message=GENERATION_TIMED_OUT,
            predicate=lambda o: o.status_updated_at < cutoff,
            now=now,
        )
        if order is not None:
            swept.append(session_id)

    if swept:
        log.warning("[state] swept %s stale generation(s): %s", len(swept), ", ".join(swept))
    return swept
