# -*- coding: utf-8 -*-
"""
Notebook Orders — Models package entrypoint.
Django imports this package as `notebook_orders.models`.
"""

from .status import Status, TERMINAL_STATUSES
from .base import DownloadGrant, MirroredStatusModel  # abstract + value object
from .owner import NotebookOwner
from .order import NotebookOrder

__all__ = [
    "Status",
    "TERMINAL_STATUSES",
    "DownloadGrant",
    "MirroredStatusModel",
    "NotebookOwner",
    "NotebookOrder",
]
