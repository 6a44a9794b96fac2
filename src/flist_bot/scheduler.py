"""Schedule F-List ticket renewal and kink list refreshes."""

from __future__ import annotations

import asyncio
import logging
from typing import Tuple

from .clients.flist import FListClient
from .maintenance import shutdown as _shutdown, startup as _startup

logger = logging.getLogger(__name__)

_ticket_task: asyncio.Task | None = None
_catalog_task: asyncio.Task | None = None


def _running(task: asyncio.Task | None) -> bool:
    return task is not None and not task.done()


async def start(
    flist: FListClient, ticket_interval: float, catalog_interval: float
) -> Tuple[asyncio.Task | None, asyncio.Task | None]:
    """Renew the ticket and load the kink list, then keep both fresh.

    Jobs already running (e.g. after a gateway reconnect) are left alone.
    A ``catalog_interval`` of 0 loads the kink list once and never again.
    Returns ``(ticket_task, catalog_task)``.
    """
    global _ticket_task, _catalog_task

    logger.info(
        "Starting F-List maintenance (ticket every %ss, kink list every %ss)",
        ticket_interval,
        catalog_interval,
    )
    if not _running(_ticket_task):
        _ticket_task = await _startup(flist.renew_ticket, ticket_interval, name="ticket renewal")

    if not _running(_catalog_task):
        _catalog_task = await _startup(flist.refresh_catalog, catalog_interval, name="kink list refresh")

    return _ticket_task, _catalog_task


async def stop() -> None:
    """Cancel scheduled jobs if running."""
    global _ticket_task, _catalog_task

    await _shutdown(_ticket_task)
    await _shutdown(_catalog_task)
    _ticket_task = None
    _catalog_task = None
