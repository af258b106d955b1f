"""Fire-and-forget signal telling the presentation layer to refresh cached views."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

LEAVE_VIEWS = ("/dashboard/leave", "/dashboard")


@runtime_checkable
class ViewInvalidator(Protocol):
    """Interface for delivering view invalidation signals."""

    async def invalidate(self, paths: Sequence[str]) -> None:
        """Mark the given view paths as stale."""
        ...


class InMemoryViewInvalidator:
    """Records invalidated paths; stands in for the web layer's cache."""

    def __init__(self) -> None:
        self.invalidated: list[str] = []

    async def invalidate(self, paths: Sequence[str]) -> None:
        self.invalidated.extend(paths)


_view_invalidator: ViewInvalidator = InMemoryViewInvalidator()


def get_view_invalidator() -> ViewInvalidator:
    """Return the active view invalidator."""
    return _view_invalidator


def set_view_invalidator(invalidator: ViewInvalidator) -> None:
    """Override the invalidator (for testing or production wiring)."""
    global _view_invalidator
    _view_invalidator = invalidator


async def notify_views_changed(paths: Sequence[str] = LEAVE_VIEWS) -> None:
    """Signal that views depending on leave data are stale.

    Delivery failures are logged and dropped; the mutation has already committed.
    """
    try:
        await get_view_invalidator().invalidate(paths)
    except Exception:
        logger.warning("View invalidation failed for %s", list(paths), exc_info=True)
