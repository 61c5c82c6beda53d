"""
In-process change feed.

Services publish a ChangeEvent after committing a write to a watched table;
subscribers (view caches) invalidate whatever depends on that table.
"""
import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Callable, Dict, List, Optional, Tuple
from staffdesk.utils.datetime_utils import now_utc

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    action: str  # INSERT, UPDATE, DELETE
    row_id: Optional[int] = None
    scope_id: Optional[int] = None  # e.g. task_id for task_messages


Handler = Callable[[ChangeEvent], None]


class ChangeFeed:
    def __init__(self) -> None:
        self._handlers: Dict[str, List[Handler]] = defaultdict(list)

    def subscribe(self, table: str, handler: Handler) -> Callable[[], None]:
        """Register handler for table; returns an unsubscribe callable."""
        self._handlers[table].append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers[table]:
                self._handlers[table].remove(handler)

        return unsubscribe

    def publish(self, table: str, action: str, row_id: Optional[int] = None, scope_id: Optional[int] = None) -> None:
        event = ChangeEvent(table=table, action=action, row_id=row_id, scope_id=scope_id)
        for handler in list(self._handlers.get(table, [])):
            try:
                handler(event)
            except Exception:
                # A broken subscriber must not fail the write that already committed
                logger.exception("change feed handler failed for %s", event)


class ViewCache:
    """
    TTL cache of rendered views keyed by (view, scope). Entries are dropped
    when the change feed reports a write to one of the view's tables.
    """

    def __init__(self, ttl: timedelta = timedelta(seconds=30)) -> None:
        self.ttl = ttl
        self._entries: Dict[Tuple[str, Any], Dict[str, Any]] = {}

    def get(self, view: str, scope: Any = None) -> Optional[Any]:
        entry = self._entries.get((view, scope))
        if not entry:
            return None
        if now_utc() - entry["ts"] > self.ttl:
            del self._entries[(view, scope)]
            return None
        return entry["data"]

    def set(self, view: str, data: Any, scope: Any = None) -> None:
        self._entries[(view, scope)] = {"data": data, "ts": now_utc()}

    def invalidate(self, view: str, scope: Any = None) -> None:
        if scope is None:
            for key in [k for k in self._entries if k[0] == view]:
                del self._entries[key]
        else:
            self._entries.pop((view, scope), None)

    def clear(self) -> None:
        self._entries.clear()

    def bind(self, feed: ChangeFeed, table: str, view: str) -> Callable[[], None]:
        """Invalidate view (per scope when the event carries one) on every change to table."""
        def on_change(event: ChangeEvent) -> None:
            self.invalidate(view, event.scope_id)

        return feed.subscribe(table, on_change)


change_feed = ChangeFeed()
view_cache = ViewCache()
