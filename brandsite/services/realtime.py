"""In-process change notifications for content tables.

Every committed transaction on a gateway session is one batch. The tables it
touched, and how, are collected during flush and published after commit.
Subscribers get a bare ``on_change()`` call and are expected to re-fetch.
"""

import logging
from typing import Callable, Dict, Iterable, Mapping, Optional, Set

from sqlalchemy import event
from sqlalchemy.orm import object_session

from brandsite.database import Base, ContentSession

logger = logging.getLogger(__name__)

EVENTS = ("insert", "update", "delete")
ANY_EVENT = "*"

Changes = Mapping[str, Set[str]]  # table name -> events seen in the batch


class Subscription:
    """Handle returned by ChangeFeed.subscribe. Call release() to stop notifications."""

    def __init__(
        self,
        feed: "ChangeFeed",
        channel_id: str,
        tables: frozenset,
        on_change: Callable[[], None],
        event: str,
    ):
        self.channel_id = channel_id
        self.tables = tables
        self.event = event
        self._on_change = on_change
        self._feed: Optional[ChangeFeed] = feed

    @property
    def active(self) -> bool:
        return self._feed is not None

    def matches(self, changes: Changes) -> bool:
        for table in self.tables:
            events = changes.get(table)
            if events and (self.event == ANY_EVENT or self.event in events):
                return True
        return False

    def notify(self) -> None:
        self._on_change()

    def release(self) -> None:
        """Tear down the subscription. Safe to call more than once."""
        if self._feed is not None:
            self._feed._remove(self)
            self._feed = None

    def __repr__(self) -> str:
        return f"Subscription({self.channel_id!r}, tables={sorted(self.tables)}, event={self.event!r})"


class ChangeFeed:
    """Registry of active subscriptions keyed by channel id."""

    def __init__(self):
        self._subscriptions: Dict[str, Subscription] = {}

    def subscribe(
        self,
        channel_id: str,
        table_names: Iterable[str],
        on_change: Callable[[], None],
        event: str = ANY_EVENT,
    ) -> Subscription:
        """
        Watch `table_names` and call `on_change()` once per matching batch.

        Raises:
            ValueError: channel id already active, no tables, or unknown event.
        """
        tables = frozenset(table_names)
        if not tables:
            raise ValueError("At least one table name is required")
        if event != ANY_EVENT and event not in EVENTS:
            raise ValueError(f"Unknown event '{event}'")
        if channel_id in self._subscriptions:
            raise ValueError(f"Channel '{channel_id}' is already subscribed")

        subscription = Subscription(self, channel_id, tables, on_change, event)
        self._subscriptions[channel_id] = subscription
        logger.debug(f"Subscribed {subscription!r}")
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        if self._subscriptions.get(subscription.channel_id) is subscription:
            del self._subscriptions[subscription.channel_id]
            logger.debug(f"Released channel {subscription.channel_id!r}")

    @property
    def channels(self) -> Set[str]:
        return set(self._subscriptions)

    def publish(self, changes: Changes) -> int:
        """
        Notify every subscription matching `changes`.

        Returns:
            int: Number of subscriptions notified.
        """
        notified = 0
        # Callbacks may release their own subscription
        for subscription in list(self._subscriptions.values()):
            if not subscription.active or not subscription.matches(changes):
                continue
            try:
                subscription.notify()
                notified += 1
            except Exception as e:
                logger.error(f"Change callback for channel {subscription.channel_id!r} failed: {e}")
        return notified

    def close(self) -> None:
        """Release every active subscription."""
        for subscription in list(self._subscriptions.values()):
            subscription.release()


def _row_listener(kind: str):
    def listener(mapper, connection, target):
        session = object_session(target)
        if session is None or session.info.get("change_feed") is None:
            return
        # after_update also fires for rows whose only change was a collection
        if kind == "update" and not session.is_modified(target, include_collections=False):
            return
        pending = session.info.setdefault("pending_changes", {})
        pending.setdefault(mapper.local_table.name, set()).add(kind)
    return listener


# Row-level mapper events also see orphans removed by delete-orphan cascades
for _kind in EVENTS:
    event.listen(Base, f"after_{_kind}", _row_listener(_kind), propagate=True)


@event.listens_for(ContentSession, "after_commit")
def _publish_changes(session):
    feed = session.info.get("change_feed")
    changes = session.info.pop("pending_changes", None)
    if feed is not None and changes:
        feed.publish(changes)


@event.listens_for(ContentSession, "after_rollback")
def _discard_changes(session):
    session.info.pop("pending_changes", None)
