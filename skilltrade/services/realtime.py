"""
Real-time channel hub.

Tracks live WebSocket subscribers by user id and by swap id and fans events
out only to the connections that belong to the affected swap:

1. one Subscriber per connection, each with its own bounded queue
2. publish never blocks: events are handed to the subscriber's event loop
   and dropped when its queue is full
3. connections are pruned from every index on disconnect
"""

import asyncio
import itertools
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Set

from skilltrade.config import settings

logger = logging.getLogger(__name__)


@dataclass
class Subscriber:
    """One live connection."""
    connection_id: str
    user_id: str
    loop: asyncio.AbstractEventLoop
    queue: asyncio.Queue
    connected_at: datetime = field(default_factory=datetime.now)
    swap_ids: Set[int] = field(default_factory=set)
    dropped: int = 0

    def offer(self, envelope: Dict[str, Any]) -> None:
        # Runs on the subscriber's own loop.
        try:
            self.queue.put_nowait(envelope)
        except asyncio.QueueFull:
            self.dropped += 1
            logger.warning(
                "Dropping event for slow subscriber %s (dropped=%d)",
                self.connection_id,
                self.dropped,
            )


class RealtimeHub:
    """
    Subscription registry for the real-time channel.

    Publishing is safe from any thread (sync route handlers run in a
    threadpool); delivery happens on each subscriber's event loop.
    """

    def __init__(self, queue_size: int = 100):
        self.queue_size = queue_size
        # connection_id -> Subscriber
        self._subscribers: Dict[str, Subscriber] = {}
        # user_id -> Set[connection_id]
        self._user_connections: Dict[str, Set[str]] = {}
        # swap_id -> Set[connection_id]
        self._swap_subscribers: Dict[int, Set[str]] = {}
        self._lock = threading.Lock()
        self._counter = itertools.count(1)

    # ---------- registration ----------

    def register(self, user_id: str, loop: Optional[asyncio.AbstractEventLoop] = None) -> Subscriber:
        """Register a connection; call from the connection's event loop."""
        loop = loop or asyncio.get_running_loop()
        with self._lock:
            connection_id = f"{user_id}_{next(self._counter)}"
            subscriber = Subscriber(
                connection_id=connection_id,
                user_id=user_id,
                loop=loop,
                queue=asyncio.Queue(maxsize=self.queue_size),
            )
            self._subscribers[connection_id] = subscriber
            self._user_connections.setdefault(user_id, set()).add(connection_id)

        logger.info("Realtime connected: %s (conn_id: %s)", user_id, connection_id)
        return subscriber

    def unregister(self, connection_id: str) -> None:
        with self._lock:
            subscriber = self._subscribers.pop(connection_id, None)
            if subscriber is None:
                return

            connections = self._user_connections.get(subscriber.user_id)
            if connections is not None:
                connections.discard(connection_id)
                if not connections:
                    del self._user_connections[subscriber.user_id]

            for swap_id in subscriber.swap_ids:
                members = self._swap_subscribers.get(swap_id)
                if members is not None:
                    members.discard(connection_id)
                    if not members:
                        del self._swap_subscribers[swap_id]

        logger.info("Realtime disconnected: %s (conn_id: %s)", subscriber.user_id, connection_id)

    def subscribe_swap(self, connection_id: str, swap_id: int) -> bool:
        """Caller must already have checked that the user is a swap participant."""
        with self._lock:
            subscriber = self._subscribers.get(connection_id)
            if subscriber is None:
                return False
            subscriber.swap_ids.add(swap_id)
            self._swap_subscribers.setdefault(swap_id, set()).add(connection_id)
        logger.debug("Connection %s subscribed to swap %s", connection_id, swap_id)
        return True

    def unsubscribe_swap(self, connection_id: str, swap_id: int) -> None:
        with self._lock:
            subscriber = self._subscribers.get(connection_id)
            if subscriber is not None:
                subscriber.swap_ids.discard(swap_id)
            members = self._swap_subscribers.get(swap_id)
            if members is not None:
                members.discard(connection_id)
                if not members:
                    del self._swap_subscribers[swap_id]

    # ---------- introspection ----------

    def is_subscribed(self, connection_id: str, swap_id: int) -> bool:
        with self._lock:
            return connection_id in self._swap_subscribers.get(swap_id, ())

    def connection_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def swap_subscriber_ids(self, swap_id: int) -> Set[str]:
        with self._lock:
            return set(self._swap_subscribers.get(swap_id, ()))

    # ---------- fan-out ----------

    def _targets(
        self,
        swap_id: Optional[int],
        user_ids: Iterable[str],
        exclude: Optional[str],
    ) -> List[Subscriber]:
        with self._lock:
            connection_ids: Set[str] = set()
            if swap_id is not None:
                connection_ids |= self._swap_subscribers.get(swap_id, set())
            for user_id in user_ids:
                connection_ids |= self._user_connections.get(user_id, set())
            connection_ids.discard(exclude)
            return [self._subscribers[c] for c in connection_ids if c in self._subscribers]

    def publish(
        self,
        envelope: Dict[str, Any],
        *,
        swap_id: Optional[int] = None,
        user_ids: Iterable[str] = (),
        exclude: Optional[str] = None,
    ) -> int:
        """
        Hand ``envelope`` to every subscriber of ``swap_id`` and every
        connection of ``user_ids``. Returns the number of deliveries
        scheduled; never blocks and never raises for a dead subscriber.
        """
        delivered = 0
        for subscriber in self._targets(swap_id, user_ids, exclude):
            try:
                subscriber.loop.call_soon_threadsafe(subscriber.offer, envelope)
                delivered += 1
            except RuntimeError:
                # Event loop already closed: the connection is gone.
                self.unregister(subscriber.connection_id)
        return delivered


hub = RealtimeHub(queue_size=settings.REALTIME_QUEUE_SIZE)
