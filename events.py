import logging
from contextlib import suppress
from enum import Enum
from typing import Awaitable, Callable, Dict, Generic, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Signal(str, Enum):
    PRODUCTS_CHANGED = "db-products-changed"
    ORDERS_CHANGED = "db-orders-changed"
    USERS_CHANGED = "db-users-changed"


Listener = Callable[[], None]


class ChangeBus:
    """Synchronous publish/subscribe over the three collection signals.

    Publishing carries no payload; listeners are expected to refetch whatever
    they display.
    """

    def __init__(self):
        self._listeners: Dict[Signal, List[Listener]] = {s: [] for s in Signal}

    def subscribe(self, signal: Signal, listener: Listener) -> Callable[[], None]:
        self._listeners[signal].append(listener)
        return lambda: self.unsubscribe(signal, listener)

    def unsubscribe(self, signal: Signal, listener: Listener):
        with suppress(ValueError):
            self._listeners[signal].remove(listener)

    def listener_count(self, signal: Signal) -> int:
        return len(self._listeners[signal])

    def publish(self, signal: Signal):
        for listener in list(self._listeners[signal]):
            try:
                listener()
            except Exception:
                # One broken listener must not stop delivery to the rest
                logger.exception("Listener for %s failed", signal.value)


class LiveCollection(Generic[T]):
    """A cached collection that refetches after its signal fires.

    Subscribed only while shown; a hidden view neither listens nor refreshes.
    """

    def __init__(self, bus: ChangeBus, signal: Signal, fetch: Callable[[], Awaitable[List[T]]]):
        self._bus = bus
        self._signal = signal
        self._fetch = fetch
        self._items: Optional[List[T]] = None
        self._unsubscribe: Optional[Callable[[], None]] = None
        self.stale = True
        self.refresh_count = 0

    @property
    def visible(self) -> bool:
        return self._unsubscribe is not None

    def show(self):
        if self._unsubscribe is None:
            self._unsubscribe = self._bus.subscribe(self._signal, self.invalidate)
            self.stale = True

    def hide(self):
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def invalidate(self):
        self.stale = True

    async def items(self) -> List[T]:
        if self.stale or self._items is None:
            self._items = await self._fetch()
            self.stale = False
            self.refresh_count += 1
        return self._items
