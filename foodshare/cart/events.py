"""
Basket change notifications.

Each store owns a ChangeFeed. Subscribing immediately replays the latest
event, so a listener registered after a change still sees current state.
"""
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

from foodshare.logging import get_logger

logger = get_logger(__name__)

E = TypeVar("E")


@dataclass(frozen=True)
class CartChanged:
    cart_count: int


@dataclass(frozen=True)
class CollectionChanged:
    collect_count: int


class ChangeFeed(Generic[E]):
    """Observer list holding the most recent event."""

    def __init__(self, initial: Optional[E] = None):
        self._listeners: list[Callable[[E], None]] = []
        self._latest: Optional[E] = initial

    @property
    def latest(self) -> Optional[E]:
        return self._latest

    def subscribe(self, listener: Callable[[E], None]) -> Callable[[], None]:
        """Register listener and deliver the latest event to it. Returns unsubscribe."""
        self._listeners.append(listener)
        if self._latest is not None:
            self._deliver(listener, self._latest)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, event: E) -> None:
        self._latest = event
        for listener in list(self._listeners):
            self._deliver(listener, event)

    @staticmethod
    def _deliver(listener: Callable[[E], None], event: E) -> None:
        try:
            listener(event)
        except Exception:
            logger.error("Change listener failed for %s", type(event).__name__, exc_info=True)
