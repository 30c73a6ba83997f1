from __future__ import annotations

import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

Observer = Callable[[Any], None]


def observer_name(observer: Observer) -> str:
    return getattr(observer, "__name__", repr(observer))


class Dispatcher:
    """Fans every mutation notification out to the registered observers.

    Observers run synchronously, in registration order, with the same
    notification. A failing observer is logged and handed to ``fault_handler``;
    the remaining observers still run.
    """

    def __init__(self, *observers: Observer, fault_handler: Callable[[Observer, Exception], None] | None = None) -> None:
        self._observers: list[Observer] = list(observers)
        self.fault_handler = fault_handler

    @property
    def observers(self) -> tuple[Observer, ...]:
        return tuple(self._observers)

    def add_observer(self, observer: Observer) -> None:
        logger.debug("Adding observer: %s", observer_name(observer))
        self._observers.append(observer)

    def remove_observer(self, observer: Observer) -> None:
        logger.debug("Removing observer: %s", observer_name(observer))
        self._observers = [item for item in self._observers if item != observer]

    def update_observers(self, notification: Any = None) -> None:
        for observer in list(self._observers):
            try:
                observer(notification)
            except Exception as exc:  # noqa: BLE001 - one observer must not stop its siblings.
                logger.exception("Observer %s failed", observer_name(observer))
                if self.fault_handler is not None:
                    self.fault_handler(observer, exc)

    def reset_observers(self) -> None:
        logger.debug("Resetting observers.")
        self._observers = []
