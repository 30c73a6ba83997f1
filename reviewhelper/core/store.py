from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable

logger = logging.getLogger(__name__)


class Tab(str, Enum):
    ORIGINAL = "original"
    EDITED = "edited"


class DiffViewState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    SIDE_BY_SIDE = "side_by_side"
    UNIFIED = "unified"


EDIT_SESSION_FLAGS = (
    "diff_toggles_inserted",
    "edited_tab_listener_attached",
    "metadata_removed",
    "original_tab_listener_attached",
    "edit_listener_attached",
    "save_listener_attached",
)


@dataclass(slots=True, frozen=True)
class SessionState:
    """What the helper has already observed or done since the conversation opened."""

    conversation_open: bool = False
    submit_listener_attached: bool = False
    close_listener_attached: bool = False
    edit_listener_attached: bool = False
    save_listener_attached: bool = False
    original_tab_listener_attached: bool = False
    edited_tab_listener_attached: bool = False
    metadata_removed: bool = False
    diff_toggles_inserted: bool = False
    original_content: str | None = None
    edited_content: str | None = None
    task_id: str | None = None
    operator_name: str | None = None
    active_tab: Tab = Tab.EDITED
    diff_view: DiffViewState = DiffViewState.CLOSED


StateListener = Callable[[SessionState, SessionState], Any]


class SessionStore:
    """Observable container for the session state.

    ``set`` shallow-merges keyword arguments into the current state without
    validating values. Subscribers are called synchronously with the new and
    previous state after every write.
    """

    def __init__(self, initial: SessionState | None = None) -> None:
        self._state = initial or SessionState()
        self._listeners: list[StateListener] = []

    def get(self) -> SessionState:
        return self._state

    def set(self, **partial: Any) -> None:
        previous = self._state
        self._state = replace(previous, **partial)
        self._notify(previous)

    def reset(self) -> None:
        previous = self._state
        self._state = SessionState()
        logger.debug("Session store reset.")
        self._notify(previous)

    def reset_edit_session(self) -> None:
        self.set(**{flag: False for flag in EDIT_SESSION_FLAGS})

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, previous: SessionState) -> None:
        for listener in list(self._listeners):
            listener(self._state, previous)
