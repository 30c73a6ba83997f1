from __future__ import annotations

import logging

from reviewhelper.core.signals import SignalRegistry
from reviewhelper.core.store import SessionStore

logger = logging.getLogger(__name__)


class ConversationLifecycle:
    """The only place the conversation moves between CLOSED and OPEN."""

    def __init__(self, store: SessionStore, signals: SignalRegistry, audit_logger=None) -> None:
        self.store = store
        self.signals = signals
        self.audit_logger = audit_logger

    @property
    def is_open(self) -> bool:
        return self.store.get().conversation_open

    def open(self) -> bool:
        if self.is_open:
            return False
        logger.info("New conversation detected.")
        self.store.set(conversation_open=True)
        self._record("conversation_opened")
        return True

    def close(self, reason: str = "indicator_removed") -> bool:
        if not self.is_open:
            return False
        logger.info("Conversation closed (%s).", reason)
        self.signals.rotate()
        self.store.reset()
        self._record("conversation_closed", reason)
        return True

    def _record(self, event: str, detail: str = "") -> None:
        if self.audit_logger is not None:
            self.audit_logger.write(event, detail=detail)
