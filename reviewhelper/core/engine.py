from __future__ import annotations

import logging
import time

from selenium.common.exceptions import WebDriverException

from reviewhelper.config.schema import HelperConfig
from reviewhelper.core.actions import ToolbarActions
from reviewhelper.core.dispatcher import Dispatcher, observer_name
from reviewhelper.core.dom_monitor import DomMonitor, MutationNotification
from reviewhelper.core.lifecycle import ConversationLifecycle
from reviewhelper.core.locators import Locators
from reviewhelper.core.page import HostPage
from reviewhelper.core.reconcilers import Reconcilers
from reviewhelper.core.signals import SignalRegistry
from reviewhelper.core.store import DiffViewState, SessionState, SessionStore
from reviewhelper.logging.artifacts import ArtifactManager
from reviewhelper.logging.audit import SessionAuditLogger

logger = logging.getLogger(__name__)

ORIGINAL_DEPENDENT_ACTIONS = ["toolbar:view_diff", "toolbar:copy_original"]


class ReviewHelper:
    """Wires the store, observers and page together and pumps notifications.

    Each ``pump`` drains the browser click buffer first, then dispatches every
    buffered mutation once. When the buffer is empty a poll notification is
    dispatched instead, since some host insertions never produce a mutation.
    A pump that cannot reach the buffers dispatches nothing and returns 0.
    """

    def __init__(
        self,
        config: HelperConfig,
        driver=None,
        *,
        page=None,
        locators=None,
        dom_monitor=None,
        store: SessionStore | None = None,
        audit_logger: SessionAuditLogger | None = None,
        artifact_manager: ArtifactManager | None = None,
    ) -> None:
        self.config = config
        self.driver = driver
        self.store = store or SessionStore()
        self.signals = SignalRegistry()
        self.page = page or HostPage(driver)
        self.locators = locators or Locators(driver, config)
        self.dom_monitor = dom_monitor or DomMonitor()
        self.audit_logger = audit_logger
        self.artifact_manager = artifact_manager
        self.lifecycle = ConversationLifecycle(self.store, self.signals, audit_logger)
        self.reconcilers = Reconcilers(self.store, self.locators, self.page, self.lifecycle)
        self.dispatcher = Dispatcher(*self.reconcilers.observers(), fault_handler=self._on_observer_fault)
        self.actions = ToolbarActions(self.store, self.page, self.locators, self.signals, config.wait)
        self._register_toolbar_handlers()
        self.store.subscribe(self._render_toolbar)

    def open(self, url: str | None = None) -> None:
        self.driver.get(url or self.config.environment.base_url)
        self.dom_monitor.install(self.driver)

    def pump(self) -> int:
        try:
            self.dom_monitor.install(self.driver)
            events = self.dom_monitor.flush_events(self.driver)
            clicks = self.dom_monitor.flush_clicks(self.driver)
        except WebDriverException as exc:
            # the host is navigating or re-rendering its frame, try again next round
            logger.debug("Notification buffers unavailable: %s", exc.msg)
            return 0

        for key in clicks:
            self._handle_click(key)

        notifications = events or [MutationNotification()]
        for notification in notifications:
            self.dispatcher.update_observers(notification)
        return len(notifications)

    def run(self, duration: float | None = None, stop=None) -> SessionState:
        interval = self.config.environment.poll_interval_seconds
        deadline = None if duration is None else time.monotonic() + duration
        while True:
            if stop is not None and stop():
                break
            if deadline is not None and time.monotonic() >= deadline:
                break
            self.pump()
            time.sleep(interval)
        return self.store.get()

    def _handle_click(self, key: str) -> None:
        try:
            self.page.dispatch_clicks([key])
        except Exception:  # noqa: BLE001 - a failing click handler must not stop the pump.
            logger.exception("Click handler for %s failed", key)

    def _register_toolbar_handlers(self) -> None:
        handlers = {
            "toolbar:check_response": self.actions.validate_response,
            "toolbar:view_diff": self.actions.toggle_diff_view,
            "toolbar:copy_edited": self.actions.copy_edited_code,
            "toolbar:copy_original": self.actions.copy_original_code,
            "toolbar:copy_task_id": self.actions.copy_task_id,
            "toolbar:copy_email": self.actions.copy_operator_email,
            "toolbar:copy_prompt": self.actions.copy_prompt,
            "diff_toggle:side_by_side": lambda: self.actions.show_diff(DiffViewState.SIDE_BY_SIDE),
            "diff_toggle:unified": lambda: self.actions.show_diff(DiffViewState.UNIFIED),
        }
        for key, handler in handlers.items():
            self.page.register_click_handler(key, handler)

    def _render_toolbar(self, state: SessionState, previous: SessionState) -> None:
        has_original = bool(state.original_content)
        if state.conversation_open == previous.conversation_open and has_original == bool(previous.original_content):
            return
        disabled = [] if has_original else ORIGINAL_DEPENDENT_ACTIONS
        enabled = ORIGINAL_DEPENDENT_ACTIONS if has_original else []
        try:
            self.page.update_toolbar(state.conversation_open, disabled, enabled)
        except WebDriverException as exc:
            logger.debug("Toolbar not updated: %s", exc)

    def _on_observer_fault(self, observer, exc: Exception) -> None:
        name = observer_name(observer)
        if self.audit_logger is not None:
            self.audit_logger.write("observer_failed", observer=name, detail=repr(exc))
        if self.artifact_manager is None:
            return
        try:
            path = self.artifact_manager.write_dom_snapshot(name, self.page.page_source)
        except WebDriverException as snapshot_error:
            logger.warning("Could not capture DOM snapshot for %s: %s", name, snapshot_error)
            return
        logger.debug("DOM snapshot for %s written to %s", name, path)
