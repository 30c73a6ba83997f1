from __future__ import annotations

import logging

from reviewhelper.core.lifecycle import ConversationLifecycle
from reviewhelper.core.store import DiffViewState, SessionStore, Tab

logger = logging.getLogger(__name__)


class Reconcilers:
    """One observer per host page feature.

    Every observer ignores the notification it is given and re-queries the
    live page, because some host insertions never show up as mutations.
    Listener observers follow the same shape: return if the store says the
    listener is attached, return if the element is absent, attach once, then
    set the flag. An element that goes stale before it is used counts as absent.
    """

    def __init__(self, store: SessionStore, locators, page, lifecycle: ConversationLifecycle) -> None:
        self.store = store
        self.locators = locators
        self.page = page
        self.lifecycle = lifecycle

    def observers(self) -> list:
        return [
            self.observe_snooze_button,
            self.observe_submit_button,
            self.observe_close_button,
            self.observe_edit_button,
            self.observe_save_button,
            self.observe_original_tab,
            self.observe_edited_tab,
            self.observe_original_content,
            self.observe_edited_content,
            self.observe_metadata_section,
            self.observe_tab_container,
            self.observe_task_id,
            self.observe_operator_name,
        ]

    def observe_snooze_button(self, notification=None) -> None:
        conversation_open = self.store.get().conversation_open
        snooze_button = self.locators.snooze_button()

        if snooze_button is None and conversation_open:
            self.lifecycle.close("indicator_removed")
            return

        if snooze_button is not None and not conversation_open:
            # the toolbar must exist before the open write renders its button state
            self.page.insert_toolbar()
            self.lifecycle.open()

    def observe_submit_button(self, notification=None) -> None:
        if self.store.get().submit_listener_attached:
            return
        submit_button = self.locators.submit_button()
        if submit_button is None:
            return

        # the conversation closes after a submit, so the flag is cleared by the full reset
        if not self.page.add_click_listener(submit_button, "submit_button", self._on_submit_clicked):
            return
        self.store.set(submit_listener_attached=True)
        logger.debug("Conversation submit button listener added.")

    def observe_close_button(self, notification=None) -> None:
        if self.store.get().close_listener_attached:
            return
        close_button = self.locators.window_close_button()
        if close_button is None:
            return

        if not self.page.add_click_listener(close_button, "window_close_button", self._on_close_clicked):
            return
        self.store.set(close_listener_attached=True)
        logger.debug("Window close button listener added.")

    def observe_edit_button(self, notification=None) -> None:
        if self.store.get().edit_listener_attached:
            return
        edit_button = self.locators.edit_button()
        if edit_button is None:
            return

        if not self.page.add_click_listener(edit_button, "edit_button", self._on_edit_clicked):
            return
        self.store.set(edit_listener_attached=True)
        logger.debug("Response edit button listener added.")

    def observe_save_button(self, notification=None) -> None:
        if self.store.get().save_listener_attached:
            return
        save_button = self.locators.save_button()
        if save_button is None:
            return

        if not self.page.add_click_listener(save_button, "save_button", self._on_save_clicked):
            return
        self.store.set(save_listener_attached=True)
        logger.debug("Save button listener added.")

    def observe_original_tab(self, notification=None) -> None:
        if self.store.get().original_tab_listener_attached:
            return
        tab = self.locators.original_tab()
        if tab is None:
            return

        if not self.page.add_click_listener(tab, "original_tab", lambda: self._on_tab_clicked(Tab.ORIGINAL)):
            return
        self.store.set(original_tab_listener_attached=True)
        logger.debug("Original tab listener added.")

    def observe_edited_tab(self, notification=None) -> None:
        if self.store.get().edited_tab_listener_attached:
            return
        tab = self.locators.edited_tab()
        if tab is None:
            return

        if not self.page.add_click_listener(tab, "edited_tab", lambda: self._on_tab_clicked(Tab.EDITED)):
            return
        self.store.set(edited_tab_listener_attached=True)
        logger.debug("Edited tab listener added.")

    def observe_original_content(self, notification=None) -> None:
        if self.store.get().original_content:
            return
        element = self.locators.original_tab_content()
        if element is None:
            return
        text = self.page.text_content(element)
        if not text:
            return

        self.store.set(original_content=text)
        logger.debug("Original content captured (%d chars).", len(text))

    def observe_edited_content(self, notification=None) -> None:
        if self.store.get().edited_content:
            return
        element = self.locators.response()
        if element is None:
            return
        text = self.page.text_content(element)
        if not text:
            return

        # the host prefixes the response with its index digit
        edited_content = text[1:]
        if not edited_content:
            return
        self.store.set(edited_content=edited_content)
        logger.debug("Edited content captured (%d chars).", len(edited_content))

    def observe_metadata_section(self, notification=None) -> None:
        if self.store.get().metadata_removed:
            return
        element = self.locators.metadata_section()
        if element is None:
            return

        if not self.page.remove(element):
            return
        self.store.set(metadata_removed=True)
        logger.debug("Metadata section removed.")

    def observe_tab_container(self, notification=None) -> None:
        state = self.store.get()
        if state.diff_toggles_inserted or not state.original_content:
            return
        container = self.locators.tab_container()
        if container is None:
            return

        if not self.page.insert_diff_toggles(container):
            return
        self.store.set(diff_toggles_inserted=True)
        logger.debug("Diff toggles inserted.")

    def observe_task_id(self, notification=None) -> None:
        state = self.store.get()
        if not state.conversation_open or state.task_id:
            return
        element = self.locators.task_id()
        if element is None:
            return
        text = (self.page.text_content(element) or "").strip()
        if not text:
            return

        self.store.set(task_id=text)
        logger.debug("Task id captured: %s", text)

    def observe_operator_name(self, notification=None) -> None:
        state = self.store.get()
        if not state.conversation_open:
            return
        element = self.locators.operator_name()
        if element is None:
            return
        text = (self.page.text_content(element) or "").strip()
        if not text or text == state.operator_name:
            return

        self.store.set(operator_name=text)

    def _on_submit_clicked(self) -> None:
        logger.info("Submit button clicked.")
        self.lifecycle.close("submit_clicked")

    def _on_close_clicked(self) -> None:
        logger.info("Window close button clicked.")
        self.lifecycle.close("window_closed")

    def _on_edit_clicked(self) -> None:
        # the edit view mounts a new subtree, so its listeners have to be attached again
        logger.info("Response edit button clicked.")
        self.store.reset_edit_session()

    def _on_save_clicked(self) -> None:
        # tab flags stay set: the tabs re-render well after the click and would be
        # re-queried too early
        logger.info("Save button clicked.")
        self.store.set(diff_view=DiffViewState.CLOSED, save_listener_attached=False)

    def _on_tab_clicked(self, tab: Tab) -> None:
        self.store.set(active_tab=tab)
        self.page.remove_diff_overlay()
