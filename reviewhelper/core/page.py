from __future__ import annotations

import logging
from typing import Callable

from selenium.common.exceptions import NoSuchElementException, StaleElementReferenceException

logger = logging.getLogger(__name__)

DETACHED_ERRORS = (StaleElementReferenceException, NoSuchElementException)

TOOLBAR_ID = "review-helper-toolbar"
DIFF_OVERLAY_ID = "review-helper-diff"
DIFF_TOGGLES_ID = "review-helper-diff-toggles"
LISTENER_MARKER = "data-review-helper-listener"

ADD_CLICK_LISTENER_SCRIPT = """
const element = arguments[0];
const key = arguments[1];
if (element.getAttribute(arguments[2]) === key) return false;
element.setAttribute(arguments[2], key);
element.addEventListener('click', () => {
  window.__review_helper_clicks__ = window.__review_helper_clicks__ || [];
  window.__review_helper_clicks__.push(key);
});
return true;
"""

REMOVE_ELEMENT_SCRIPT = "arguments[0].remove();"

CHILD_TEXTS_SCRIPT = "return Array.from(arguments[0].children).map((child) => child.textContent || '');"

INSERT_TOOLBAR_SCRIPT = r"""
if (document.getElementById(arguments[0])) return false;
const push = (key) => {
  window.__review_helper_clicks__ = window.__review_helper_clicks__ || [];
  window.__review_helper_clicks__.push(key);
};
const toolbar = document.createElement('div');
toolbar.id = arguments[0];
toolbar.style.cssText = 'position:fixed;top:0;left:50%;transform:translateX(-50%);display:flex;gap:12px;padding:12px;z-index:800;background:rgba(240,240,255,0.9);border-radius:0 0 8px 8px;';
for (const [key, label] of arguments[1]) {
  const button = document.createElement('button');
  button.type = 'button';
  button.dataset.reviewHelperAction = key;
  button.textContent = label;
  button.addEventListener('click', () => push(key));
  toolbar.appendChild(button);
}
document.body.appendChild(toolbar);
return true;
"""

UPDATE_TOOLBAR_SCRIPT = """
const toolbar = document.getElementById(arguments[0]);
if (!toolbar) return;
toolbar.style.display = arguments[1] ? 'flex' : 'none';
for (const key of arguments[2]) {
  const button = toolbar.querySelector(`[data-review-helper-action="${key}"]`);
  if (button) button.disabled = true;
}
for (const key of arguments[3]) {
  const button = toolbar.querySelector(`[data-review-helper-action="${key}"]`);
  if (button) button.disabled = false;
}
"""

INSERT_DIFF_TOGGLES_SCRIPT = """
const container = arguments[0];
if (container.querySelector('#' + arguments[1])) return;
const wrapper = document.createElement('div');
wrapper.id = arguments[1];
for (const [key, label] of arguments[2]) {
  const button = document.createElement('button');
  button.type = 'button';
  button.textContent = label;
  button.addEventListener('click', () => {
    window.__review_helper_clicks__ = window.__review_helper_clicks__ || [];
    window.__review_helper_clicks__.push(key);
  });
  wrapper.appendChild(button);
}
container.appendChild(wrapper);
"""

SHOW_DIFF_SCRIPT = """
let overlay = document.getElementById(arguments[0]);
if (!overlay) {
  overlay = document.createElement('pre');
  overlay.id = arguments[0];
  overlay.style.cssText = 'position:fixed;inset:80px 10%;overflow:auto;z-index:900;background:#fff;padding:16px;border:1px solid #99c;';
  document.body.appendChild(overlay);
}
overlay.textContent = arguments[1];
"""

REMOVE_DIFF_OVERLAY_SCRIPT = """
const overlay = document.getElementById(arguments[0]);
if (overlay) overlay.remove();
"""

IS_PYTHON_SCRIPT = """
const label = Array.from(document.querySelectorAll("span")).find(
  (span) => (span.textContent || "").trim() === "Programming Language"
);
const inSpan = Boolean(label && label.parentElement &&
  ((label.parentElement.textContent || "").split(":")[1] || "").trim() === "Python");
const inButton = Array.from(document.querySelectorAll("button")).some(
  (button) => (button.textContent || "").includes("Python")
);
return inSpan || inButton;
"""

WRITE_CLIPBOARD_SCRIPT = """
if (navigator.clipboard) {
  navigator.clipboard.writeText(arguments[0]).catch(() => {});
}
"""

TOOLBAR_BUTTONS = [
    ("toolbar:check_response", "Check Response"),
    ("toolbar:view_diff", "View Diff"),
    ("toolbar:copy_edited", "Copy Edited Code"),
    ("toolbar:copy_original", "Copy Original Code"),
    ("toolbar:copy_task_id", "Copy Task ID"),
    ("toolbar:copy_email", "Copy Email"),
    ("toolbar:copy_prompt", "Copy Prompt"),
]

DIFF_TOGGLES = [
    ("diff_toggle:side_by_side", "Side by side"),
    ("diff_toggle:unified", "Unified"),
]


class HostPage:
    """DOM side effects against the host page, plus the click bridge.

    Browser listeners push a key into ``window.__review_helper_clicks__``;
    ``dispatch_clicks`` runs the Python callback registered for each key.

    Element effects report ``False`` when the host re-rendered the element
    between lookup and use, so callers can treat it as not found and retry on
    the next notification.
    """

    def __init__(self, driver) -> None:
        self.driver = driver
        self._click_handlers: dict[str, Callable[[], None]] = {}

    def register_click_handler(self, key: str, callback: Callable[[], None]) -> None:
        self._click_handlers[key] = callback

    def add_click_listener(self, element, key: str, callback: Callable[[], None]) -> bool:
        try:
            added = self.driver.execute_script(ADD_CLICK_LISTENER_SCRIPT, element, key, LISTENER_MARKER)
        except DETACHED_ERRORS:
            logger.debug("Element for %s went stale before its listener was added.", key)
            return False
        if not added:
            logger.debug("Element for %s already carries a listener.", key)
        self.register_click_handler(key, callback)
        return True

    def dispatch_clicks(self, keys: list[str]) -> None:
        for key in keys:
            handler = self._click_handlers.get(key)
            if handler is None:
                logger.debug("No handler for click %s", key)
                continue
            handler()

    def text_content(self, element) -> str | None:
        try:
            return element.get_attribute("textContent")
        except DETACHED_ERRORS:
            return None

    def child_texts(self, element) -> list[str]:
        try:
            return list(self.driver.execute_script(CHILD_TEXTS_SCRIPT, element) or [])
        except DETACHED_ERRORS:
            return []

    def remove(self, element) -> bool:
        try:
            self.driver.execute_script(REMOVE_ELEMENT_SCRIPT, element)
        except DETACHED_ERRORS:
            return False
        return True

    def insert_toolbar(self) -> None:
        if self.driver.execute_script(INSERT_TOOLBAR_SCRIPT, TOOLBAR_ID, TOOLBAR_BUTTONS):
            logger.debug("Toolbar inserted.")

    def update_toolbar(self, visible: bool, disabled: list[str], enabled: list[str]) -> None:
        self.driver.execute_script(UPDATE_TOOLBAR_SCRIPT, TOOLBAR_ID, visible, disabled, enabled)

    def insert_diff_toggles(self, container) -> bool:
        try:
            self.driver.execute_script(INSERT_DIFF_TOGGLES_SCRIPT, container, DIFF_TOGGLES_ID, DIFF_TOGGLES)
        except DETACHED_ERRORS:
            return False
        return True

    def show_diff(self, text: str) -> None:
        self.driver.execute_script(SHOW_DIFF_SCRIPT, DIFF_OVERLAY_ID, text)

    def remove_diff_overlay(self) -> None:
        self.driver.execute_script(REMOVE_DIFF_OVERLAY_SCRIPT, DIFF_OVERLAY_ID)

    def write_clipboard(self, text: str) -> None:
        self.driver.execute_script(WRITE_CLIPBOARD_SCRIPT, text)

    def is_python(self) -> bool:
        return bool(self.driver.execute_script(IS_PYTHON_SCRIPT))

    @property
    def page_source(self) -> str:
        return self.driver.page_source
