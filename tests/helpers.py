from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Iterator

import pytest
from selenium.common.exceptions import StaleElementReferenceException, WebDriverException

from reviewhelper.core.browser import BrowserSession
from reviewhelper.core.dom_monitor import MutationNotification
from reviewhelper.core.engine import ReviewHelper
from reviewhelper.core.page import (
    ADD_CLICK_LISTENER_SCRIPT,
    INSERT_TOOLBAR_SCRIPT,
    TOOLBAR_BUTTONS,
    UPDATE_TOOLBAR_SCRIPT,
)


@dataclass(eq=False)
class FakeElement:
    text: str | None = ""
    listeners: list[str] = field(default_factory=list)
    children: list[str] = field(default_factory=list)
    removed: bool = False
    stale: bool = False
    listener_marker: str | None = None


class FakeLocators:
    """Locator stand-in: each key maps to an element, ``None``, or an exception to raise."""

    def __init__(self, **elements) -> None:
        self.elements = dict(elements)
        self.calls: dict[str, int] = {}

    def set(self, key: str, value) -> None:
        self.elements[key] = value

    def __getattr__(self, key: str) -> Callable[[], object]:
        if key.startswith("_") or key in {"elements", "calls"}:
            raise AttributeError(key)

        def locate():
            self.calls[key] = self.calls.get(key, 0) + 1
            value = self.elements.get(key)
            if isinstance(value, Exception):
                raise value
            return value

        locate.__name__ = key
        return locate


class FakePage:
    """Records every DOM side effect the helper performs.

    Stale elements behave like a re-rendered host node: effects on them
    report failure and their text reads as ``None``. The toolbar only takes
    updates once it has been inserted.
    """

    def __init__(self, is_python: bool = False) -> None:
        self.handlers: dict[str, Callable[[], None]] = {}
        self.listener_calls: list[tuple[FakeElement, str]] = []
        self.removed: list[FakeElement] = []
        self.toolbar_inserts = 0
        self.toolbar_disabled: dict[str, bool] | None = None
        self.toolbar_updates: list[tuple[bool, list[str], list[str]]] = []
        self.diff_toggle_containers: list[FakeElement] = []
        self.diff_texts: list[str] = []
        self.diff_overlay_removals = 0
        self.clipboard: list[str] = []
        self.page_source = "<html><body>fake</body></html>"
        self._is_python = is_python

    def register_click_handler(self, key: str, callback: Callable[[], None]) -> None:
        self.handlers[key] = callback

    def add_click_listener(self, element: FakeElement, key: str, callback: Callable[[], None]) -> bool:
        if element.stale:
            return False
        self.listener_calls.append((element, key))
        if element.listener_marker != key:
            element.listener_marker = key
            element.listeners.append(key)
        self.register_click_handler(key, callback)
        return True

    def dispatch_clicks(self, keys: list[str]) -> None:
        for key in keys:
            handler = self.handlers.get(key)
            if handler is not None:
                handler()

    def click(self, key: str) -> None:
        self.dispatch_clicks([key])

    def text_content(self, element: FakeElement) -> str | None:
        return None if element.stale else element.text

    def child_texts(self, element: FakeElement) -> list[str]:
        return [] if element.stale else list(element.children)

    def remove(self, element: FakeElement) -> bool:
        if element.stale:
            return False
        element.removed = True
        self.removed.append(element)
        return True

    def insert_toolbar(self) -> None:
        self.toolbar_inserts += 1
        if self.toolbar_disabled is None:
            self.toolbar_disabled = {key: False for key, _ in TOOLBAR_BUTTONS}

    def update_toolbar(self, visible: bool, disabled: list[str], enabled: list[str]) -> None:
        if self.toolbar_disabled is None:
            return
        self.toolbar_updates.append((visible, list(disabled), list(enabled)))
        self.toolbar_disabled.update({key: True for key in disabled})
        self.toolbar_disabled.update({key: False for key in enabled})

    def insert_diff_toggles(self, container: FakeElement) -> bool:
        if container.stale:
            return False
        container.children.append("diff-toggles")
        self.diff_toggle_containers.append(container)
        return True

    def show_diff(self, text: str) -> None:
        self.diff_texts.append(text)

    def remove_diff_overlay(self) -> None:
        self.diff_overlay_removals += 1

    def write_clipboard(self, text: str) -> None:
        self.clipboard.append(text)

    def is_python(self) -> bool:
        return self._is_python


class HostElement:
    """A WebElement stand-in for driving the real ``HostPage``."""

    def __init__(self, text: str = "", stale: bool = False) -> None:
        self.text = text
        self.stale = stale
        self.attributes: dict[str, str] = {}
        self.listeners: list[str] = []

    def get_attribute(self, name: str):
        if self.stale:
            raise StaleElementReferenceException("stale element reference: element is not attached")
        if name == "textContent":
            return self.text
        return self.attributes.get(name)


class ScriptDriver:
    """Driver stand-in for ``HostPage``: runs no JavaScript, but models what
    the toolbar and click-listener scripts do to the document."""

    def __init__(self) -> None:
        self.scripts: list[str] = []
        self.toolbar_disabled: dict[str, bool] | None = None
        self.toolbar_visible = False
        self.page_source = "<html><body>stub</body></html>"

    def execute_script(self, script: str, *args):
        self.scripts.append(script)
        if any(isinstance(arg, HostElement) and arg.stale for arg in args):
            raise StaleElementReferenceException("stale element reference: element is not attached")
        if script == INSERT_TOOLBAR_SCRIPT:
            if self.toolbar_disabled is not None:
                return False
            self.toolbar_disabled = {key: False for key, _ in args[1]}
            self.toolbar_visible = True
            return True
        if script == UPDATE_TOOLBAR_SCRIPT:
            if self.toolbar_disabled is None:
                return None
            _, self.toolbar_visible, disabled, enabled = args
            self.toolbar_disabled.update({key: True for key in disabled})
            self.toolbar_disabled.update({key: False for key in enabled})
            return None
        if script == ADD_CLICK_LISTENER_SCRIPT:
            element, key, marker = args
            if element.attributes.get(marker) == key:
                return False
            element.attributes[marker] = key
            element.listeners.append(key)
            return True
        return None


class FakeDomMonitor:
    """Queues notifications and clicks the way the browser buffers would."""

    def __init__(self) -> None:
        self.events: list[MutationNotification] = []
        self.clicks: list[str] = []
        self.installs = 0
        self.unreachable_rounds = 0

    def install(self, driver) -> None:
        if self.unreachable_rounds:
            self.unreachable_rounds -= 1
            raise WebDriverException("javascript error: document unloaded while waiting for result")
        self.installs += 1

    def queue_mutation(self, count: int = 1) -> None:
        self.events.extend(MutationNotification(type="childList") for _ in range(count))

    def queue_click(self, key: str) -> None:
        self.clicks.append(key)

    def flush_events(self, driver) -> list[MutationNotification]:
        events, self.events = self.events, []
        return events

    def flush_clicks(self, driver) -> list[str]:
        clicks, self.clicks = self.clicks, []
        return clicks


def build_helper(helper_config, locators=None, page=None, **kwargs) -> ReviewHelper:
    return ReviewHelper(
        helper_config,
        driver=None,
        page=page or FakePage(),
        locators=locators or FakeLocators(),
        dom_monitor=kwargs.pop("dom_monitor", None) or FakeDomMonitor(),
        **kwargs,
    )


@contextmanager
def managed_driver(helper_config) -> Iterator[object]:
    helper_config.environment.headless = True
    try:
        driver = BrowserSession(helper_config.environment).start()
    except WebDriverException as exc:
        pytest.skip(f"WebDriver could not start for {helper_config.environment.browser}: {exc}")
    try:
        yield driver
    finally:
        driver.quit()
