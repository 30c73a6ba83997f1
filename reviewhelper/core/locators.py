from __future__ import annotations

from selenium.common.exceptions import (
    InvalidSelectorException,
    NoSuchElementException,
    StaleElementReferenceException,
)
from selenium.webdriver.common.by import By

from reviewhelper.config.schema import HelperConfig, SelectorDefinition


def infer_selector_type(selector: str) -> str:
    stripped = selector.strip()
    if stripped.startswith("/") or stripped.startswith("("):
        return "xpath"
    return "css"


class Locators:
    """Zero-argument queries against the live host document.

    Every query returns the first matching element or ``None``. A missing,
    stale or unmatched element is a normal outcome, never an error.
    """

    def __init__(self, driver, config: HelperConfig) -> None:
        self.driver = driver
        self.config = config

    def snooze_button(self):
        return self.find("snooze_button")

    def submit_button(self):
        return self.find("submit_button")

    def window_close_button(self):
        return self.find("window_close_button")

    def edit_button(self):
        return self.find("edit_button")

    def save_button(self):
        return self.find("save_button")

    def original_tab(self):
        return self.find("original_tab")

    def edited_tab(self):
        return self.find("edited_tab")

    def original_tab_content(self):
        return self.find("original_tab_content")

    def response(self):
        return self.find("response")

    def metadata_section(self):
        return self.find("metadata_section")

    def tab_container(self):
        return self.find("tab_container")

    def task_id(self):
        return self.find("task_id")

    def operator_name(self):
        return self.find("operator_name")

    def prompt(self):
        return self.find("prompt")

    def alignment_score(self):
        return self.find("alignment_score")

    def qa_feedback_section(self):
        return self.find("qa_feedback_section")

    def find(self, key: str):
        definition = self.config.get_selector(key)
        for by, selector in self._selector_specs(definition):
            try:
                matches = self.driver.find_elements(by, selector)
            except InvalidSelectorException:
                continue
            for element in matches:
                if self._matches_text(element, definition.text):
                    return element
        return None

    def _selector_specs(self, definition: SelectorDefinition) -> list[tuple[str, str]]:
        selectors = [(self._by(definition.selector_type), definition.selector)]
        for fallback in definition.fallback_selectors:
            selectors.append((self._by(infer_selector_type(fallback)), fallback))
        return selectors

    @staticmethod
    def _matches_text(element, expected: str | None) -> bool:
        if expected is None:
            return True
        try:
            text = element.get_attribute("textContent") or ""
        except (NoSuchElementException, StaleElementReferenceException):
            return False
        return text.strip() == expected

    @staticmethod
    def _by(selector_type: str) -> str:
        return By.XPATH if selector_type == "xpath" else By.CSS_SELECTOR
