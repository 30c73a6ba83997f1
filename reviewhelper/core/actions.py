from __future__ import annotations

import difflib
import logging

from reviewhelper.checks.text import double_space, markdown_to_text, word_count
from reviewhelper.checks.validation import (
    format_messages,
    is_marked_for_rework,
    parse_alignment_score,
    response_status_messages,
)
from reviewhelper.config.schema import WaitConfig
from reviewhelper.core.exceptions import WaitAbortedError, WaitTimeoutError
from reviewhelper.core.store import DiffViewState, SessionStore
from reviewhelper.utils.wait import poll

logger = logging.getLogger(__name__)


def render_diff(original: str, edited: str, mode: DiffViewState) -> str:
    original_lines = original.splitlines()
    edited_lines = edited.splitlines()
    if mode == DiffViewState.SIDE_BY_SIDE:
        width = max((len(line) for line in original_lines), default=0)
        rows = []
        matcher = difflib.SequenceMatcher(a=original_lines, b=edited_lines)
        for tag, i1, i2, j1, j2 in matcher.get_opcodes():
            left = original_lines[i1:i2]
            right = edited_lines[j1:j2]
            marker = " " if tag == "equal" else "|"
            for index in range(max(len(left), len(right))):
                a = left[index] if index < len(left) else ""
                b = right[index] if index < len(right) else ""
                rows.append(f"{a.ljust(width)} {marker} {b}")
        return "\n".join(rows)
    return "\n".join(
        difflib.unified_diff(original_lines, edited_lines, "original", "edited", lineterm="")
    )


class ToolbarActions:
    """Behaviour behind the toolbar buttons and diff toggles."""

    def __init__(self, store: SessionStore, page, locators, signals, wait: WaitConfig | None = None) -> None:
        self.store = store
        self.page = page
        self.locators = locators
        self.signals = signals
        self.wait = wait or WaitConfig()

    def copy_edited_code(self) -> bool:
        return self._copy(self.store.get().edited_content, "edited code")

    def copy_original_code(self) -> bool:
        return self._copy(self.store.get().original_content, "original code")

    def copy_task_id(self) -> bool:
        return self._copy(self.store.get().task_id, "task id")

    def copy_operator_email(self) -> bool:
        return self._copy(self.store.get().operator_name, "operator email")

    def copy_prompt(self) -> bool:
        try:
            element = poll(self.locators.prompt, self.wait.interval_seconds, self.wait.timeout_seconds, self.signals)
        except WaitAbortedError:
            logger.debug("Prompt copy dropped, the conversation closed.")
            return False
        except WaitTimeoutError:
            logger.warning("Prompt not found, nothing copied.")
            return False
        prompt = self.page.text_content(element) or ""
        logger.debug("Prompt word count: %d", word_count(prompt))
        return self._copy(double_space(markdown_to_text(prompt)), "prompt")

    def validate_response(self) -> list[str]:
        messages = format_messages(
            response_status_messages(
                self.store.get().edited_content,
                is_python=self.page.is_python(),
                alignment_score=self._alignment_score(),
                send_to_rework=self._marked_for_rework(),
            )
        )
        if messages:
            logger.warning("Response check found %d issue(s):\n%s", len(messages), "".join(messages))
        else:
            logger.info("Response check found no issues.")
        return messages

    def _alignment_score(self) -> float | None:
        element = self.locators.alignment_score()
        if element is None:
            return None
        return parse_alignment_score(self.page.text_content(element))

    def _marked_for_rework(self) -> bool:
        section = self.locators.qa_feedback_section()
        if section is None:
            return False
        return is_marked_for_rework(self.page.child_texts(section))

    def toggle_diff_view(self) -> None:
        if self.store.get().diff_view != DiffViewState.CLOSED:
            self.close_diff_view()
            return
        self.show_diff(DiffViewState.UNIFIED)

    def show_diff(self, mode: DiffViewState) -> None:
        state = self.store.get()
        if not state.original_content:
            logger.debug("No original content captured, diff unavailable.")
            return
        self.page.show_diff(render_diff(state.original_content, state.edited_content or "", mode))
        self.store.set(diff_view=mode)

    def close_diff_view(self) -> None:
        self.page.remove_diff_overlay()
        self.store.set(diff_view=DiffViewState.CLOSED)

    def _copy(self, text: str | None, label: str) -> bool:
        if not text:
            logger.debug("Nothing to copy for %s.", label)
            return False
        self.page.write_clipboard(text)
        logger.info("Copied %s to the clipboard.", label)
        return True
