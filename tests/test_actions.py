from __future__ import annotations

import logging

from reviewhelper.config.schema import WaitConfig
from reviewhelper.core.actions import ToolbarActions, render_diff
from reviewhelper.core.store import DiffViewState
from reviewhelper.logging.console import LOG_FORMAT, configure_logging
from reviewhelper.utils import wait as wait_module
from tests.helpers import FakeElement, FakeLocators, FakePage


def make_actions(store, signals, locators=None, page=None):
    return ToolbarActions(
        store,
        page or FakePage(),
        locators or FakeLocators(),
        signals,
        WaitConfig(interval_seconds=0.01, timeout_seconds=0.05),
    )


def test_copy_prompt_converts_markdown_to_spaced_plaintext(store, signals):
    locators = FakeLocators(prompt=FakeElement("# Task\nWrite **a** function."))
    actions = make_actions(store, signals, locators=locators)
    assert actions.copy_prompt() is True
    assert actions.page.clipboard == ["Task\n\nWrite a function."]


def test_copy_prompt_timeout_copies_nothing(store, signals):
    actions = make_actions(store, signals)
    assert actions.copy_prompt() is False
    assert actions.page.clipboard == []


def test_copy_prompt_aborted_by_conversation_close(store, signals, monkeypatch):
    monkeypatch.setattr(wait_module.time, "sleep", lambda seconds: signals.rotate())
    actions = ToolbarActions(store, FakePage(), FakeLocators(), signals, WaitConfig(timeout_seconds=30))
    assert actions.copy_prompt() is False
    assert actions.page.clipboard == []


def test_validate_response_formats_findings(store, signals):
    store.set(edited_content="x = 1\n")
    actions = make_actions(store, signals, page=FakePage(is_python=True))
    messages = actions.validate_response()
    assert messages[0] == "1. The bot response has suspiciously few lines.\n"
    assert messages[1].startswith("2. [PYTHON]")


def test_validate_response_reads_alignment_score_and_rework_marker(store, signals):
    store.set(edited_content="import os\n\n\ndef main():\n    return os.getcwd()\n")
    feedback = FakeElement(children=["QA Feedback", "Comments", "Approve"])
    locators = FakeLocators(alignment_score=FakeElement("Alignment: 72%"), qa_feedback_section=feedback)
    actions = make_actions(store, signals, locators=locators, page=FakePage(is_python=True))

    assert actions.validate_response() == [
        "1. The alignment score is 72, but the conversation is not marked as a rework.\n"
    ]

    feedback.children[2] = "Send to Rework"
    assert actions.validate_response() == []


def test_toggle_diff_view_needs_original_content(store, signals):
    actions = make_actions(store, signals)
    actions.toggle_diff_view()
    assert store.get().diff_view == DiffViewState.CLOSED
    assert actions.page.diff_texts == []

    store.set(original_content="a\nb", edited_content="a\nc")
    actions.toggle_diff_view()
    assert store.get().diff_view == DiffViewState.UNIFIED
    assert "-b" in actions.page.diff_texts[-1]
    assert "+c" in actions.page.diff_texts[-1]


def test_render_side_by_side_marks_changed_rows():
    rows = render_diff("a\nb", "a\nc", DiffViewState.SIDE_BY_SIDE).splitlines()
    assert rows == ["a   a", "b | c"]


def test_configure_logging_installs_one_handler():
    logger = configure_logging("debug")
    configure_logging("INFO")
    handlers = [handler for handler in logger.handlers if getattr(handler, "_review_helper", False)]
    assert len(handlers) == 1
    assert handlers[0].formatter._fmt == LOG_FORMAT
    assert logger.level == logging.INFO
