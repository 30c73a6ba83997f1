from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

MAX_LINE_LENGTH = 240
TRUNCATE_LENGTH = 32
ALIGNMENT_THRESHOLD = 85

CLOSING_TAG = re.compile(r"</[^>]+>")
CONSTANT = re.compile(r"^[A-Z_]+")
SCORE = re.compile(r"-?\d+(?:\.\d+)?")


def _truncate(line: str) -> str:
    return f"{line[:TRUNCATE_LENGTH]}..." if len(line) > TRUNCATE_LENGTH else line


def validate_python(code: str, messages: list[str]) -> None:
    """Naive style checks on Python code in the bot response.

    Flags very long lines, top-level lines that are not imports, constants,
    definitions, decorators or comments, and inline comments.
    """

    for line in code.split("\n"):
        if not line.strip():
            continue

        shortened = _truncate(line)
        is_constant = bool(CONSTANT.match(line.split(" ")[0]))
        is_definition = line.startswith(("def ", "class ", "@", "async def "))
        is_import = line.startswith(("import ", "from "))
        is_indented = line.startswith("    ")
        is_comment = line.startswith("#")

        if len(line) > MAX_LINE_LENGTH:
            logger.warning("A line is suspiciously long: %s", line)
            messages.append(f"A line in the bot response is suspiciously long: {shortened}")

        if not (is_constant or is_import or is_definition or is_indented or is_comment) and not line.startswith(") ->"):
            logger.warning("Found unexpected non-indented line: %s", line)
            messages.append(
                "[PYTHON] The bot response contains a non-indented line that doesn't appear to be "
                f"an import, class definition, comment, or function definition: {shortened}"
            )

        if "#" in line and not line.strip().startswith("#"):
            suspected_comment = line.split("#")[1].strip()
            logger.warning("Found inline comment: %s", line)
            messages.append(f"[PYTHON] The bot response may contain an inline comment: {suspected_comment}")


def check_for_html_in_code(code: str, messages: list[str]) -> None:
    # a closing tag usually means the response was cut off mid-render
    if CLOSING_TAG.search(code):
        logger.warning("Something that appears to be a closing HTML tag was found in the bot response.")
        messages.append("The bot response appears to contain HTML.")


def check_alignment_score(
    score: float | None,
    send_to_rework: bool,
    messages: list[str],
    threshold: float = ALIGNMENT_THRESHOLD,
) -> None:
    if score is None or score == -1:
        logger.warning("Alignment score not found.")
        return
    logger.debug("Alignment score: %s, send to rework: %s", score, send_to_rework)
    if score < threshold and not send_to_rework:
        messages.append(f"The alignment score is {score:g}, but the conversation is not marked as a rework.")


def parse_alignment_score(text: str | None) -> float | None:
    match = SCORE.search(text or "")
    if match is None:
        return None
    return float(match.group())


def is_marked_for_rework(feedback_texts: list[str]) -> bool:
    # the third entry of the QA feedback section holds the chosen outcome
    return len(feedback_texts) > 2 and "Rework" in feedback_texts[2]


def format_messages(messages: list[str]) -> list[str]:
    return [f"{index}. {message}\n" for index, message in enumerate(messages, start=1)]


def response_status_messages(
    code: str | None,
    *,
    is_python: bool = False,
    alignment_score: float | None = None,
    send_to_rework: bool = False,
) -> list[str]:
    """Collects every issue found with the edited bot response."""

    messages: list[str] = []
    check_alignment_score(alignment_score, send_to_rework, messages)

    if not code or not code.strip():
        logger.error("Cannot find bot response.")
        messages.append("The code cannot be found in the response. Is it in a markdown block?")
        return messages

    if "```" in code:
        logger.warning("The code does not appear to be in a properly-closed markdown code block.")
        messages.append("The code does not appear to be in a properly-closed markdown code block.")

    check_for_html_in_code(code, messages)

    if len(code.split("\n")) <= 3:
        logger.warning("The bot response has suspiciously few lines.")
        messages.append("The bot response has suspiciously few lines.")

    if is_python:
        validate_python(code, messages)

    return messages
