from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path


class SessionAuditLogger:
    """Appends lifecycle transitions and observer faults to a JSONL trail."""

    def __init__(self, root: str | Path = "artifacts") -> None:
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)
        self.events_path = self.root / "session_events.jsonl"

    def write(self, event: str, observer: str = "", detail: str = "") -> None:
        payload = {
            "event": event,
            "observer": observer,
            "detail": detail,
            "timestamp": datetime.now(UTC).isoformat(),
        }
        with self.events_path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(payload) + "\n")

    def read(self) -> list[dict]:
        if not self.events_path.exists():
            return []
        with self.events_path.open("r", encoding="utf-8") as handle:
            return [json.loads(line) for line in handle if line.strip()]
