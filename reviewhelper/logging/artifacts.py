from __future__ import annotations

import json
import shutil
from dataclasses import asdict
from datetime import UTC, datetime
from pathlib import Path

from reviewhelper.core.store import SessionState


class ArtifactManager:
    """Owns the artifacts directory: DOM snapshots of observer faults and run summaries."""

    def __init__(self, root: str | Path = "artifacts") -> None:
        self.root = Path(root)
        self.dom_root = self.root / "dom_snapshots"
        self.run_log_root = self.root / "run_logs"
        for directory in (self.root, self.dom_root, self.run_log_root):
            directory.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def timestamp() -> str:
        return datetime.now(UTC).strftime("%Y%m%dT%H%M%S%fZ")

    def write_dom_snapshot(self, observer_name: str, page_source: str) -> Path:
        path = self.dom_root / f"{self.timestamp()}_{observer_name}.html"
        path.write_text(page_source, encoding="utf-8")
        return path

    def write_run_summary(self, state: SessionState) -> Path:
        path = self.run_log_root / f"{self.timestamp()}.json"
        payload = {key: getattr(value, "value", value) for key, value in asdict(state).items()}
        path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
        return path

    def reset(self) -> None:
        for directory in (self.dom_root, self.run_log_root):
            shutil.rmtree(directory, ignore_errors=True)
            directory.mkdir(parents=True, exist_ok=True)
        for child in self.root.glob("*.jsonl"):
            child.unlink()
