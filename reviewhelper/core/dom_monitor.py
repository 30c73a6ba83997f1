from __future__ import annotations

from dataclasses import dataclass

INSTALL_MONITOR_SCRIPT = r"""
if (!window.__review_helper_events__) {
  window.__review_helper_events__ = [];
}
if (!window.__review_helper_clicks__) {
  window.__review_helper_clicks__ = [];
}

if (!window.__review_helper_observer_installed__) {
  const observer = new MutationObserver((mutations) => {
    for (const mutation of mutations) {
      window.__review_helper_events__.push({
        type: mutation.type,
        targetTag: mutation.target && mutation.target.tagName ? mutation.target.tagName.toLowerCase() : "",
        addedCount: mutation.addedNodes ? mutation.addedNodes.length : 0,
        removedCount: mutation.removedNodes ? mutation.removedNodes.length : 0,
        timestamp: Date.now(),
      });
    }
    if (window.__review_helper_events__.length > 200) {
      window.__review_helper_events__ = window.__review_helper_events__.slice(-200);
    }
  });
  observer.observe(document, {
    attributes: true,
    childList: true,
    subtree: true,
  });
  window.__review_helper_observer_installed__ = true;
}
"""

FLUSH_EVENTS_SCRIPT = """
const events = window.__review_helper_events__ || [];
window.__review_helper_events__ = [];
return events;
"""

FLUSH_CLICKS_SCRIPT = """
const clicks = window.__review_helper_clicks__ || [];
window.__review_helper_clicks__ = [];
return clicks;
"""


@dataclass(slots=True, frozen=True)
class MutationNotification:
    """Something in the host document may have changed.

    Observers do not read these fields; they re-query the live document.
    """

    type: str = "poll"
    target_tag: str = ""
    added_count: int = 0
    removed_count: int = 0
    timestamp: float = 0.0

    @classmethod
    def from_event(cls, event: dict) -> "MutationNotification":
        return cls(
            type=event.get("type", ""),
            target_tag=event.get("targetTag", ""),
            added_count=event.get("addedCount", 0),
            removed_count=event.get("removedCount", 0),
            timestamp=event.get("timestamp", 0.0),
        )


class DomMonitor:
    """Installs and reads the browser-side mutation and click buffers."""

    def install(self, driver) -> None:
        driver.execute_script(INSTALL_MONITOR_SCRIPT)

    def flush_events(self, driver) -> list[MutationNotification]:
        events = driver.execute_script(FLUSH_EVENTS_SCRIPT) or []
        return [MutationNotification.from_event(event) for event in events]

    def flush_clicks(self, driver) -> list[str]:
        return list(driver.execute_script(FLUSH_CLICKS_SCRIPT) or [])
