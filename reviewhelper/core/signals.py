from __future__ import annotations

from dataclasses import dataclass

from reviewhelper.core.exceptions import WaitAbortedError


@dataclass(slots=True, frozen=True)
class CancellationToken:
    registry: "SignalRegistry"
    generation: int

    @property
    def cancelled(self) -> bool:
        return self.registry.generation != self.generation

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise WaitAbortedError("Operation aborted")


class SignalRegistry:
    """Generation counter rotated on every conversation close.

    Waits capture a token when they start; a token only reports cancellation
    for rotations that happened after it was taken.
    """

    def __init__(self) -> None:
        self.generation = 0

    def current(self) -> CancellationToken:
        return CancellationToken(self, self.generation)

    def rotate(self) -> None:
        self.generation += 1
