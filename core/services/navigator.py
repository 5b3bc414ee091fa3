"""Linear step navigation over the flat chronological sequence."""

from __future__ import annotations

from dataclasses import dataclass

from core.services.timeline_index import TimelineIndex


@dataclass(frozen=True)
class WheelModifiers:
    """Keyboard modifiers held during a wheel event."""

    shift: bool = False
    ctrl: bool = False
    alt: bool = False
    meta: bool = False

    @property
    def any(self) -> bool:
        return self.shift or self.ctrl or self.alt or self.meta


def wheel_step(delta: float, modifiers: WheelModifiers | None = None) -> int:
    """Map a wheel delta to a step of -1, 0 or +1.

    Positive `delta` means "towards later items". Any held modifier yields 0 so
    the event falls through to native scrolling.
    """
    if modifiers is not None and modifiers.any:
        return 0
    if delta > 0:
        return 1
    if delta < 0:
        return -1
    return 0


class Navigator:
    """Turns directional input into the identity that should become selected."""

    def __init__(self, index: TimelineIndex) -> None:
        self._index = index

    @property
    def index(self) -> TimelineIndex:
        return self._index

    def step(self, current_identity: str | None, delta: int) -> str | None:
        """Identity `delta` positions away in the flat sequence, or None.

        None means no-op: unknown current identity, zero delta or a target
        outside the sequence.
        """
        if not delta:
            return None
        position = self._index.flat_position(current_identity)
        if position is None:
            return None
        target = position + delta
        if 0 <= target < len(self._index.flat):
            return self._index.flat[target].identity
        return None

    def wheel(
        self, current_identity: str | None, delta: float, modifiers: WheelModifiers | None = None
    ) -> str | None:
        return self.step(current_identity, wheel_step(delta, modifiers))
