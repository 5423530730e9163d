"""Evasive "No" control geometry.

The control keeps away from the pointer: whenever a pointer-move event lands
within AVOIDANCE_RADIUS of the control's centre, the control jumps to a new
uniformly random spot that is fully inside the padded viewport. Repositioning
is driven by proximity only, so it happens before a click can land.

Coordinates are screen pixels, origin top-left, position = top-left corner.
"""

from __future__ import annotations

import random
from dataclasses import dataclass

CONTROL_WIDTH = 120
CONTROL_HEIGHT = 44
AVOIDANCE_RADIUS = 120
VIEWPORT_PADDING = 24


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Viewport:
    width: float
    height: float


def placement_bounds(viewport: Viewport) -> tuple[float, float, float, float]:
    """Return (min_x, max_x, min_y, max_y) for the control's top-left corner.

    A viewport too small to fit the control plus padding pins that axis at
    the padding.
    """
    min_x = min_y = VIEWPORT_PADDING
    max_x = max(min_x, viewport.width - CONTROL_WIDTH - VIEWPORT_PADDING)
    max_y = max(min_y, viewport.height - CONTROL_HEIGHT - VIEWPORT_PADDING)
    return min_x, max_x, min_y, max_y


def fits(position: Point, viewport: Viewport) -> bool:
    min_x, max_x, min_y, max_y = placement_bounds(viewport)
    return min_x <= position.x <= max_x and min_y <= position.y <= max_y


def sample_position(viewport: Viewport, rng: random.Random) -> Point:
    min_x, max_x, min_y, max_y = placement_bounds(viewport)
    return Point(rng.uniform(min_x, max_x), rng.uniform(min_y, max_y))


def control_center(position: Point) -> Point:
    return Point(position.x + CONTROL_WIDTH / 2, position.y + CONTROL_HEIGHT / 2)


def is_threatened(position: Point, pointer: Point) -> bool:
    """True when the pointer is strictly inside the avoidance radius."""
    center = control_center(position)
    dx = pointer.x - center.x
    dy = pointer.y - center.y
    return dx * dx + dy * dy < AVOIDANCE_RADIUS * AVOIDANCE_RADIUS


def reposition(
    current: Point,
    pointer: Point,
    viewport: Viewport,
    rng: random.Random,
) -> Point:
    """Pure step function: new position after one pointer-move event."""
    if is_threatened(current, pointer):
        return sample_position(viewport, rng)
    return current


class EvasionController:
    """Per-view state around reposition().

    Single-threaded and driven synchronously by pointer events; there is no
    throttling, so fast motion through the radius repositions repeatedly.
    """

    def __init__(self, viewport: Viewport, rng: random.Random | None = None) -> None:
        self._viewport = viewport
        self._rng = rng or random.Random()
        self._position: Point | None = None
        self._active = True
        self.reposition_count = 0

    @property
    def position(self) -> Point | None:
        return self._position

    @property
    def viewport(self) -> Viewport:
        return self._viewport

    @property
    def active(self) -> bool:
        return self._active

    def place(self) -> Point:
        """Sample the initial position once the view is eligible to show it."""
        if self._position is None:
            self._position = sample_position(self._viewport, self._rng)
        return self._position

    def on_pointer_move(self, px: float, py: float) -> bool:
        """Handle one pointer-move event. Returns True if the control moved.

        Raises:
            RuntimeError: If called before place().
        """
        if not self._active:
            return False
        if self._position is None:
            raise RuntimeError("place() must be called before pointer events")

        new_position = reposition(self._position, Point(px, py), self._viewport, self._rng)
        if new_position is self._position:
            return False
        self._position = new_position
        self.reposition_count += 1
        return True

    def resize(self, viewport: Viewport) -> bool:
        """Adopt a new viewport; resample if the control no longer fits."""
        self._viewport = viewport
        if self._position is None or fits(self._position, viewport):
            return False
        self._position = sample_position(viewport, self._rng)
        return True

    def stop(self) -> None:
        """Stop reacting; the control has left the interactive surface."""
        self._active = False
