"""
Per-track visibility and placement resolution.

Placements use the renderer's target space: origin at the frame center,
both axes spanning [-1, +1], x to the right and y pointing up (the
opposite of the detector's y-down convention).
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from .detection import Detection
from .tracks import Track

DEFAULT_SCALE_FACTOR = 2.0


@dataclass(frozen=True)
class Placement:
    """Where and how to draw one overlay instance at one point in time."""
    anchor_x: float
    anchor_y: float
    scale: float
    opacity: float

    @property
    def visible(self) -> bool:
        return self.opacity > 0.0


HIDDEN = Placement(anchor_x=0.0, anchor_y=0.0, scale=1.0, opacity=0.0)


def to_target_space(x_norm: float, y_norm: float):
    """Map a normalized top-left-origin point into center-origin target space."""
    return (x_norm * 2 - 1, -(y_norm * 2 - 1))


class TrackPlacement:
    """
    Resolves a single track's overlay placement for any query time.

    Holds nothing but the track's fixed detections, so every query is a pure
    function of the time argument and instances can be shared across threads.
    """

    def __init__(self, detections: Sequence[Detection], scale_factor: float = DEFAULT_SCALE_FACTOR):
        self.detections = tuple(detections)
        self.scale_factor = scale_factor

    @classmethod
    def for_track(cls, track: Track, scale_factor: float = DEFAULT_SCALE_FACTOR) -> "TrackPlacement":
        return cls(track.detections, scale_factor)

    def active_detection(self, time_ms: int) -> Optional[Detection]:
        """Detection covering time_ms; the earliest start wins if windows overlap."""
        active = None
        for detection in self.detections:
            if not detection.covers(time_ms):
                continue
            if active is None or detection.start_time_ms < active.start_time_ms:
                active = detection
        return active

    def is_visible(self, time_ms: int) -> bool:
        return self.active_detection(time_ms) is not None

    def placement_at(self, time_ms: int) -> Placement:
        """
        Compute the overlay placement at a presentation time.

        Args:
            time_ms: Presentation time in milliseconds

        Returns:
            Placement centered on the active face, or HIDDEN (opacity 0.0)
            when no detection in this track covers time_ms
        """
        detection = self.active_detection(time_ms)
        if detection is None:
            return HIDDEN

        anchor_x, anchor_y = to_target_space(*detection.center)
        return Placement(
            anchor_x=anchor_x,
            anchor_y=anchor_y,
            scale=max(detection.width, detection.height) * self.scale_factor,
            opacity=1.0,
        )

    def placement_at_us(self, time_us: int) -> Placement:
        """Same as placement_at for renderers that report microseconds."""
        return self.placement_at(time_us // 1000)
