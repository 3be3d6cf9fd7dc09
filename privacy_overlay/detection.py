"""
Face detection records for the privacy overlay pipeline.

Detections arrive from an external face detector as loosely typed mappings
with normalized box coordinates (top-left origin, y pointing down) and an
inclusive visibility window in milliseconds.
"""

import logging
import math
from dataclasses import dataclass
from numbers import Integral, Real
from typing import Any, Iterable, List, Mapping, Optional

logger = logging.getLogger(__name__)

SPATIAL_FIELDS = ("x", "y", "width", "height")
TIME_FIELDS = ("startTimeMs", "endTimeMs")


@dataclass(frozen=True)
class Detection:
    """
    One face observation.

    Box fields are finite and non-negative; x + width and y + height may
    run past 1.0. The window is inclusive with start_time_ms <= end_time_ms.
    Violations raise ValueError on construction.
    """
    x: float
    y: float
    width: float
    height: float
    start_time_ms: int
    end_time_ms: int

    def __post_init__(self):
        for name in ("x", "y", "width", "height"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"Detection {name} must be finite and non-negative, got {value}")
        if self.start_time_ms > self.end_time_ms:
            raise ValueError(
                f"Detection window is inverted: {self.start_time_ms} > {self.end_time_ms}"
            )

    @property
    def center(self):
        """Box center in normalized coordinates."""
        return (self.x + self.width / 2, self.y + self.height / 2)

    def covers(self, time_ms: int) -> bool:
        return self.start_time_ms <= time_ms <= self.end_time_ms


def _number(value: Any) -> Optional[float]:
    # bool is a Real subclass but never a coordinate
    if isinstance(value, bool) or not isinstance(value, Real):
        return None
    value = float(value)
    if not math.isfinite(value):
        return None
    return value


def _milliseconds(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    # integers stay exact past 2**53
    if isinstance(value, Integral):
        return int(value)
    value = _number(value)
    return None if value is None else int(value)


def parse_detection(entry: Mapping[str, Any]) -> Optional[Detection]:
    """
    Build a Detection from one raw detector entry.

    Args:
        entry: Mapping with x, y, width, height, startTimeMs and endTimeMs

    Returns:
        Detection, or None if the entry is missing or mistyping a field
    """
    if not isinstance(entry, Mapping):
        return None

    spatial = [_number(entry.get(key)) for key in SPATIAL_FIELDS]
    times = [_milliseconds(entry.get(key)) for key in TIME_FIELDS]
    if None in spatial or None in times:
        return None

    try:
        return Detection(*spatial, *times)
    except ValueError:
        return None


def parse_detections(entries: Iterable[Mapping[str, Any]]) -> List[Detection]:
    """
    Parse raw detector entries, dropping malformed ones.

    A bad entry only removes itself; it never fails the request.
    """
    detections = []
    total = 0

    for index, entry in enumerate(entries):
        total += 1
        detection = parse_detection(entry)
        if detection is None:
            logger.debug(f"Dropping malformed face entry #{index}: {entry!r}")
            continue
        detections.append(detection)

    logger.info(f"Parsed {len(detections)} valid faces from {total} entries")
    return detections
