"""
Track assignment for the privacy overlay pipeline.

Detections sharing a start timestamp are treated as one frame's faces.
Each frame's faces are sorted left-to-right and dealt out to overlay
slots ("tracks"), so a face that stays on the same side of the frame
tends to keep its slot. This is a spatial heuristic, not re-identification.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

from .detection import Detection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Track:
    """Detections assigned to one overlay slot, ordered by time."""
    index: int
    detections: Tuple[Detection, ...]

    def __len__(self):
        return len(self.detections)


def _spatial_key(detection: Detection):
    return (detection.x, detection.y, detection.width, detection.height, detection.end_time_ms)


def group_by_timestamp(detections: Iterable[Detection]) -> Dict[int, List[Detection]]:
    """
    Partition detections by start time.

    Returns:
        Dict keyed by start_time_ms in ascending order, each group sorted by x
    """
    groups: Dict[int, List[Detection]] = {}
    for detection in detections:
        groups.setdefault(detection.start_time_ms, []).append(detection)

    return {
        start_ms: sorted(groups[start_ms], key=_spatial_key)
        for start_ms in sorted(groups)
    }


def assign_tracks(detections: Iterable[Detection]) -> List[Track]:
    """
    Distribute detections into overlay tracks.

    Track i receives the i-th leftmost face of every timestamp group. The
    number of tracks equals the largest group; smaller groups simply leave
    the remaining tracks without an entry at that timestamp.

    Args:
        detections: Parsed face detections, in any order

    Returns:
        Tracks indexed 0..n-1; empty list when there are no detections
    """
    groups = group_by_timestamp(detections)
    if not groups:
        logger.info("No detections, no tracks to assign")
        return []

    track_count = max(len(group) for group in groups.values())
    logger.info(f"Max concurrent faces: {track_count} across {len(groups)} timestamps")

    slots: List[List[Detection]] = [[] for _ in range(track_count)]
    for group in groups.values():
        for index, detection in enumerate(group):
            slots[index].append(detection)

    tracks = [Track(index=i, detections=tuple(slot)) for i, slot in enumerate(slots)]
    for track in tracks:
        logger.debug(f"Track {track.index}: {len(track)} detections")
    return tracks
