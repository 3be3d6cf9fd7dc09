"""
Composition request assembly.

A composition request pairs the shared emoji raster with one placement
resolver per track. A request with no overlays is the pass-through
request: the caller should keep the original video untouched.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from PIL import Image

from .placement import DEFAULT_SCALE_FACTOR, Placement, TrackPlacement
from .tracks import Track

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OverlayDefinition:
    """One overlay slot: the shared raster and its track's placement resolver."""
    asset: Image.Image
    placement: TrackPlacement

    def placement_at(self, time_ms: int) -> Placement:
        return self.placement.placement_at(time_ms)


@dataclass(frozen=True)
class CompositionRequest:
    """Everything the renderer needs to draw overlays onto a video."""
    asset: Optional[Image.Image]
    overlays: Tuple[OverlayDefinition, ...] = ()

    @property
    def is_passthrough(self) -> bool:
        return not self.overlays

    @property
    def track_count(self) -> int:
        return len(self.overlays)

    def placements_at(self, time_ms: int) -> List[Placement]:
        """One placement per track, hidden ones included."""
        return [overlay.placement_at(time_ms) for overlay in self.overlays]


PASSTHROUGH = CompositionRequest(asset=None)


def build_composition(
    tracks: Sequence[Track],
    asset: Optional[Image.Image],
    scale_factor: float = DEFAULT_SCALE_FACTOR,
) -> CompositionRequest:
    """
    Bind every track to the shared overlay asset.

    Args:
        tracks: Tracks from assign_tracks, in track order
        asset: Emoji raster shared by all overlays; unused when tracks is empty
        scale_factor: Overlay diameter relative to the larger face dimension

    Returns:
        CompositionRequest with one overlay per track, or PASSTHROUGH
    """
    if not tracks:
        logger.info("No tracks, composition request is pass-through")
        return PASSTHROUGH

    if asset is None:
        raise ValueError("An overlay asset is required when there are tracks to render")

    overlays = tuple(
        OverlayDefinition(asset=asset, placement=TrackPlacement.for_track(track, scale_factor))
        for track in tracks
    )
    logger.info(f"Built composition request with {len(overlays)} overlays")
    return CompositionRequest(asset=asset, overlays=overlays)
