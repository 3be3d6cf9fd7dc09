"""
Video rendering for the privacy overlay pipeline.

This module handles:
- Reading the source video frame by frame
- Drawing every visible overlay at its placement for the frame's timestamp
- Exporting the composited frames to H.264 MP4

Placements arrive in center-origin target space ([-1, +1], y up) and are
converted to pixels here. The overlay diameter is scale times the shorter
frame side; overlays running past the frame edge are clipped.
"""

import cv2
import numpy as np
import logging
from pathlib import Path
from typing import Tuple

import imageio

from .config import Config
from .composition import CompositionRequest
from .placement import Placement

logger = logging.getLogger(__name__)


def target_to_pixels(placement: Placement, frame_width: int, frame_height: int) -> Tuple[int, int, int]:
    """
    Convert a placement to pixel center and diameter.

    Returns:
        (center_x, center_y, diameter) in frame pixels
    """
    center_x = (placement.anchor_x + 1.0) / 2.0 * frame_width
    center_y = (1.0 - placement.anchor_y) / 2.0 * frame_height
    diameter = placement.scale * min(frame_width, frame_height)
    return int(round(center_x)), int(round(center_y)), int(round(diameter))


def overlay_rgba(frame: np.ndarray, rgba: np.ndarray, center_x: int, center_y: int,
                 diameter: int, opacity: float = 1.0) -> np.ndarray:
    """
    Alpha-blend an RGBA raster onto an RGB frame in place.

    Args:
        frame: H x W x 3 uint8 frame
        rgba: Square RGBA overlay raster
        center_x: Overlay center column in frame pixels
        center_y: Overlay center row in frame pixels
        diameter: Overlay size in frame pixels
        opacity: Extra alpha multiplier in [0, 1]

    Returns:
        The same frame array
    """
    H, W = frame.shape[:2]
    if diameter <= 0 or opacity <= 0:
        return frame

    x = center_x - diameter // 2
    y = center_y - diameter // 2

    x1 = max(x, 0)
    y1 = max(y, 0)
    x2 = min(x + diameter, W)
    y2 = min(y + diameter, H)
    if x1 >= x2 or y1 >= y2:
        return frame

    interpolation = cv2.INTER_AREA if diameter < rgba.shape[0] else cv2.INTER_LINEAR
    fg = cv2.resize(rgba, (diameter, diameter), interpolation=interpolation)

    fg_crop = fg[y1 - y:y2 - y, x1 - x:x2 - x]
    roi = frame[y1:y2, x1:x2].astype(np.float32)

    alpha = fg_crop[:, :, 3:4].astype(np.float32) / 255.0 * opacity
    out = fg_crop[:, :, :3].astype(np.float32) * alpha + roi * (1.0 - alpha)
    frame[y1:y2, x1:x2] = np.clip(np.round(out), 0, 255).astype(np.uint8)
    return frame


def frame_time_ms(frame_index: int, fps: float) -> int:
    """Presentation time of a frame, floored to whole milliseconds."""
    return int(frame_index * 1000 // fps)


class VideoRenderer:
    """Composites overlay placements onto a video and exports the result."""

    def __init__(self, config: Config):
        self.config = config

    def composite_frame(self, frame: np.ndarray, request: CompositionRequest,
                        time_ms: int, asset_rgba: np.ndarray = None) -> np.ndarray:
        """Draw every visible overlay of the request onto a copy of frame."""
        if asset_rgba is None:
            asset_rgba = np.asarray(request.asset.convert("RGBA"))

        output = np.ascontiguousarray(frame[:, :, :3]).copy()
        height, width = output.shape[:2]

        for placement in request.placements_at(time_ms):
            if not placement.visible:
                continue
            center_x, center_y, diameter = target_to_pixels(placement, width, height)
            overlay_rgba(output, asset_rgba, center_x, center_y, diameter, placement.opacity)

        return output

    def render(self, request: CompositionRequest, input_path: str, output_path: str) -> str:
        """
        Render the composition request over a video file.

        Args:
            request: Non-pass-through composition request
            input_path: Source video
            output_path: Destination MP4

        Returns:
            output_path
        """
        if request.is_passthrough:
            raise ValueError("Pass-through requests must not be rendered; use the original video")

        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        asset_rgba = np.asarray(request.asset.convert("RGBA"))

        reader = imageio.get_reader(str(input_path), 'ffmpeg')
        try:
            meta = reader.get_meta_data()
            fps = meta.get('fps') or 30.0
            logger.info(f"Rendering {input_path}: {meta.get('size', 'unknown')} @ {fps} fps, "
                        f"{request.track_count} overlay tracks")

            writer = imageio.get_writer(
                str(output_path),
                format='ffmpeg',
                fps=fps,
                codec=self.config.codec,
                quality=None,
                ffmpeg_params=['-crf', str(self.config.mp4_crf)],
                macro_block_size=1,
            )
            try:
                frame_count = 0
                for index, frame in enumerate(reader):
                    composited = self.composite_frame(frame, request, frame_time_ms(index, fps), asset_rgba)
                    writer.append_data(composited)
                    frame_count += 1
            finally:
                writer.close()
        finally:
            reader.close()

        logger.info(f"Rendered {frame_count} frames to {output_path}")
        return str(output_path)
