"""
Video processing entry points for the privacy overlay pipeline.

prepare() is the synchronous core: raw face entries in, composition request
out, no I/O. process_video() is the asynchronous caller boundary that hands
the request to the renderer on a worker thread and resolves to the output
path or a typed error.
"""

import asyncio
import logging
import time
from pathlib import Path
from typing import Any, List, Mapping, Optional

from .composition import CompositionRequest, build_composition
from .config import Config
from .detection import parse_detections
from .emoji_asset import EmojiAssetGenerator
from .errors import InvalidRequestError, RenderError
from .renderer import VideoRenderer
from .tracks import assign_tracks

logger = logging.getLogger(__name__)


class VideoPrivacyProcessor:
    """Adds emoji overlays over detected faces in a video."""

    def __init__(self, config: Config, renderer: Optional[VideoRenderer] = None):
        self.config = config
        self.asset_generator = EmojiAssetGenerator(config)
        self.renderer = renderer or VideoRenderer(config)

    def prepare(self, faces_data: List[Mapping[str, Any]]) -> CompositionRequest:
        """
        Turn raw face entries into a composition request.

        The emoji asset is only generated when there is at least one track;
        an invalid asset size then fails the request.
        """
        detections = parse_detections(faces_data)
        for i, face in enumerate(detections):
            logger.debug(f"  Face[{i}]: pos=({face.x}, {face.y}) size=({face.width}x{face.height}) "
                         f"time={face.start_time_ms}-{face.end_time_ms}ms")

        tracks = assign_tracks(detections)
        asset = self.asset_generator.generate() if tracks else None
        return build_composition(tracks, asset, self.config.overlay_scale_factor)

    def output_path_for(self, now_ms: Optional[int] = None) -> Path:
        """Output file path stamped with the current wall-clock milliseconds."""
        if now_ms is None:
            now_ms = int(time.time() * 1000)
        return self.config.output_dir / f"{self.config.output_prefix}{now_ms}.mp4"

    async def process_video(self, input_path: str, faces_data: List[Mapping[str, Any]]) -> str:
        """
        Process a video by covering detected faces with emoji overlays.

        Args:
            input_path: Path to the input video file
            faces_data: Face entries with x, y, width, height, startTimeMs, endTimeMs

        Returns:
            Path to the processed video, or input_path when no overlay is needed
        """
        if not input_path or faces_data is None:
            raise InvalidRequestError("Missing inputPath or faces")

        logger.info(f"process_video called with input_path={input_path}, {len(faces_data)} face entries")

        request = self.prepare(faces_data)
        if request.is_passthrough:
            logger.info("No valid faces, returning original file")
            return input_path

        output_path = str(self.output_path_for())
        logger.info(f"Output path: {output_path}")

        loop = asyncio.get_running_loop()
        try:
            result = await loop.run_in_executor(
                None, self.renderer.render, request, input_path, output_path
            )
        except Exception as e:
            logger.error(f"Render failed for {input_path}: {e}")
            raise RenderError(f"Rendering failed: {e}", input_path=input_path) from e

        logger.info(f"Render completed successfully. Output: {result}")
        return result
