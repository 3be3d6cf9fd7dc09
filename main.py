#!/usr/bin/env python3
"""
Privacy Overlay - Main Application

Covers detected faces in a video with an emoji overlay for as long as each
face is visible:
- Face detections are grouped into overlay tracks (one slot per concurrent face)
- Each track resolves its overlay position, size and visibility per frame
- Frames are composited and exported to MP4
"""

import sys
import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from privacy_overlay.config import load_config
from privacy_overlay.processor import VideoPrivacyProcessor

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout),
        logging.FileHandler('privacy_overlay.log')
    ]
)
logger = logging.getLogger(__name__)


def load_faces(faces_path: str) -> List[Dict[str, Any]]:
    """Load face entries from a JSON list or an object with a "faces" key."""
    with open(faces_path, 'r') as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get("faces")
    if not isinstance(data, list):
        raise ValueError(f"{faces_path} must contain a list of faces or an object with a 'faces' list")
    return data


def log_plan(processor: VideoPrivacyProcessor, faces: List[Dict[str, Any]]):
    """Log the overlay tracks that would be rendered, without touching the video."""
    request = processor.prepare(faces)
    if request.is_passthrough:
        logger.info("No overlay needed - original video would be kept")
        return

    for i, overlay in enumerate(request.overlays):
        detections = overlay.placement.detections
        logger.info(f"Track {i}: {len(detections)} detections, "
                    f"{detections[0].start_time_ms}-{detections[-1].end_time_ms}ms")


def main():
    """Main entry point for the Privacy Overlay."""
    parser = argparse.ArgumentParser(
        description="Privacy Overlay - Cover detected faces in a video with an emoji"
    )
    parser.add_argument(
        "--config",
        type=str,
        default="config.yaml",
        help="Path to configuration file (default: config.yaml)"
    )
    parser.add_argument(
        "--input",
        type=str,
        required=True,
        help="Input video file"
    )
    parser.add_argument(
        "--faces",
        type=str,
        required=True,
        help="JSON file with face detections"
    )
    parser.add_argument(
        "--plan-only",
        action="store_true",
        help="Only log the overlay tracks without rendering"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    args = parser.parse_args()

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        config = load_config(args.config)
        processor = VideoPrivacyProcessor(config)

        if not Path(args.input).exists():
            logger.error(f"Input video not found: {args.input}")
            sys.exit(1)

        faces = load_faces(args.faces)

        if args.plan_only:
            log_plan(processor, faces)
            return

        output_path = asyncio.run(processor.process_video(args.input, faces))
        print(output_path)

    except KeyboardInterrupt:
        logger.info("Processing interrupted by user")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Fatal error: {str(e)}")
        sys.exit(1)


if __name__ == "__main__":
    main()
