"""
Package initialization for the privacy overlay pipeline.
"""

# Import main classes for easy access
from .config import Config, load_config
from .detection import Detection, parse_detections
from .tracks import Track, assign_tracks
from .placement import Placement, TrackPlacement, HIDDEN
from .emoji_asset import EmojiAssetGenerator, generate_emoji_bitmap
from .composition import CompositionRequest, build_composition, PASSTHROUGH
from .errors import (
    PrivacyOverlayError, InvalidAssetSizeError, MissingGlyphError, InvalidRequestError, RenderError
)
from .processor import VideoPrivacyProcessor

__version__ = "1.0.0"

__all__ = [
    'Config',
    'load_config',
    'Detection',
    'parse_detections',
    'Track',
    'assign_tracks',
    'Placement',
    'TrackPlacement',
    'HIDDEN',
    'EmojiAssetGenerator',
    'generate_emoji_bitmap',
    'CompositionRequest',
    'build_composition',
    'PASSTHROUGH',
    'PrivacyOverlayError',
    'InvalidAssetSizeError',
    'MissingGlyphError',
    'InvalidRequestError',
    'RenderError',
    'VideoPrivacyProcessor',
]
