"""
Configuration management for the privacy overlay pipeline.

This module handles loading and validation of configuration parameters
for overlay asset generation, placement policy and video export.
"""

from pathlib import Path
from typing import Dict, Any, Optional, Tuple
import yaml
from dataclasses import dataclass


DEFAULT_GLYPH = ":)"


@dataclass
class Config:
    """Configuration class for the privacy overlay pipeline."""

    # Overlay asset
    emoji_size: int = 200            # pixels, square
    glyph: str = DEFAULT_GLYPH
    font_path: Optional[Path] = None  # None -> Pillow's bundled font
    glyph_scale: float = 0.7          # glyph height relative to emoji_size
    backdrop_color: Tuple[int, int, int, int] = (255, 255, 255, 255)
    glyph_color: Tuple[int, int, int, int] = (0, 0, 0, 255)

    # Placement policy
    overlay_scale_factor: float = 2.0  # overlay diameter / larger face dimension

    # Output
    output_dir: Path = Path("output")
    output_prefix: str = "privacy_video_"

    # Export settings
    codec: str = "libx264"
    mp4_crf: int = 20

    def __post_init__(self):
        """Post-initialization validation and type conversion."""
        if isinstance(self.font_path, str):
            self.font_path = Path(self.font_path)
        if isinstance(self.output_dir, str):
            self.output_dir = Path(self.output_dir)

        # YAML hands colors back as lists
        self.backdrop_color = tuple(self.backdrop_color)
        self.glyph_color = tuple(self.glyph_color)

        self.validate()

    def validate(self):
        """Validate configuration parameters."""
        for name in ("backdrop_color", "glyph_color"):
            color = getattr(self, name)
            if len(color) != 4 or not all(isinstance(c, int) and 0 <= c <= 255 for c in color):
                raise ValueError(f"{name} must be four integers in 0..255, got {color}")

        if not isinstance(self.glyph, str) or not self.glyph:
            raise ValueError("glyph must be a non-empty string")

        for name in ("emoji_size", "mp4_crf"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")

        for name in ("glyph_scale", "overlay_scale_factor"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{name} must be a number, got {value!r}")

        if not 0.0 < self.glyph_scale <= 1.0:
            raise ValueError(f"glyph_scale must be in (0, 1], got {self.glyph_scale}")

        if self.overlay_scale_factor <= 0:
            raise ValueError("overlay_scale_factor must be positive")

        if not 0 <= self.mp4_crf <= 51:
            raise ValueError(f"mp4_crf must be in 0..51, got {self.mp4_crf}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary for serialization."""
        return {
            "emoji_size": self.emoji_size,
            "glyph": self.glyph,
            "font_path": str(self.font_path) if self.font_path else None,
            "glyph_scale": self.glyph_scale,
            "backdrop_color": list(self.backdrop_color),
            "glyph_color": list(self.glyph_color),
            "overlay_scale_factor": self.overlay_scale_factor,
            "output_dir": str(self.output_dir),
            "output_prefix": self.output_prefix,
            "codec": self.codec,
            "mp4_crf": self.mp4_crf,
        }


def load_config(config_path: str) -> Config:
    """Load configuration from a YAML file, creating a default one if missing."""
    config_file = Path(config_path)

    if not config_file.exists():
        default_config = Config()
        save_config(default_config, config_path)
        print(f"Created default configuration file: {config_path}")
        return default_config

    with open(config_file, 'r', encoding='utf-8') as f:
        config_dict = yaml.safe_load(f) or {}

    unknown = sorted(set(config_dict) - set(Config().to_dict()))
    if unknown:
        raise ValueError(f"Unknown configuration keys in {config_path}: {unknown}")

    return Config(**config_dict)


def save_config(config: Config, config_path: str):
    """Save configuration to YAML file."""
    config_dict = config.to_dict()

    with open(config_path, 'w', encoding='utf-8') as f:
        yaml.dump(config_dict, f, default_flow_style=False, indent=2, allow_unicode=True)


def create_example_config() -> str:
    """Create an example configuration file."""
    example_config = """# Privacy Overlay Configuration

# Overlay asset
emoji_size: 200                  # Raster size in pixels (square, must be > 0)
glyph: ":)"                      # Symbol drawn on the backdrop; the font must cover it
font_path: null                  # TrueType font for the glyph; null uses Pillow's default
glyph_scale: 0.7                 # Glyph height relative to emoji_size
backdrop_color: [255, 255, 255, 255]
glyph_color: [0, 0, 0, 255]

# Placement policy
overlay_scale_factor: 2.0        # Overlay diameter = factor x larger face dimension

# Output settings
output_dir: "output"
output_prefix: "privacy_video_"

# Export settings
codec: "libx264"
mp4_crf: 20                      # H.264 quality (18-22 recommended)
"""

    return example_config


if __name__ == "__main__":
    # Generate example config when run directly
    example = create_example_config()
    with open("config_example.yaml", "w", encoding="utf-8") as f:
        f.write(example)
    print("Example configuration saved to config_example.yaml")
