"""
Error types for the privacy overlay pipeline.

Malformed detection entries are never raised; they are dropped during parsing.
Everything here is a request-level failure the caller has to handle.
"""


class PrivacyOverlayError(Exception):
    """Base class for request-level failures."""


class InvalidAssetSizeError(PrivacyOverlayError, ValueError):
    """Requested overlay raster size is not a positive integer."""


class MissingGlyphError(PrivacyOverlayError, ValueError):
    """The overlay font has no glyph for a character of the overlay symbol."""


class InvalidRequestError(PrivacyOverlayError, ValueError):
    """Processing request is missing its input path or face list."""


class RenderError(PrivacyOverlayError):
    """The rendering stage failed after a composition request was built."""

    def __init__(self, message: str, input_path: str = None):
        super().__init__(message)
        self.input_path = input_path
