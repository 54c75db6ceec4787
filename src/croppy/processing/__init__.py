"""Image processing: the processor protocol and its Pillow implementation."""

from croppy.processing.base import ImageProcessor
from croppy.processing.pillow import PillowProcessor

__all__ = ["ImageProcessor", "PillowProcessor"]
