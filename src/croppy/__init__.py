"""croppy: on-demand image derivatives addressed through the URL path."""

from croppy.core import Croppy
from croppy.config.schema import CroppyConfig
from croppy.types import Delivery, Derivative, Outcome, TransformRequest

__version__ = "0.1.0"

__all__ = [
    "Croppy",
    "CroppyConfig",
    "Delivery",
    "Derivative",
    "Outcome",
    "TransformRequest",
]
