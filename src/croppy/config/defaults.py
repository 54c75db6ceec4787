"""Package-level default configuration values."""

from __future__ import annotations

from typing import Any

# Routing
DEFAULT_PATH_PATTERNS = [r"^(.+)$"]
DEFAULT_IGNORE: str | None = None
DEFAULT_URL_PREFIX: str | None = None

# Signing
DEFAULT_SIGNING_KEY: str | None = None

# Processor output
DEFAULT_JPEG_QUALITY = 95
DEFAULT_INTERLACE = True
DEFAULT_UPSCALE = False

# Storage
DEFAULT_SRC_DIR = "public"
DEFAULT_CROPS_DIR = "public"
DEFAULT_CROPS_SUBDIR: str | None = None

# Limits
DEFAULT_MAX_CROPS = 12
DEFAULT_PROCESSING_TIMEOUT = 30.0

# Log level
DEFAULT_LOG_LEVEL = "WARNING"


def get_defaults() -> dict[str, Any]:
    """Return all defaults as a flat dictionary for merging."""
    return {
        "path": list(DEFAULT_PATH_PATTERNS),
        "ignore": DEFAULT_IGNORE,
        "url_prefix": DEFAULT_URL_PREFIX,
        "signing_key": DEFAULT_SIGNING_KEY,
        "jpeg_quality": DEFAULT_JPEG_QUALITY,
        "interlace": DEFAULT_INTERLACE,
        "upscale": DEFAULT_UPSCALE,
        "src_dir": DEFAULT_SRC_DIR,
        "crops_dir": DEFAULT_CROPS_DIR,
        "crops_subdir": DEFAULT_CROPS_SUBDIR,
        "max_crops": DEFAULT_MAX_CROPS,
        "processing_timeout": DEFAULT_PROCESSING_TIMEOUT,
        "log_level": DEFAULT_LOG_LEVEL,
    }
