"""Pillow implementation of the option vocabulary.

    (default)            both dimensions: scale and crop to fill exactly
    resize               fit inside the box, keep aspect
    pad(r,g,b)           fit inside, then letterbox to the box with a colour
    quadrant(T|B|L|R|C)  which part survives a fill crop
    trim(x1,y1,x2,y2)    crop a pixel box from the source first
    trim_perc(...)       same, with fractions of the source size
    quality(N)           JPEG quality
    interlace(0|1)       progressive JPEG
    upscale(0|1)         allow output larger than the source
"""

from __future__ import annotations

import io
import logging

from PIL import Image, ImageOps

from croppy.types import ProcessorConfig, Quadrant

logger = logging.getLogger(__name__)

_CENTERING: dict[str, tuple[float, float]] = {
    Quadrant.TOP: (0.5, 0.0),
    Quadrant.BOTTOM: (0.5, 1.0),
    Quadrant.LEFT: (0.0, 0.5),
    Quadrant.RIGHT: (1.0, 0.5),
    Quadrant.CENTER: (0.5, 0.5),
}

_RESAMPLE = Image.Resampling.LANCZOS


class PillowProcessor:
    """Default ImageProcessor."""

    def process(
        self,
        source: bytes,
        width: int | None,
        height: int | None,
        options: dict[str, list[str]],
        config: ProcessorConfig,
    ) -> bytes:
        img = Image.open(io.BytesIO(source))
        fmt = img.format or "PNG"
        img.load()
        img = ImageOps.exif_transpose(img)

        img = _trim(img, options)

        if width and height:
            if "resize" in options:
                img = _fit_inside(img, width, height, config.upscale)
            elif "pad" in options:
                img = _pad(img, width, height, options["pad"], config.upscale)
            else:
                img = _fill(img, width, height, options.get("quadrant"), config.upscale)
        elif width or height:
            img = _scale(img, width, height, config.upscale)

        logger.debug("Processed %s image to %dx%d", fmt, img.width, img.height)
        return _encode(img, fmt, config)


def _trim(img: Image.Image, options: dict[str, list[str]]) -> Image.Image:
    if "trim_perc" in options:
        x1, y1, x2, y2 = (float(v) for v in _four(options["trim_perc"], "trim_perc"))
        box = (x1 * img.width, y1 * img.height, x2 * img.width, y2 * img.height)
    elif "trim" in options:
        box = tuple(float(v) for v in _four(options["trim"], "trim"))
    else:
        return img
    left, top, right, bottom = (round(v) for v in box)
    left, top = max(0, left), max(0, top)
    right, bottom = min(img.width, right), min(img.height, bottom)
    if right <= left or bottom <= top:
        raise ValueError(f"Empty trim box {box} for {img.width}x{img.height} image")
    return img.crop((left, top, right, bottom))


def _four(args: list[str], name: str) -> list[str]:
    if len(args) != 4:
        raise ValueError(f"{name} takes 4 arguments, got {len(args)}")
    return args


def _scale(img: Image.Image, width: int | None, height: int | None, upscale: bool) -> Image.Image:
    if width:
        ratio = width / img.width
    else:
        ratio = height / img.height  # type: ignore[operator]
    if ratio > 1 and not upscale:
        return img
    size = (max(1, round(img.width * ratio)), max(1, round(img.height * ratio)))
    return img.resize(size, _RESAMPLE)


def _fit_inside(img: Image.Image, width: int, height: int, upscale: bool) -> Image.Image:
    ratio = min(width / img.width, height / img.height)
    if ratio > 1 and not upscale:
        return img
    size = (max(1, round(img.width * ratio)), max(1, round(img.height * ratio)))
    return img.resize(size, _RESAMPLE)


def _fill(
    img: Image.Image,
    width: int,
    height: int,
    quadrant: list[str] | None,
    upscale: bool,
) -> Image.Image:
    if not upscale and (img.width < width or img.height < height):
        # Keep the requested aspect ratio but never enlarge
        factor = min(img.width / width, img.height / height)
        width, height = max(1, round(width * factor)), max(1, round(height * factor))
    key = quadrant[0].upper() if quadrant else Quadrant.CENTER
    centering = _CENTERING.get(key, _CENTERING[Quadrant.CENTER])
    return ImageOps.fit(img, (width, height), method=_RESAMPLE, centering=centering)


def _pad(
    img: Image.Image,
    width: int,
    height: int,
    color_args: list[str],
    upscale: bool,
) -> Image.Image:
    color = tuple(int(c) for c in color_args[:3]) if len(color_args) >= 3 else (255, 255, 255)
    fitted = _fit_inside(img, width, height, upscale)
    mode = "RGBA" if "A" in fitted.getbands() or "transparency" in fitted.info else "RGB"
    fitted = fitted.convert(mode)
    canvas = Image.new(mode, (width, height), color + (255,) if mode == "RGBA" else color)
    offset = ((width - fitted.width) // 2, (height - fitted.height) // 2)
    canvas.paste(fitted, offset)
    return canvas


def _encode(img: Image.Image, fmt: str, config: ProcessorConfig) -> bytes:
    buf = io.BytesIO()
    if fmt in ("JPEG", "MPO"):
        if img.mode not in ("RGB", "L"):
            img = img.convert("RGB")
        img.save(
            buf,
            format="JPEG",
            quality=config.jpeg_quality,
            progressive=config.interlace,
            optimize=True,
        )
    elif fmt == "GIF":
        img.save(buf, format="GIF")
    else:
        img.save(buf, format=fmt, optimize=True)
    return buf.getvalue()
