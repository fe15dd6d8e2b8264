"""Decode, resize and encode images with Pillow."""

import io

from aws_lambda_powertools import Logger
from PIL import Image, ImageOps, UnidentifiedImageError

from imaging.models.errors import ImageDecodeError
from imaging.models.values import ImageFit, ImageFormat, ImageSize, contain_size
from imaging.utils.constants import JPEG_QUALITY, WEBP_QUALITY

logger = Logger(UTC=True)

_PNG_MODES = frozenset({"1", "L", "LA", "I", "P", "RGB", "RGBA"})


def decode(data: bytes) -> tuple[Image.Image, ImageFormat]:
    """Decode image bytes and detect their format.

    Raises:
        ImageDecodeError: If data is not a readable image
        ImageFormatUnsupportedError: If the image is not jpeg, webp or png
    """
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        SyntaxError,
        ValueError,
    ) as exc:
        logger.warning("Image decode failed", extra={"size": len(data), "error": str(exc)})
        raise ImageDecodeError(details={"size": len(data)}) from exc

    return img, ImageFormat.from_pil(img.format)


def output_size(width: int, height: int, size: ImageSize, fit: ImageFit) -> tuple[int, int]:
    """Dimensions of a width x height image after resize() into size."""
    if size.zero:
        return width, height

    if fit is ImageFit.COVER:
        return size.width, size.height

    out_width, out_height = contain_size(width, height, size.width, size.height)
    return max(out_width, 1), max(out_height, 1)


def resize(img: Image.Image, size: ImageSize, fit: ImageFit) -> Image.Image:
    """Fit img into a box of the given size.

    A zero size returns img unchanged.
    """
    target = output_size(img.width, img.height, size, fit)
    if target == img.size:
        return img

    if fit is ImageFit.COVER:
        return ImageOps.fit(img, target, method=Image.Resampling.LANCZOS)
    return img.resize(target, Image.Resampling.LANCZOS)


def encode(img: Image.Image, image_format: ImageFormat) -> bytes:
    """Encode img in the given format, dropping embedded metadata."""
    img = _convert_for(img, image_format)
    buf = io.BytesIO()

    if image_format is ImageFormat.JPEG:
        img.save(buf, format=image_format.pil_name, quality=JPEG_QUALITY, optimize=True)
    elif image_format is ImageFormat.WEBP:
        img.save(buf, format=image_format.pil_name, quality=WEBP_QUALITY)
    else:
        img.save(buf, format=image_format.pil_name, optimize=True)

    return buf.getvalue()


def transform(
    data: bytes,
    *,
    size: ImageSize,
    fit: ImageFit | None,
    image_format: ImageFormat,
) -> bytes:
    """Resize and re-encode encoded image bytes.

    When no resize is needed and the bytes already have the target format,
    they are returned untouched.
    """
    img, source_format = decode(data)
    if size.zero and source_format is image_format:
        return data

    resized = resize(img, size, fit or ImageFit.default())
    return encode(resized, image_format)


def _has_alpha(img: Image.Image) -> bool:
    return img.mode in ("RGBA", "LA", "PA") or (img.mode == "P" and "transparency" in img.info)


def _convert_for(img: Image.Image, image_format: ImageFormat) -> Image.Image:
    if image_format is ImageFormat.JPEG:
        return img if img.mode in ("RGB", "L") else img.convert("RGB")

    if image_format is ImageFormat.WEBP:
        if img.mode in ("RGB", "RGBA"):
            return img
        return img.convert("RGBA" if _has_alpha(img) else "RGB")

    if img.mode in _PNG_MODES:
        return img
    return img.convert("RGBA" if _has_alpha(img) else "RGB")
