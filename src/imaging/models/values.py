"""Small value types shared by the image subsystem.

Each type has a canonical text form that appears in URLs, cache filenames
and signed payloads, so the string conversions here are part of the wire
contract and must stay stable.
"""

import re
import struct
from enum import Enum

from pydantic import BaseModel, ConfigDict, NonNegativeInt

from imaging.models.errors import (
    ImageFitUnsupportedError,
    ImageFormatUnsupportedError,
    ValidationError,
)
from imaging.utils.constants import (
    FORMAT_MIME_TYPE_MAP,
    FORMAT_PIL_NAME_MAP,
    PIL_FORMAT_ALIASES,
)

_DIGITS = re.compile(r"^[0-9]{1,9}$")
_RGB_TEXT = re.compile(r"^rgb\((.*)\)$")
_RGB_BINARY = struct.Struct("<III")


class ImageFormat(str, Enum):
    """Supported encodings for stored and served images."""

    JPEG = "jpeg"
    WEBP = "webp"
    PNG = "png"

    @classmethod
    def parse(cls, value: str) -> "ImageFormat":
        try:
            return cls(value)
        except ValueError as exc:
            raise ImageFormatUnsupportedError(details={"format": value}) from exc

    @classmethod
    def from_pil(cls, pil_format: str | None) -> "ImageFormat":
        """Map a Pillow format name (e.g. ``"JPEG"``) to an ImageFormat."""
        if pil_format in PIL_FORMAT_ALIASES:
            return cls(PIL_FORMAT_ALIASES[pil_format])
        for fmt, name in FORMAT_PIL_NAME_MAP.items():
            if name == pil_format:
                return cls(fmt)
        raise ImageFormatUnsupportedError(details={"format": pil_format})

    @property
    def extension(self) -> str:
        return "." + self.value

    @property
    def mime_type(self) -> str:
        return FORMAT_MIME_TYPE_MAP[self.value]

    @property
    def pil_name(self) -> str:
        return FORMAT_PIL_NAME_MAP[self.value]


class ImageFit(str, Enum):
    """How an image is fitted into a target box.

    COVER fills the box exactly; the image may be shrunk, enlarged
    and/or cropped. CONTAIN fits the image inside the box without
    enlarging or cropping it.
    """

    COVER = "cover"
    CONTAIN = "contain"

    @classmethod
    def default(cls) -> "ImageFit":
        return cls.CONTAIN

    @classmethod
    def parse(cls, value: str) -> "ImageFit":
        try:
            return cls(value)
        except ValueError as exc:
            raise ImageFitUnsupportedError(details={"fit": value}) from exc


class ImageSize(BaseModel):
    """Width and height of an image in pixels.

    A size with either dimension 0 is "zero" and means the original
    dimensions of the image.
    """

    model_config = ConfigDict(frozen=True)

    width: NonNegativeInt = 0
    height: NonNegativeInt = 0

    @property
    def zero(self) -> bool:
        return self.width == 0 or self.height == 0

    def __str__(self) -> str:
        # "400" for a 400x400 box, "400x600" otherwise.
        if self.width == self.height:
            return str(self.width)
        return f"{self.width}x{self.height}"

    @classmethod
    def parse(cls, text: str) -> "ImageSize":
        """Parse the canonical text form, e.g. ``"300"`` or ``"300x400"``."""
        i = text.find("x")
        if i == -1:
            width = _parse_dimension(text)
            return cls(width=width, height=width)

        if len(text) < i + 2:
            raise ValidationError(message="Invalid image size", details={"size": text})

        return cls(
            width=_parse_dimension(text[:i]),
            height=_parse_dimension(text[i + 1 :]),
        )


def _parse_dimension(text: str) -> int:
    if not _DIGITS.match(text):
        raise ValidationError(message="Invalid image size", details={"size": text})
    return int(text)


class RGB(BaseModel):
    """An RGB color with channels in the range (0, 255).

    Text form is ``rgb(r,g,b)``; binary form is three little-endian
    unsigned 32-bit integers (12 bytes), used for persistence.
    """

    model_config = ConfigDict(frozen=True)

    red: NonNegativeInt = 0
    green: NonNegativeInt = 0
    blue: NonNegativeInt = 0

    def __str__(self) -> str:
        return f"rgb({self.red},{self.green},{self.blue})"

    @classmethod
    def parse(cls, text: str) -> "RGB":
        match = _RGB_TEXT.match(text)
        if match is None:
            raise ValidationError(message="Invalid RGB value", details={"rgb": text})

        parts = [part.strip() for part in match.group(1).split(",")]
        if len(parts) != 3 or not all(_DIGITS.match(part) for part in parts):
            raise ValidationError(message="Invalid RGB value", details={"rgb": text})

        red, green, blue = (int(part) for part in parts)
        return cls(red=red, green=green, blue=blue)

    def to_bytes(self) -> bytes:
        return _RGB_BINARY.pack(self.red, self.green, self.blue)

    @classmethod
    def from_bytes(cls, data: bytes) -> "RGB":
        if len(data) < _RGB_BINARY.size:
            raise ValueError("RGB source value is too short")
        red, green, blue = _RGB_BINARY.unpack_from(data)
        return cls(red=red, green=green, blue=blue)


def contain_size(
    image_width: int,
    image_height: int,
    box_width: int,
    box_height: int,
) -> tuple[int, int]:
    """Return the size of an image scaled to fit inside a box.

    The aspect ratio is kept and the image is never enlarged.
    """
    x, y = float(image_width), float(image_height)
    if image_width > box_width:
        scale = box_width / image_width
        x = scale * image_width
        y = scale * image_height
    if y > box_height:
        scale = box_height / y
        x = scale * x
        y = scale * y
    return int(x), int(y)
