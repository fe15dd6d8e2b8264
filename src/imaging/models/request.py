"""Incoming image requests.

An image URL has the form ``{id}.{ext}?size={WxH|N}&fit={fit}&sig={mac}``.
ImageRequest is the parsed form of that URL; signing lives in
``imaging.security.signer``.
"""

import base64
import binascii
import re
from collections.abc import Mapping
from urllib.parse import parse_qs, urlsplit

from pydantic import BaseModel, ConfigDict, Field

from imaging.infrastructure.storage.paths import id_to_folder
from imaging.models.errors import BadURLError, ValidationError
from imaging.models.identifiers import ImageID
from imaging.models.values import ImageFit, ImageFormat, ImageSize
from imaging.utils.constants import VARIANT_SEPARATOR

_SIGNATURE = re.compile(r"^[A-Za-z0-9_-]*$")


class ImageRequest(BaseModel):
    """A request for an image, possibly resized and re-encoded."""

    model_config = ConfigDict(frozen=True)

    id: ImageID
    size: ImageSize = Field(default_factory=ImageSize)
    fit: ImageFit | None = None
    format: ImageFormat
    signature: bytes = b""

    @property
    def effective_fit(self) -> ImageFit | None:
        """Fit actually applied: None for original-size requests."""
        if self.size.zero:
            return None
        return self.fit or ImageFit.default()

    def hash_data(self) -> bytes:
        """Canonical payload covered by the request signature."""
        fit = self.effective_fit
        fit_text = fit.value if fit is not None else ""
        # size is "0" when unspecified
        return f"{self.id}{self.size}{fit_text}{self.format.extension}".encode()

    def filename(self) -> str:
        """Cache filename, e.g. ``"{stem}_300x400_contain.jpeg"``."""
        _, name = id_to_folder(self.id)
        fit = self.effective_fit
        if fit is not None:
            name += f"{VARIANT_SEPARATOR}{self.size}{VARIANT_SEPARATOR}{fit.value}"
        return name + self.format.extension

    def query_params(self) -> dict[str, str]:
        """Non-default query parameters, without the signature."""
        params: dict[str, str] = {}
        if not self.size.zero:
            params["size"] = str(self.size)
            params["fit"] = (self.fit or ImageFit.default()).value
        return params

    @classmethod
    def from_parts(cls, path: str, query: Mapping[str, str]) -> "ImageRequest":
        """Build a request from a URL path and its query parameters.

        Raises:
            BadURLError: If the path, id, size or signature is malformed
            ImageFormatUnsupportedError: If the extension is not a known format
            ImageFitUnsupportedError: If fit is present but unknown
            ValidationError: If a fit is given without a size
        """
        last = path.rsplit("/", 1)[-1]
        id_text, sep, extension = last.partition(".")
        if not sep:
            raise BadURLError(details={"path": path})

        try:
            image_id = ImageID.from_string(id_text)
        except ValueError as exc:
            raise BadURLError(details={"path": path}) from exc

        image_format = ImageFormat.parse(extension)

        size = ImageSize()
        size_text = query.get("size") or ""
        if size_text:
            try:
                size = ImageSize.parse(size_text)
            except ValidationError as exc:
                raise BadURLError(details={"size": size_text}) from exc

        fit_text = query.get("fit") or ""
        fit = ImageFit.parse(fit_text) if fit_text else None

        if size.zero and fit is not None:
            raise ValidationError(
                message="Image fit requires a non-zero image size",
                details={"fit": fit_text},
            )
        if not size.zero and fit is None:
            fit = ImageFit.default()

        signature = _decode_signature(query.get("sig") or "")

        return cls(
            id=image_id,
            size=size,
            fit=fit,
            format=image_format,
            signature=signature,
        )

    @classmethod
    def from_url(cls, url: str) -> "ImageRequest":
        parts = urlsplit(url)
        query = {key: values[0] for key, values in parse_qs(parts.query).items()}
        return cls.from_parts(parts.path, query)


def _decode_signature(text: str) -> bytes:
    # URL-safe base64 without padding.
    if not _SIGNATURE.match(text):
        raise BadURLError(details={"sig": "malformed"})
    try:
        return base64.b64decode(text + "=" * (-len(text) % 4), altchars=b"-_", validate=True)
    except (binascii.Error, ValueError) as exc:
        raise BadURLError(details={"sig": "malformed"}) from exc


def encode_signature(signature: bytes) -> str:
    return base64.urlsafe_b64encode(signature).rstrip(b"=").decode("ascii")
