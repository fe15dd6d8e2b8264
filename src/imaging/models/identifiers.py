"""Image identifiers.

An ImageID is 12 bytes: an 8-byte big-endian timestamp in microseconds
followed by 4 random bytes. Its text form is 24 lowercase hex characters.
"""

import os
import re
import time
from typing import Any

from pydantic_core import core_schema

_ID_LENGTH = 12
_HEX_ID = re.compile(r"^[0-9a-f]{24}$")


class ImageID:
    """Immutable 12-byte image identifier."""

    __slots__ = ("_raw",)

    def __init__(self, raw: bytes) -> None:
        if len(raw) != _ID_LENGTH:
            raise ValueError(f"image id must be {_ID_LENGTH} bytes")
        self._raw = bytes(raw)

    @classmethod
    def new(cls) -> "ImageID":
        micros = time.time_ns() // 1000
        return cls(micros.to_bytes(8, "big") + os.urandom(4))

    @classmethod
    def from_string(cls, text: str) -> "ImageID":
        """Parse the 24-character hex form.

        Raises:
            ValueError: If text is not a valid image id
        """
        if not isinstance(text, str) or not _HEX_ID.match(text):
            raise ValueError(f"invalid image id: {text!r}")
        return cls(bytes.fromhex(text))

    @property
    def raw(self) -> bytes:
        return self._raw

    def __str__(self) -> str:
        return self._raw.hex()

    def __repr__(self) -> str:
        return f"ImageID({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ImageID):
            return NotImplemented
        return self._raw == other._raw

    def __lt__(self, other: "ImageID") -> bool:
        return self._raw < other._raw

    def __hash__(self) -> int:
        return hash(self._raw)

    @classmethod
    def __get_pydantic_core_schema__(cls, _source: Any, _handler: Any) -> core_schema.CoreSchema:
        # Accept ImageID instances or their hex text form; serialize as text.
        from_str = core_schema.no_info_plain_validator_function(cls._coerce)
        return core_schema.json_or_python_schema(
            json_schema=from_str,
            python_schema=from_str,
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )

    @classmethod
    def _coerce(cls, value: Any) -> "ImageID":
        if isinstance(value, ImageID):
            return value
        return cls.from_string(value)
