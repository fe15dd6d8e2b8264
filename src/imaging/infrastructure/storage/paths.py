"""Id-derived storage locations shared by stores and the variant cache."""

import hashlib

from imaging.models.identifiers import ImageID
from imaging.models.values import ImageFormat
from imaging.utils.constants import SHARD_PREFIX_LENGTH


def id_to_folder(image_id: ImageID) -> tuple[str, str]:
    """Return the shard folder and filename stem for an image.

    The stem is the SHA-1 hex digest of the id bytes and the folder is its
    first two characters, which bounds each directory to 1/256 of the images.
    """
    stem = hashlib.sha1(image_id.raw).hexdigest()
    return stem[:SHARD_PREFIX_LENGTH], stem


def original_path(image_id: ImageID, image_format: ImageFormat) -> str:
    """Relative path of the original image, e.g. ``"ab/ab12...ef.jpeg"``."""
    folder, stem = id_to_folder(image_id)
    return f"{folder}/{stem}{image_format.extension}"
