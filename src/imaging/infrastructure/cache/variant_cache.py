"""Filesystem cache of derived image variants.

Variants are stored next to the original image in the same shard folder,
named ``{stem}_{size}_{fit}{ext}``. An original-size request resolves to
``{stem}{ext}``, which is where the disk store keeps the original itself.
Nothing in the cache is authoritative: every entry can be recomputed from
the image record and its original bytes.
"""

import os
from collections.abc import Callable
from pathlib import Path

from aws_lambda_powertools import Logger

from imaging.infrastructure.storage.disk_store import write_file_atomic
from imaging.infrastructure.storage.paths import id_to_folder
from imaging.models.errors import CacheError
from imaging.models.identifiers import ImageID
from imaging.models.request import ImageRequest
from imaging.utils.constants import VARIANT_SEPARATOR

logger = Logger(UTC=True)


class VariantCache:
    """Reads, writes and purges cached variants under a root directory."""

    def __init__(self, root: str | Path, *, enabled: bool = True) -> None:
        self._root = Path(root)
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    def path_for(self, request: ImageRequest) -> Path:
        folder, _ = id_to_folder(request.id)
        return self._root / folder / request.filename()

    def lookup(self, request: ImageRequest) -> bytes | None:
        """Return cached bytes, or None on a miss.

        Read errors other than a missing file are logged and reported as a
        miss so the caller recomputes the variant.
        """
        if not self._enabled:
            return None

        path = self.path_for(request)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.warning(
                "Cached image read failed",
                extra={"path": str(path), "error": str(exc)},
            )
            return None

    def store(self, request: ImageRequest, data: bytes) -> None:
        """Write a computed variant to the cache.

        Original-size requests are not written: their filename lacks the
        variant separator, so purge() could never remove them.

        Raises:
            CacheError: If the file cannot be written
        """
        if not self._enabled or request.size.zero:
            return

        path = self.path_for(request)
        try:
            write_file_atomic(path, data)
        except OSError as exc:
            raise CacheError(
                message="Unable to write cached image",
                details={"image_id": str(request.id)},
            ) from exc

    def purge(self, image_id: ImageID) -> int:
        """Remove every cached variant of one image.

        Only files that start with the image's stem and contain the variant
        separator are removed, which leaves the original file in place.

        Returns:
            Number of files removed

        Raises:
            CacheError: If a matching file cannot be removed
        """
        folder, stem = id_to_folder(image_id)
        return self._remove_matching(
            self._root / folder,
            lambda name: name.startswith(stem) and VARIANT_SEPARATOR in name,
            image_id=str(image_id),
        )

    def clear(self) -> int:
        """Remove every cached variant of every image under the root.

        Returns:
            Number of files removed

        Raises:
            CacheError: If a matching file cannot be removed
        """
        return self._remove_matching(
            self._root,
            lambda name: VARIANT_SEPARATOR in name,
            image_id=None,
        )

    def _remove_matching(
        self,
        top: Path,
        matches: Callable[[str], bool],
        *,
        image_id: str | None,
    ) -> int:
        removed = 0
        if not top.is_dir():
            return removed

        def _on_walk_error(exc: OSError) -> None:
            logger.warning("Skipping unwalkable directory", extra={"error": str(exc)})

        for dirpath, _, filenames in os.walk(top, onerror=_on_walk_error):
            for name in filenames:
                # Dotfiles are in-flight temporary writes.
                if name.startswith(".") or not matches(name):
                    continue
                path = Path(dirpath) / name
                logger.debug("Deleting cached image", extra={"path": str(path)})
                try:
                    path.unlink(missing_ok=True)
                except OSError as exc:
                    raise CacheError(
                        message="Failed to delete cached image",
                        details={"image_id": image_id, "path": str(path)},
                    ) from exc
                removed += 1

        return removed
