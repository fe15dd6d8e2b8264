#!/usr/bin/env python3
"""
Remove every cached image variant under the images folder.

Originals are left in place; only files whose names carry the variant
separator are deleted. Variants are recomputed on the next request.

Run:
    python scripts/clear_image_cache.py [--images-folder ./images]
"""

import argparse
import sys

from aws_lambda_powertools import Logger

from imaging.infrastructure.cache.variant_cache import VariantCache
from imaging.models.errors import CacheError
from imaging.utils.settings import ImageSettings

logger = Logger(service="clear-image-cache")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Clear cached image variants")

    parser.add_argument(
        "--images-folder",
        default=None,
        help="Images root folder (defaults to IMAGES_FOLDER_PATH)",
    )

    return parser.parse_args(argv)


def clear_cache(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    root = args.images_folder or ImageSettings.from_env().images_folder_path

    logger.info("Clearing image cache", extra={"images_folder": root})

    try:
        removed = VariantCache(root).clear()
    except CacheError as exc:
        logger.error(
            "Image cache clear failed",
            extra={"error": exc.message, "details": exc.details},
        )
        return 1

    logger.info("Image cache cleared", extra={"removed": removed})
    return 0


if __name__ == "__main__":
    sys.exit(clear_cache())
