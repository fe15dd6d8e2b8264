"""Image Handling Service Package."""

__version__ = "1.0.0"
__description__ = (
    "Image upload, signed serving and variant caching on disk or S3-compatible storage"
)

__all__ = ["handlers", "imaging"]
