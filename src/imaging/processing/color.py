"""Average color of an image."""

from PIL import Image

from imaging.models.values import RGB
from imaging.utils.constants import COLOR_SAMPLES_PER_AXIS


def average_color(img: Image.Image) -> RGB:
    """Return the approximate average color of img.

    At most about 10^4 pixels are sampled on a regular grid. Each sample is
    premultiplied by its alpha and blended 50/50 into a running accumulator,
    and the three accumulators are finally scaled so that they sum to 255.
    Stored colors depend on this exact rule; do not replace it with an
    arithmetic mean.
    """
    width, height = img.size
    xstep = max(width // COLOR_SAMPLES_PER_AXIS, 1)
    ystep = max(height // COLOR_SAMPLES_PER_AXIS, 1)

    rgba = img if img.mode == "RGBA" else img.convert("RGBA")
    pixels = rgba.load()

    r = g = b = 0.0
    for i in range(0, width, xstep):
        for j in range(0, height, ystep):
            r2, g2, b2, a = pixels[i, j]
            # Fully transparent pixels contribute nothing.
            alpha = a / 255.0
            r = (r + r2 * alpha) / 2
            g = (g + g2 * alpha) / 2
            b = (b + b2 * alpha) / 2

    total = r + g + b
    if total <= 0:
        return RGB()

    return RGB(
        red=int(r / total * 255.0),
        green=int(g / total * 255.0),
        blue=int(b / total * 255.0),
    )
