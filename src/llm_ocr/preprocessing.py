"""Page image normalisation before upload.

Every adapter declares its inline image as ``image/png``, so whatever the
input format each page is re-encoded as PNG here.  Two optional steps keep
the payload small without losing content:

* Edge trimming: crops a uniform border (scanner margins, blank paper)
  by diffing against the top-left pixel colour.
* Downscaling: caps the long edge.  Vision models resample large images
  anyway, so sending more pixels only costs upload time.
"""

import io
from typing import Optional

from PIL import Image, ImageChops

# Pixels within this distance of the border colour count as background.
TRIM_TOLERANCE = 10


def _open(image_bytes: bytes) -> Image.Image:
    img = Image.open(io.BytesIO(image_bytes))
    img.load()
    return img


def _encode_png(img: Image.Image) -> bytes:
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def trim_edges(img: Image.Image) -> Image.Image:
    """Crop away a uniform border.  Blank images are returned unchanged."""
    rgb = img.convert("RGB")
    background = Image.new("RGB", rgb.size, rgb.getpixel((0, 0)))
    diff = ImageChops.difference(rgb, background).convert("L")
    bbox = diff.point(lambda v: 255 if v > TRIM_TOLERANCE else 0).getbbox()
    if bbox is None:
        return img
    return img.crop(bbox)


def downscale(img: Image.Image, max_size: int) -> Image.Image:
    """Shrink so the long edge is at most *max_size*, keeping the aspect ratio."""
    if max(img.size) <= max_size:
        return img
    resized = img.copy()
    resized.thumbnail((max_size, max_size), Image.Resampling.LANCZOS)
    return resized


def to_png(image_bytes: bytes) -> bytes:
    """Re-encode any Pillow-readable image as PNG."""
    img = _open(image_bytes)
    if img.mode not in ("RGB", "RGBA", "L", "LA"):
        img = img.convert("RGBA" if "A" in img.getbands() else "RGB")
    return _encode_png(img)


def prepare_page(
    image_bytes: bytes,
    trim: bool = True,
    max_size: Optional[int] = None,
) -> bytes:
    """Run the page pipeline and return PNG bytes ready for an adapter."""
    img = _open(to_png(image_bytes))
    if trim:
        img = trim_edges(img)
    if max_size is not None:
        img = downscale(img, max_size)
    return _encode_png(img)
