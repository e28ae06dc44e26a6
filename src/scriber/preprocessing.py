"""Clean-up of note photos before they are sent to the model.

Handwritten notes usually arrive as phone photos pasted into the vault:
rotated via EXIF, far larger than any vision API will look at, and shot on
greyish paper.  Each step below is a plain Pillow operation.

Pipeline
--------
1. Orientation   - apply the EXIF orientation tag so the page is upright
                   before anything else looks at it.

2. Mode          - palette, alpha and CMYK images are flattened to RGB
                   (greyscale stays greyscale).  Colour is kept because red
                   corrections and highlighter carry meaning.

3. Downscale     - the long edge is capped at ``MAX_EDGE`` pixels.  Vision
                   APIs resize larger uploads anyway; sending less keeps
                   request bodies small.

4. Auto-contrast - stretches the histogram, ignoring the extreme 0.5 % of
                   pixels, to lift faint pencil off yellowed paper.

5. Unsharp mask  - crisper strokes without amplifying the paper texture.
"""

import io

from PIL import Image, ImageFilter, ImageOps

MAX_EDGE = 2048


def preprocess_for_ocr(image_bytes: bytes) -> bytes:
    """Run the clean-up pipeline and return the result as PNG bytes."""
    img = Image.open(io.BytesIO(image_bytes))
    img = ImageOps.exif_transpose(img)

    if img.mode not in ("RGB", "L"):
        img = img.convert("RGB")

    if max(img.size) > MAX_EDGE:
        img.thumbnail((MAX_EDGE, MAX_EDGE), Image.Resampling.LANCZOS)

    img = ImageOps.autocontrast(img, cutoff=0.5)
    # threshold=3 leaves the smooth paper background alone
    img = img.filter(ImageFilter.UnsharpMask(radius=1.5, percent=150, threshold=3))

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def prepare_image(data: bytes, extension: str, preprocess: bool = True) -> tuple[bytes, str]:
    """Return the bytes and extension to upload for one image."""
    if not preprocess:
        return data, extension
    return preprocess_for_ocr(data), "png"
