"""Pillow helpers that turn an original image into width-bounded derivatives."""

import io

from PIL import Image


def render_thumbnail(data: bytes, width: int) -> bytes:
    """
    Resize an image so it is at most width pixels wide.

    The aspect ratio is preserved and images already narrower than width
    are left at their size. The output keeps the source format.

    Raises:
        PIL.UnidentifiedImageError: If data is not a readable image
        OSError: If the image cannot be decoded or encoded
        PIL.Image.DecompressionBombError: If the image exceeds Pillow's pixel limit
    """
    with Image.open(io.BytesIO(data)) as image:
        image_format = image.format or "PNG"
        image.thumbnail((width, image.height))
        buffer = io.BytesIO()
        image.save(buffer, format=image_format)
    return buffer.getvalue()
