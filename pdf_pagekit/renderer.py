"""Page rasterization helpers shared by thumbnails, previews and exports."""

from __future__ import annotations

import io
from typing import Literal, Optional, Tuple

from .backends.base import ParsedDocument
from .exceptions import RenderError
from .types import RasterImage

RasterFormat = Literal["PNG", "JPEG"]


def encode_raster(
    raster: RasterImage,
    fmt: RasterFormat = "PNG",
    *,
    quality: Optional[int] = None,
) -> bytes:
    """Encode *raster* as PNG (lossless) or JPEG (lossy, for previews)."""

    output = io.BytesIO()
    save_kwargs = {"quality": quality} if fmt == "JPEG" and quality else {}
    try:
        raster.image.save(output, format=fmt, **save_kwargs)
    except Exception as exc:
        raise RenderError(f"Failed to encode page image as {fmt}.") from exc
    return output.getvalue()


def render_page_to_bytes(
    document: ParsedDocument,
    page_number: int,
    scale: float,
    fmt: RasterFormat = "JPEG",
    *,
    quality: Optional[int] = None,
) -> Tuple[bytes, int, int]:
    """Render one page, encode it and free the raster before returning.

    Returns:
        ``(encoded_bytes, pixel_width, pixel_height)``
    """

    with document.render(page_number, scale) as raster:
        data = encode_raster(raster, fmt, quality=quality)
        return data, raster.width, raster.height


__all__ = ["RasterFormat", "encode_raster", "render_page_to_bytes"]
