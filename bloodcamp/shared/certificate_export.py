from __future__ import annotations

import logging
from dataclasses import dataclass
from io import BytesIO
from typing import Optional

from PIL import Image

from .certificate_layout import (
    FORMAT_JPG,
    FORMAT_PNG,
    JPEG_QUALITY,
    download_filename,
)
from .certificate_render import CertificateRenderState

logger = logging.getLogger("bloodcamp.certificates")

_MIMETYPES = {FORMAT_PNG: "image/png", FORMAT_JPG: "image/jpeg"}


class CertificateExportError(ValueError):
    pass


@dataclass(frozen=True)
class ExportResult:
    data: bytes
    mimetype: str
    filename: str


def flatten_on_white(canvas: Image.Image) -> Image.Image:
    """Composite onto an opaque white surface of the same size, unscaled."""
    surface = Image.new("RGB", canvas.size, (255, 255, 255))
    rgba = canvas.convert("RGBA")
    surface.paste(rgba, (0, 0), rgba)
    return surface


def encode_canvas(canvas: Image.Image, fmt: str) -> bytes:
    buf = BytesIO()
    if fmt == FORMAT_PNG:
        canvas.save(buf, format="PNG")
    elif fmt == FORMAT_JPG:
        flatten_on_white(canvas).save(buf, format="JPEG", quality=JPEG_QUALITY)
    else:
        raise CertificateExportError(f"Unsupported certificate format: {fmt!r}")
    return buf.getvalue()


def export_certificate(state: CertificateRenderState, fmt: str) -> Optional[ExportResult]:
    """Encode the rendered certificate, or return None before render completes."""
    fmt = (fmt or "").strip().lower()
    if fmt == "jpeg":
        fmt = FORMAT_JPG
    if not state.layout.supports(fmt):
        raise CertificateExportError(
            f"Format {fmt!r} is not offered by layout {state.layout.name!r}"
        )
    if not state.render_complete or state.canvas is None:
        logger.info("[CERT-EXPORT] skipped format=%s reason=not-rendered", fmt)
        return None
    return ExportResult(
        data=encode_canvas(state.canvas, fmt),
        mimetype=_MIMETYPES[fmt],
        filename=download_filename(fmt),
    )
