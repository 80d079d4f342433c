from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Optional

from PIL import Image, ImageDraw, ImageFilter

from .certificate_assets import AssetBundle, BackgroundResult, FontResult, FontType, font_covers
from .certificate_layout import CertificateLayout, apply_name_case

logger = logging.getLogger("bloodcamp.certificates")


def draw_certificate(
    name: str,
    background: Optional[Image.Image],
    font: FontType,
    layout: CertificateLayout,
) -> Image.Image:
    """Single draw pass onto a fresh transparent canvas.

    Pure with respect to its inputs, so identical inputs give identical
    pixels.
    """
    size = (layout.width, layout.height)
    canvas = Image.new("RGBA", size, (0, 0, 0, 0))
    if background is not None:
        backdrop = background.convert("RGBA")
        if backdrop.size != size:
            backdrop = backdrop.resize(size, Image.Resampling.LANCZOS)
        canvas.paste(backdrop, (0, 0))

    text = apply_name_case(name, layout.name_case)
    x, y = layout.text_position

    shadow_layer = Image.new("RGBA", size, (0, 0, 0, 0))
    dx, dy = layout.shadow_offset
    ImageDraw.Draw(shadow_layer).text(
        (x + dx, y + dy), text, font=font, fill=layout.shadow_color, anchor="mm"
    )
    if layout.shadow_blur:
        # canvas shadowBlur is twice the gaussian standard deviation
        shadow_layer = shadow_layer.filter(ImageFilter.GaussianBlur(layout.shadow_blur / 2))
    canvas = Image.alpha_composite(canvas, shadow_layer)

    ImageDraw.Draw(canvas).text((x, y), text, font=font, fill=layout.fill, anchor="mm")
    return canvas


@dataclass
class CertificateRenderState:
    """Readiness barrier in front of :func:`draw_certificate`.

    Every change to the name, visibility or either asset re-evaluates the
    barrier and, when it holds, redraws from scratch.
    """

    layout: CertificateLayout
    display_name: str = ""
    visible: bool = False
    font: Optional[FontType] = None
    font_fallback: bool = False
    background: Optional[Image.Image] = None
    font_ready: bool = False
    background_ready: bool = False
    render_complete: bool = False
    canvas: Optional[Image.Image] = None
    torn_down: bool = False
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    @property
    def background_missing(self) -> bool:
        return self.background_ready and self.background is None

    def can_draw(self) -> bool:
        return (
            not self.torn_down
            and self.font_ready
            and self.background_ready
            and self.visible
            and bool(self.display_name.strip())
        )

    def mark_font_ready(self, result: FontResult) -> None:
        with self._lock:
            if self.torn_down:
                return
            self.font = result.font
            self.font_fallback = result.fallback
            self.font_ready = True
            self._evaluate()

    def mark_background_ready(self, result: BackgroundResult) -> None:
        with self._lock:
            if self.torn_down:
                return
            self.background = result.image
            self.background_ready = True
            self._evaluate()

    def attach(self, bundle: AssetBundle) -> None:
        self.mark_font_ready(bundle.font)
        self.mark_background_ready(bundle.background)

    def set_name(self, display_name: str) -> None:
        with self._lock:
            self.display_name = display_name or ""
            self._evaluate()

    def set_visible(self, visible: bool) -> None:
        with self._lock:
            self.visible = bool(visible)
            self._evaluate()

    def teardown(self) -> None:
        with self._lock:
            self.torn_down = True
            self.render_complete = False
            self.canvas = None

    def _evaluate(self) -> None:
        if not self.can_draw():
            self.render_complete = False
            self.canvas = None
            return
        self.canvas = draw_certificate(
            self.display_name, self.background, self.font, self.layout
        )
        self.render_complete = True
        if not font_covers(self.font, self.display_name):
            logger.warning(
                "[CERT-FONT-COVERAGE] layout=%s font cannot draw every character of the name",
                self.layout.name,
            )
        logger.info(
            "[CERT-RENDER] layout=%s backdrop=%s fallback_font=%s",
            self.layout.name,
            "missing" if self.background is None else "ok",
            self.font_fallback,
        )
