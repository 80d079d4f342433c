"""Background and font loading for certificate rendering.

Both assets load concurrently and each signals readiness on its own. Neither
failure is fatal: a missing font falls back to an installed bold face that can
draw Devanagari, and a missing background leaves the canvas without a
backdrop.
"""

from __future__ import annotations

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional

from PIL import Image, ImageDraw, ImageFont, UnidentifiedImageError, features

from .certificate_layout import DEVANAGARI_SAMPLE, FALLBACK_FONT_PATHS, NAME_FONT_SIZE

logger = logging.getLogger("bloodcamp.certificates")

FontType = ImageFont.FreeTypeFont | ImageFont.ImageFont

_cache_lock = threading.Lock()
_background_cache: dict[tuple[str, float], Image.Image] = {}
_font_cache: dict[tuple[str, int], FontType] = {}
_fallback_cache: dict[int, FontType] = {}

# U+FFFF is never mapped, so it always draws the font's missing-glyph box
_MISSING_GLYPH = "\uffff"


@dataclass(frozen=True)
class FontResult:
    font: FontType
    fallback: bool


@dataclass(frozen=True)
class BackgroundResult:
    image: Optional[Image.Image]

    @property
    def missing(self) -> bool:
        return self.image is None


@dataclass(frozen=True)
class AssetBundle:
    font: FontResult
    background: BackgroundResult


def load_background(path: str | None) -> BackgroundResult:
    """Load the template bitmap once per (path, mtime) and share it."""
    if not path:
        logger.error("[CERT-ASSET-FAIL] background path not configured")
        return BackgroundResult(image=None)
    try:
        mtime = os.path.getmtime(path)
    except OSError as exc:
        logger.error("[CERT-ASSET-FAIL] background path=%s error=%s", path, exc)
        return BackgroundResult(image=None)
    key = (path, mtime)
    with _cache_lock:
        cached = _background_cache.get(key)
    if cached is not None:
        return BackgroundResult(image=cached)
    try:
        with Image.open(path) as raw:
            image = raw.convert("RGBA")
    except (UnidentifiedImageError, OSError) as exc:
        logger.error("[CERT-ASSET-FAIL] background path=%s error=%s", path, exc)
        return BackgroundResult(image=None)
    with _cache_lock:
        _background_cache[key] = image
    return BackgroundResult(image=image)


def _truetype(path: str, size: int) -> FontType:
    # raqm shapes conjuncts and vowel signs; the basic engine draws them apart
    if features.check("raqm"):
        return ImageFont.truetype(path, size, layout_engine=ImageFont.Layout.RAQM)
    return ImageFont.truetype(path, size)


def _glyph_signature(font: FontType, char: str) -> tuple:
    left, top, right, bottom = font.getbbox(char)
    image = Image.new("L", (max(right - left, 1), max(bottom - top, 1)), 0)
    ImageDraw.Draw(image).text((-left, -top), char, font=font, fill=255)
    return image.size, image.tobytes()


def font_covers(font: FontType, text: str) -> bool:
    """True when no visible character of ``text`` draws as the missing-glyph box."""
    missing = _glyph_signature(font, _MISSING_GLYPH)
    return all(
        _glyph_signature(font, char) != missing
        for char in set(text)
        if not char.isspace()
    )


def _fallback_font(size: int) -> FontType:
    with _cache_lock:
        cached = _fallback_cache.get(size)
    if cached is not None:
        return cached
    first_loaded = None
    chosen = None
    for candidate in FALLBACK_FONT_PATHS:
        if not os.path.exists(candidate):
            continue
        try:
            font = _truetype(candidate, size)
        except OSError:
            continue
        if font_covers(font, DEVANAGARI_SAMPLE):
            chosen = font
            break
        if first_loaded is None:
            first_loaded = font
    if chosen is None:
        logger.warning(
            "[CERT-FONT-COVERAGE] no installed fallback font draws Devanagari; "
            "Hindi names will not render"
        )
        chosen = first_loaded or ImageFont.load_default(size=size)
    with _cache_lock:
        _fallback_cache[size] = chosen
    return chosen


def load_font(path: str | None, size: int = NAME_FONT_SIZE) -> FontResult:
    key = (path or "", size)
    with _cache_lock:
        cached = _font_cache.get(key)
    if cached is not None:
        return FontResult(font=cached, fallback=False)
    if path:
        try:
            font = _truetype(path, size)
        except OSError as exc:
            logger.warning(
                "[CERT-ASSET-FAIL] font path=%s error=%s; using fallback", path, exc
            )
        else:
            with _cache_lock:
                _font_cache[key] = font
            return FontResult(font=font, fallback=False)
    return FontResult(font=_fallback_font(size), fallback=True)


def load_certificate_assets(
    background_path: str | None,
    font_path: str | None,
    font_size: int = NAME_FONT_SIZE,
    *,
    on_font: Callable[[FontResult], None] | None = None,
    on_background: Callable[[BackgroundResult], None] | None = None,
) -> AssetBundle:
    """Run both loads concurrently and wait for both.

    ``on_font`` and ``on_background`` fire as each load finishes, in
    whichever order they complete.
    """
    with ThreadPoolExecutor(max_workers=2, thread_name_prefix="cert-assets") as pool:
        font_future = pool.submit(load_font, font_path, font_size)
        background_future = pool.submit(load_background, background_path)
        if on_font:
            font_future.add_done_callback(lambda fut: on_font(fut.result()))
        if on_background:
            background_future.add_done_callback(lambda fut: on_background(fut.result()))
        font = font_future.result()
        background = background_future.result()
    return AssetBundle(font=font, background=background)


def clear_asset_caches() -> None:
    with _cache_lock:
        _background_cache.clear()
        _font_cache.clear()
        _fallback_cache.clear()
