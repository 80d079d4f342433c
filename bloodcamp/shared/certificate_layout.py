from __future__ import annotations

from dataclasses import dataclass, replace

CANVAS_WIDTH = 1200
CANVAS_HEIGHT = 900

NAME_FONT_SIZE = 48
NAME_FILL = "#1a365d"
SHADOW_COLOR = (255, 255, 255, 204)
SHADOW_BLUR = 4
SHADOW_OFFSET = (2, 2)

NAME_CASE_VERBATIM = "verbatim"
NAME_CASE_CAPITALIZE_FIRST = "capitalize_first"
NAME_CASE_POLICIES = (NAME_CASE_VERBATIM, NAME_CASE_CAPITALIZE_FIRST)

FORMAT_PNG = "png"
FORMAT_JPG = "jpg"
EXPORT_FORMATS = (FORMAT_PNG, FORMAT_JPG)
JPEG_QUALITY = 95

DOWNLOAD_FILENAME = "blood-donation-certificate.{ext}"

# Devanagari-capable faces come first; every display name opens with a
# Hindi relation prefix.
FALLBACK_FONT_PATHS = (
    "/usr/share/fonts/truetype/noto/NotoSansDevanagari-Bold.ttf",
    "/usr/share/fonts/noto/NotoSansDevanagari-Bold.ttf",
    "/usr/share/fonts/google-noto/NotoSansDevanagari-Bold.ttf",
    "/usr/share/fonts/truetype/lohit-devanagari/Lohit-Devanagari.ttf",
    "/usr/share/fonts/lohit-devanagari/Lohit-Devanagari.ttf",
    "/usr/share/fonts/truetype/freefont/FreeSansBold.ttf",
    "/usr/share/fonts/gnu-free/FreeSansBold.otf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/TTF/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
)

# letters a fallback face must draw to be preferred
DEVANAGARI_SAMPLE = "करमश"


@dataclass(frozen=True)
class CertificateLayout:
    name: str
    x_fraction: float
    y_fraction: float
    name_case: str = NAME_CASE_VERBATIM
    formats: tuple[str, ...] = EXPORT_FORMATS
    width: int = CANVAS_WIDTH
    height: int = CANVAS_HEIGHT
    font_size: int = NAME_FONT_SIZE
    fill: str = NAME_FILL
    shadow_color: tuple[int, int, int, int] = SHADOW_COLOR
    shadow_blur: int = SHADOW_BLUR
    shadow_offset: tuple[int, int] = SHADOW_OFFSET

    @property
    def text_position(self) -> tuple[int, int]:
        return round(self.width * self.x_fraction), round(self.height * self.y_fraction)

    def supports(self, fmt: str) -> bool:
        return fmt in self.formats


# Template revisions differ in where the name sits, how it is cased and
# which downloads they offer.
LAYOUT_PRESETS: dict[str, CertificateLayout] = {
    "centered": CertificateLayout(
        name="centered",
        x_fraction=0.50,
        y_fraction=0.65,
        name_case=NAME_CASE_VERBATIM,
        formats=(FORMAT_PNG, FORMAT_JPG),
    ),
    "left-panel": CertificateLayout(
        name="left-panel",
        x_fraction=0.40,
        y_fraction=0.43,
        name_case=NAME_CASE_CAPITALIZE_FIRST,
        formats=(FORMAT_JPG,),
    ),
}

DEFAULT_LAYOUT = "centered"


def get_layout(name: str | None, **overrides) -> CertificateLayout:
    layout = LAYOUT_PRESETS.get((name or "").strip().lower(), LAYOUT_PRESETS[DEFAULT_LAYOUT])
    if overrides:
        layout = replace(layout, **overrides)
    if layout.name_case not in NAME_CASE_POLICIES:
        raise ValueError(f"Unsupported name case policy: {layout.name_case!r}")
    unknown = [fmt for fmt in layout.formats if fmt not in EXPORT_FORMATS]
    if unknown:
        raise ValueError(f"Unsupported export formats: {unknown!r}")
    return layout


def apply_name_case(name: str, policy: str) -> str:
    if policy == NAME_CASE_CAPITALIZE_FIRST and name:
        return name[0].upper() + name[1:]
    return name


def download_filename(fmt: str) -> str:
    return DOWNLOAD_FILENAME.format(ext=fmt)
