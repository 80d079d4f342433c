from __future__ import annotations

from flask import current_app

from ..shared.certificate_assets import load_certificate_assets
from ..shared.certificate_layout import CertificateLayout, get_layout
from ..shared.certificate_render import CertificateRenderState


def configured_layout() -> CertificateLayout:
    return get_layout(current_app.config.get("CERTIFICATE_LAYOUT"))


def prepare_certificate(display_name: str, *, visible: bool = True) -> CertificateRenderState:
    """Build a render state for ``display_name`` with assets from app config."""
    layout = configured_layout()
    state = CertificateRenderState(layout=layout, display_name=display_name)
    state.set_visible(visible)
    load_certificate_assets(
        current_app.config.get("CERTIFICATE_BACKGROUND"),
        current_app.config.get("CERTIFICATE_FONT"),
        layout.font_size,
        on_font=state.mark_font_ready,
        on_background=state.mark_background_ready,
    )
    return state
