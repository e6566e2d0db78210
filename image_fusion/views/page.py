# image_fusion/views/page.py
from html import escape

from image_fusion.data.constants import ACCEPTED_MIME_TYPES, FusionAction, ImageSlot
from image_fusion.data.texts import get_texts
from image_fusion.states.session import FusionSession

from .result import render_error, render_outcome

_STYLE = """
body { font-family: sans-serif; background: #111827; color: #f3f4f6; margin: 0; }
main { max-width: 960px; margin: 0 auto; padding: 2rem; }
.inputs { display: flex; gap: 1.5rem; align-items: flex-start; }
.slot { flex: 1; border: 2px dashed #4b5563; border-radius: .5rem; padding: 1rem; }
.slot img { width: 100%; border-radius: .5rem; }
.controls { display: flex; flex-direction: column; gap: .75rem; }
.error { background: #7f1d1d; border-radius: .5rem; padding: .5rem 1rem; }
.result img { max-width: 100%; border-radius: .5rem; }
"""


def _render_slot(session: FusionSession, slot: ImageSlot, label: str) -> str:
    page = get_texts().page
    payload = session.get_image(slot)
    preview = (
        f'<img src="{escape(payload.to_data_url(), quote=True)}" alt="Preview">'
        if payload
        else f"<p>{escape(page.upload_hint)}</p>"
    )
    slot_error = session.slot_errors.get(slot)
    return (
        '<div class="slot">'
        f'<form action="/slots/{slot.value}" method="post" enctype="multipart/form-data">'
        f'<label for="file-upload-{slot.value}">{escape(label)}</label>'
        f"{preview}"
        f'<input id="file-upload-{slot.value}" name="image" type="file" '
        f'accept="{", ".join(ACCEPTED_MIME_TYPES)}" onchange="this.form.submit()">'
        "<noscript><button type=\"submit\">Upload</button></noscript>"
        "</form>"
        f"{render_error(slot_error) if slot_error else ''}"
        "</div>"
    )


def _render_controls(session: FusionSession) -> str:
    texts = get_texts()
    options = "".join(
        f'<option value="{escape(action.value, quote=True)}"'
        f'{" selected" if session.action is action else ""}>'
        f"{escape(texts.action_labels[action.value])}</option>"
        for action in FusionAction
    )
    disabled = session.is_loading or not session.has_both_images
    button_text = (
        texts.page.fuse_button_loading if session.is_loading else texts.page.fuse_button
    )
    return (
        '<form class="controls" action="/fuse" method="post">'
        f'<label for="action-select">{escape(texts.page.action_label)}</label>'
        f'<select id="action-select" name="action">{options}</select>'
        f'<button type="submit"{" disabled" if disabled else ""}>{escape(button_text)}</button>'
        "</form>"
    )


def render_page(session: FusionSession, refresh_seconds: int = 2) -> str:
    """Renders the whole single page for one session."""
    page = get_texts().page
    # While a request is in flight the page polls by reloading itself.
    refresh = (
        f'<meta http-equiv="refresh" content="{refresh_seconds}">'
        if session.is_loading
        else ""
    )
    return (
        "<!DOCTYPE html>"
        '<html lang="en"><head><meta charset="utf-8">'
        f"{refresh}"
        f"<title>{escape(page.title)}</title>"
        f"<style>{_STYLE}</style>"
        "</head><body><main>"
        f"<header><h1>{escape(page.title)}</h1><p>{escape(page.subtitle)}</p></header>"
        '<section class="inputs">'
        f"{_render_slot(session, ImageSlot.FIRST, page.first_slot_label)}"
        f"{_render_controls(session)}"
        f"{_render_slot(session, ImageSlot.SECOND, page.second_slot_label)}"
        "</section>"
        f'<section class="outcome">{render_outcome(session.outcome)}</section>'
        "</main></body></html>"
    )


def render_error_page(message: str) -> str:
    page = get_texts().page
    return (
        "<!DOCTYPE html>"
        '<html lang="en"><head><meta charset="utf-8">'
        f"<title>{escape(page.title)}</title></head><body><main>"
        f"{render_error(message)}"
        '<p><a href="/">Back</a></p>'
        "</main></body></html>"
    )
