# image_fusion/views/result.py
from html import escape

from image_fusion.data.texts import get_texts
from image_fusion.dto.outcome import Failure, Loading, RequestOutcome, Success


def render_spinner() -> str:
    return (
        '<div class="spinner" role="status">'
        f"<p>{escape(get_texts().page.loading)}</p>"
        "</div>"
    )


def render_error(message: str) -> str:
    return f'<div class="error" role="alert"><p>{escape(message)}</p></div>'


def render_outcome(outcome: RequestOutcome) -> str:
    """
    Progress indicator iff Loading, error banner iff Failure, the produced
    image iff Success. Idle renders nothing.
    """
    page = get_texts().page
    if isinstance(outcome, Loading):
        return render_spinner()
    if isinstance(outcome, Failure):
        return render_error(outcome.message)
    if isinstance(outcome, Success):
        return (
            '<div class="result">'
            f'<img src="{escape(outcome.image_data_url, quote=True)}" '
            f'alt="{escape(page.result_alt, quote=True)}">'
            f'<p><a href="/result" download>{escape(page.download_link)}</a></p>'
            "</div>"
        )
    return ""
