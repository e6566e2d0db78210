# image_fusion/data/texts/dto.py
from pydantic import BaseModel


class PageTexts(BaseModel):
    """Static copy shown on the single page."""
    title: str
    subtitle: str
    first_slot_label: str
    second_slot_label: str
    upload_hint: str
    action_label: str
    fuse_button: str
    fuse_button_loading: str
    loading: str
    result_alt: str
    download_link: str


class ErrorTexts(BaseModel):
    """User-visible failure messages."""
    read_failed: str
    missing_inputs: str
    missing_api_key: str
    no_image: str
    service_error: str
    interrupted: str
    unexpected: str


class LocaleTexts(BaseModel):
    """A collection of all texts for a specific locale."""
    page: PageTexts
    errors: ErrorTexts
    action_labels: dict[str, str]
