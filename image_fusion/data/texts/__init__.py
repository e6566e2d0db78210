# image_fusion/data/texts/__init__.py
from .dto import LocaleTexts
from .en import texts as en_texts

ALL_TEXTS: dict[str, LocaleTexts] = {
    "en": en_texts,
}

DEFAULT_LOCALE = "en"


def get_texts(locale: str = DEFAULT_LOCALE) -> LocaleTexts:
    """
    Retrieves the text object for a given locale, falling back to the default.
    """
    return ALL_TEXTS.get(locale, ALL_TEXTS[DEFAULT_LOCALE])
