# image_fusion/data/constants.py
from enum import Enum


class FusionAction(str, Enum):
    """Interactions the two people can be shown performing."""
    SHAKING_HANDS = "shaking hands"
    HUGGING = "hugging each other"
    SALUTING = "saluting each other"

    @classmethod
    def default(cls) -> "FusionAction":
        return cls.SHAKING_HANDS


class ImageSlot(str, Enum):
    """Upload positions for the two people."""
    FIRST = "1"
    SECOND = "2"


# What the file picker offers; uploads of other types are not rejected.
ACCEPTED_MIME_TYPES = ("image/png", "image/jpeg", "image/webp")

FALLBACK_MIME_TYPE = "application/octet-stream"
