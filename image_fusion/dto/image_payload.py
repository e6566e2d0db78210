# File: image_fusion/dto/image_payload.py
import base64
import binascii

from pydantic import BaseModel

_DATA_URL_PREFIX = "data:"
_BASE64_MARKER = ";base64"


class ImagePayload(BaseModel):
    """
    A base64-encoded image plus its MIME type, as held in one upload slot.
    """
    base64: str
    mime_type: str

    @classmethod
    def from_bytes(cls, data: bytes, mime_type: str) -> "ImagePayload":
        return cls(base64=base64.b64encode(data).decode("ascii"), mime_type=mime_type)

    @classmethod
    def from_data_url(cls, data_url: str) -> "ImagePayload":
        """
        Splits a `data:<mime>;base64,<body>` URL into its MIME type and body.

        Raises:
            ValueError: If the string is not a base64 data URL.
        """
        if not data_url.startswith(_DATA_URL_PREFIX) or "," not in data_url:
            raise ValueError("Not a data URL")
        header, body = data_url.split(",", 1)
        meta = header[len(_DATA_URL_PREFIX):]
        if not meta.endswith(_BASE64_MARKER):
            raise ValueError("Data URL is not base64-encoded")
        return cls(base64=body, mime_type=meta[: -len(_BASE64_MARKER)])

    def to_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.base64}"

    def to_bytes(self) -> bytes:
        try:
            return base64.b64decode(self.base64, validate=True)
        except binascii.Error as e:
            raise ValueError("Image payload is not valid base64") from e
