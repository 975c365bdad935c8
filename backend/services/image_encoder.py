"""
Image encoding helpers.

Turns an uploaded binary file into the bare base64 string the Gemini API
expects, and converts between bare base64 and data URLs for the browser.
"""
import base64
import inspect
import re
from typing import Any, Optional, Union

from core.exceptions import ReadError

DATA_URL_PATTERN = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?:;[\w-]+=[^;,]*)*;base64,", re.IGNORECASE)


async def encode_image(file: Union[bytes, bytearray, Any]) -> str:
    """
    Read a binary file-like object and return its content as base64.

    Accepts raw bytes, objects with an awaitable read() (FastAPI UploadFile)
    and plain binary file objects. No size or type validation happens here.

    Raises:
        ReadError: if the underlying read fails
    """
    if isinstance(file, (bytes, bytearray)):
        content = bytes(file)
    else:
        try:
            result = file.read()
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            raise ReadError(f"Failed to read image file: {e}") from e

        if isinstance(result, str):
            # Text-mode handles hand back str; the data is only meaningful as bytes
            raise ReadError("Failed to read image file: file must be opened in binary mode")
        content = bytes(result or b"")

    return base64.b64encode(content).decode("ascii")


def strip_data_url_header(value: str) -> str:
    """Remove a leading `data:<mime>;base64,` prefix if present"""
    return DATA_URL_PATTERN.sub("", value.strip(), count=1)


def media_type_from_data_url(value: str) -> Optional[str]:
    """Return the media type declared in a data URL header, or None"""
    match = DATA_URL_PATTERN.match(value.strip())
    if match:
        return match.group("mime")
    return None


def to_data_url(encoded: str, media_type: str) -> str:
    return f"data:{media_type};base64,{encoded}"
