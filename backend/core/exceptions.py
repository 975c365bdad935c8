"""
Error types shared by the encoder, the Gemini service and the editor session.

Remote-call failures all derive from GenerationFailedError so callers can
handle them uniformly, while TransportError and NoImageInResponseError keep
the cause distinguishable in logs.
"""
from typing import Optional


class ImageEditorError(Exception):
    """Base class for all image editor errors"""


class ReadError(ImageEditorError):
    """The uploaded file could not be read"""


class MissingCredentialError(ImageEditorError):
    """No Gemini API key is configured"""

    def __init__(self, message: str = "API_KEY environment variable is not set."):
        super().__init__(message)


class GenerationFailedError(ImageEditorError):
    """The remote generation call failed"""

    prefix = "Failed to generate image"

    def __init__(self, cause: str, status_code: Optional[int] = None):
        self.cause = cause
        self.status_code = status_code
        super().__init__(f"{self.prefix}: {cause}")


class TransportError(GenerationFailedError):
    """Network or service-level failure (non-2xx, timeout, malformed body)"""


class NoImageInResponseError(GenerationFailedError):
    """The service answered but returned no image data"""

    default_cause = "No image data found in the API response. The model may have refused the request."

    def __init__(self, cause: Optional[str] = None):
        super().__init__(cause or self.default_cause)


class SessionBusyError(ImageEditorError):
    """An edit request is already in flight for this session"""
