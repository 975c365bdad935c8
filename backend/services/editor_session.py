"""
State held by the editing UI between user actions.

One session tracks the uploaded image, the prompt, the last result and the
loading/error flags. At most one edit request is in flight per session.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from core.exceptions import ImageEditorError, ReadError, SessionBusyError
from services.gemini_service import GeminiImageService
from services.image_encoder import encode_image, to_data_url

logger = logging.getLogger(__name__)

READ_FAILED_MESSAGE = "Failed to read image file."
MISSING_INPUT_MESSAGE = "Please upload an image and provide a prompt."
UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."


@dataclass(frozen=True)
class UploadedImage:
    filename: Optional[str]
    base64: str
    mime_type: str


class EditorSession:
    def __init__(self, service_factory: Callable[[], GeminiImageService] = GeminiImageService.from_settings):
        self.service_factory = service_factory
        self.original_image: Optional[UploadedImage] = None
        self.prompt: str = ""
        self.generated_image: Optional[str] = None
        self.is_loading: bool = False
        self.error: Optional[str] = None

    async def select_image(self, file: Any, mime_type: str, filename: Optional[str] = None) -> Optional[UploadedImage]:
        """Encode a newly chosen file, replacing the previous image"""
        if self.is_loading:
            raise SessionBusyError("Cannot change the image while an edit is in progress.")

        self.generated_image = None
        self.error = None
        try:
            encoded = await encode_image(file)
        except ReadError as e:
            logger.warning("Could not read %s: %s", filename or "upload", e)
            self.error = READ_FAILED_MESSAGE
            self.original_image = None
            return None

        self.original_image = UploadedImage(filename=filename, base64=encoded, mime_type=mime_type)
        return self.original_image

    async def generate(self) -> Optional[str]:
        """Run one edit with the current image and prompt.

        Returns the result as a data URL, or None when the attempt failed; the
        failure message is left in `error`.
        """
        if self.is_loading:
            raise SessionBusyError("An edit is already in progress.")

        if not self.original_image or not self.prompt.strip():
            self.error = MISSING_INPUT_MESSAGE
            return None

        image = self.original_image
        self.is_loading = True
        self.error = None
        self.generated_image = None

        try:
            service = self.service_factory()
            result = await service.edit_image(image.base64, image.mime_type, self.prompt)
            self.generated_image = to_data_url(result, image.mime_type)
        except ImageEditorError as e:
            self.error = str(e)
        except Exception as e:
            logger.exception("Unexpected error during image edit")
            self.error = str(e) or UNKNOWN_ERROR_MESSAGE
        finally:
            self.is_loading = False

        return self.generated_image

    def clear(self) -> None:
        if self.is_loading:
            raise SessionBusyError("Cannot clear while an edit is in progress.")
        self.original_image = None
        self.generated_image = None
        self.error = None
