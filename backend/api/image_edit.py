import logging

from fastapi import APIRouter, File, Form, UploadFile

from config.settings import get_settings
from core.exceptions import GenerationFailedError, MissingCredentialError, ReadError
from models.image_edit import (
    EncodeImageResponse,
    GeminiConfigResponse,
    ImageEditRequest,
    ImageEditResponse,
)
from services.gemini_service import GeminiImageService
from services.image_encoder import (
    encode_image,
    media_type_from_data_url,
    strip_data_url_header,
    to_data_url,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/image-edit", tags=["image-edit"])

MISSING_INPUT_MESSAGE = "Please upload an image and provide a prompt."

def get_gemini_service() -> GeminiImageService:
    return GeminiImageService.from_settings(get_settings())

async def run_edit(image_data: str, mime_type: str, prompt: str) -> ImageEditResponse:
    """Call Gemini once and wrap the outcome in the response envelope"""
    if not image_data or not prompt or not prompt.strip():
        return ImageEditResponse(success=False, error=MISSING_INPUT_MESSAGE)

    try:
        gemini_service = get_gemini_service()
        result = await gemini_service.edit_image(image_data, mime_type, prompt)
    except (MissingCredentialError, GenerationFailedError) as e:
        return ImageEditResponse(success=False, error=str(e))
    except Exception as e:
        logger.exception("Unexpected error during image edit")
        return ImageEditResponse(success=False, error=f"Server error: {str(e)}")

    return ImageEditResponse(
        success=True,
        image_data=result,
        image_url=to_data_url(result, mime_type),
        mime_type=mime_type,
        error=None
    )

@router.post("/encode", response_model=EncodeImageResponse)
async def encode_uploaded_image(image: UploadFile = File(...)):
    """Encode an uploaded image as bare base64"""
    try:
        encoded = await encode_image(image)
    except ReadError as e:
        logger.warning("Failed to read upload %s: %s", image.filename, e)
        return EncodeImageResponse(success=False, filename=image.filename, error="Failed to read image file.")

    return EncodeImageResponse(
        success=True,
        image_data=encoded,
        mime_type=image.content_type or get_settings().DEFAULT_MIME_TYPE,
        filename=image.filename,
        error=None
    )

@router.post("/", response_model=ImageEditResponse)
async def edit_image(edit_request: ImageEditRequest):
    """Edit a base64 image with Gemini"""
    mime_type = (
        edit_request.mime_type
        or media_type_from_data_url(edit_request.image_data)
        or get_settings().DEFAULT_MIME_TYPE
    )
    image_data = strip_data_url_header(edit_request.image_data)
    return await run_edit(image_data, mime_type, edit_request.prompt)

@router.post("/upload", response_model=ImageEditResponse)
async def upload_and_edit_image(
    image: UploadFile = File(...),
    prompt: str = Form("")
):
    """Encode an uploaded image and edit it in one round trip"""
    try:
        encoded = await encode_image(image)
    except ReadError as e:
        logger.warning("Failed to read upload %s: %s", image.filename, e)
        return ImageEditResponse(success=False, error="Failed to read image file.")

    mime_type = image.content_type or get_settings().DEFAULT_MIME_TYPE
    return await run_edit(encoded, mime_type, prompt)

@router.get("/health", response_model=GeminiConfigResponse)
async def check_gemini_config():
    """Check if Gemini is properly configured"""
    settings = get_settings()
    has_key = settings.has_gemini_key

    return GeminiConfigResponse(
        configured=has_key,
        model=settings.GEMINI_MODEL,
        message="Gemini API key configured" if has_key else "Gemini API key not set"
    )
