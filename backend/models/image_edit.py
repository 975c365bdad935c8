from pydantic import BaseModel
from typing import Optional

class ImageEditRequest(BaseModel):
    image_data: str  # Base64 encoded image, bare or as a data URL
    prompt: str
    mime_type: Optional[str] = None  # Taken from the data URL header when omitted

class ImageEditResponse(BaseModel):
    success: bool
    image_data: Optional[str] = None  # Bare base64 of the generated image
    image_url: Optional[str] = None  # Same image as a data URL, ready for <img src>
    mime_type: Optional[str] = None
    error: Optional[str] = None

class EncodeImageResponse(BaseModel):
    success: bool
    image_data: Optional[str] = None
    mime_type: Optional[str] = None
    filename: Optional[str] = None
    error: Optional[str] = None

class GeminiConfigResponse(BaseModel):
    configured: bool
    model: str
    message: str
