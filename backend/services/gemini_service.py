import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from config.settings import Settings, get_settings
from core.exceptions import (
    GenerationFailedError,
    MissingCredentialError,
    NoImageInResponseError,
    TransportError,
)
from models.gemini import GeminiErrorBody, GenerateContentResponse

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash-image"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

class GeminiImageService:
    def __init__(
        self,
        api_key: Optional[str],
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        timeout: Optional[float] = 120.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "GeminiImageService":
        settings = settings or get_settings()
        return cls(
            api_key=settings.GEMINI_API_KEY,
            model=settings.GEMINI_MODEL,
            base_url=settings.GEMINI_BASE_URL,
            timeout=settings.GEMINI_TIMEOUT_SECONDS,
        )

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def build_payload(self, image_data: str, mime_type: str, prompt: str) -> Dict[str, Any]:
        """Image part first, then the instruction; ask for an image back"""
        return {
            "contents": [{
                "parts": [
                    {
                        "inlineData": {
                            "mimeType": mime_type,
                            "data": image_data
                        }
                    },
                    {
                        "text": prompt
                    }
                ]
            }],
            "generationConfig": {
                "responseModalities": ["IMAGE"]
            }
        }

    async def edit_image(self, image_data: str, mime_type: str, prompt: str) -> str:
        """
        Edit an image with Gemini and return the base64 data of the result.

        Args:
            image_data: Base64 encoded source image, no data URL header
            mime_type: Media type of the source image, e.g. image/png
            prompt: Free-text description of the edit

        Raises:
            MissingCredentialError: no API key; raised before any network call
            TransportError: non-2xx response, timeout or malformed body
            NoImageInResponseError: well-formed response without image data
        """
        if not self.api_key or not self.api_key.strip():
            logger.warning("Gemini API key not configured, refusing to call %s", self.model)
            raise MissingCredentialError()

        try:
            response_data = await self._generate_content(self.build_payload(image_data, mime_type, prompt))
            return self._extract_image(response_data)
        except GenerationFailedError as e:
            logger.error("Error calling Gemini API: %s", e)
            raise

    async def _generate_content(self, payload: Dict[str, Any]) -> Any:
        headers = {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json"
        }

        logger.debug("Submitting edit request to %s", self.endpoint)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.endpoint, json=payload, headers=headers)
        except httpx.TimeoutException as e:
            raise TransportError(f"Request timeout - Gemini API did not respond ({e})") from e
        except httpx.HTTPError as e:
            raise TransportError(f"Error calling Gemini API: {e}") from e
        except (httpx.InvalidURL, UnicodeEncodeError) as e:
            # Bad endpoint or a header value (usually the key) that is not ASCII
            raise TransportError(f"Error calling Gemini API: {e}") from e

        if not response.is_success:
            raise TransportError(self._describe_error(response), status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"Malformed response from Gemini API: {e}", status_code=response.status_code) from e

    def _describe_error(self, response: httpx.Response) -> str:
        """Prefer the service's own error message over the bare status line"""
        fallback = f"API request failed: {response.status_code} {response.reason_phrase}".rstrip()
        if not response.content:
            return fallback

        try:
            body = GeminiErrorBody.model_validate(response.json())
        except (ValueError, ValidationError):
            return f"{fallback} - {response.text[:200]}"

        if body.error and body.error.message:
            return f"{body.error.message} (status {response.status_code})"
        return fallback

    def _extract_image(self, response_data: Any) -> str:
        try:
            parsed = GenerateContentResponse.model_validate(response_data)
        except ValidationError as e:
            raise TransportError(f"Malformed response from Gemini API: {e.error_count()} validation error(s)") from e

        inline = parsed.first_inline_image()
        if inline is not None:
            return inline.data

        reason = None
        if parsed.prompt_feedback and parsed.prompt_feedback.block_reason:
            reason = f"prompt blocked ({parsed.prompt_feedback.block_reason})"
        elif parsed.candidates and parsed.candidates[0].finish_reason not in (None, "STOP"):
            reason = f"finish reason {parsed.candidates[0].finish_reason}"

        if reason:
            raise NoImageInResponseError(f"{NoImageInResponseError.default_cause} Reason: {reason}.")
        raise NoImageInResponseError()
