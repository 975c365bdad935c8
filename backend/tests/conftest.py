"""
Shared pytest fixtures and configuration for all tests
"""

import pytest
import sys
from pathlib import Path

import httpx

# Add backend to Python path for imports
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Smallest valid PNG: 1x1 transparent pixel
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6360000002000001e221bc330000000049454e44ae426082"
)

@pytest.fixture(autouse=True)
def clean_gemini_env(monkeypatch):
    """Keep real credentials out of every test"""
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)
    monkeypatch.setenv("DYNO", "test")  # skip .env loading in main

@pytest.fixture
def png_bytes():
    return PNG_BYTES

@pytest.fixture
def image_response():
    """Build a generateContent response body from a list of parts"""
    def _build(*parts, finish_reason="STOP"):
        return {
            "candidates": [{
                "content": {"role": "model", "parts": list(parts)},
                "finishReason": finish_reason
            }]
        }
    return _build

@pytest.fixture
def gemini_transport():
    """
    Provide a MockTransport factory that records every request.

    Usage: transport, calls = gemini_transport(status_code=200, json_body={...})
    """
    def _factory(status_code=200, json_body=None, text=None, exc=None):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if exc is not None:
                raise exc
            if text is not None:
                return httpx.Response(status_code, text=text)
            return httpx.Response(status_code, json=json_body if json_body is not None else {})

        return httpx.MockTransport(handler), calls
    return _factory

@pytest.fixture
def gemini_service_factory(gemini_transport):
    """Build a GeminiImageService wired to a mock transport"""
    from services.gemini_service import GeminiImageService

    def _factory(api_key="test-key", **transport_kwargs):
        transport, calls = gemini_transport(**transport_kwargs)
        service = GeminiImageService(
            api_key=api_key,
            model="gemini-2.5-flash-image",
            base_url="https://gemini.test/v1beta",
            transport=transport
        )
        return service, calls
    return _factory

