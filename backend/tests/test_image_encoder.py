"""
Encoder unit tests

These tests validate base64 encoding of uploaded files and the data URL helpers.
"""
import base64
import io
import pytest

from core.exceptions import ReadError
from services.image_encoder import (
    encode_image,
    media_type_from_data_url,
    strip_data_url_header,
    to_data_url,
)


class AsyncFile:
    """Stand-in for an UploadFile with an awaitable read()"""

    def __init__(self, content=b"", error=None):
        self.content = content
        self.error = error

    async def read(self):
        if self.error:
            raise self.error
        return self.content


class BrokenFile:
    def read(self):
        raise OSError("device not ready")


@pytest.mark.unit
@pytest.mark.asyncio
class TestEncodeImage:
    """Tests for encode_image"""

    async def test_encode_sync_file_round_trips(self, png_bytes):
        """Test decoding the result gives back the exact file bytes"""
        encoded = await encode_image(io.BytesIO(png_bytes))

        assert base64.b64decode(encoded) == png_bytes
        assert len(base64.b64decode(encoded)) == len(png_bytes)

    async def test_encode_async_file(self, png_bytes):
        """Test objects with an awaitable read() are supported"""
        encoded = await encode_image(AsyncFile(png_bytes))

        assert encoded == base64.b64encode(png_bytes).decode("ascii")

    async def test_encode_raw_bytes(self):
        """Test raw bytes are encoded directly"""
        assert await encode_image(b"\x00\xff\x10") == "AP8Q"

    async def test_encode_empty_file(self):
        """Test an empty file gives an empty string, not an error"""
        assert await encode_image(io.BytesIO(b"")) == ""
        assert await encode_image(AsyncFile(b"")) == ""

    async def test_encode_has_no_data_url_prefix(self, png_bytes):
        """Test the output is bare base64"""
        encoded = await encode_image(io.BytesIO(png_bytes))

        assert not encoded.startswith("data:")
        assert "," not in encoded

    async def test_read_failure_raises_read_error(self):
        """Test a failing read surfaces as ReadError with the diagnostic"""
        with pytest.raises(ReadError) as exc_info:
            await encode_image(BrokenFile())

        assert "device not ready" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, OSError)

    async def test_async_read_failure_raises_read_error(self):
        """Test a failing awaitable read surfaces as ReadError"""
        with pytest.raises(ReadError):
            await encode_image(AsyncFile(error=RuntimeError("stream closed")))

    async def test_text_mode_file_rejected(self):
        """Test a text-mode handle is reported as a read error"""
        with pytest.raises(ReadError) as exc_info:
            await encode_image(io.StringIO("not bytes"))

        assert "binary mode" in str(exc_info.value)


@pytest.mark.unit
class TestDataUrlHelpers:
    """Tests for data URL parsing and building"""

    def test_strip_header(self):
        assert strip_data_url_header("data:image/png;base64,QUJD") == "QUJD"

    def test_strip_header_with_parameters(self):
        assert strip_data_url_header("data:image/svg+xml;charset=utf-8;base64,PHN2Zz4=") == "PHN2Zz4="

    def test_strip_leaves_bare_base64_alone(self):
        assert strip_data_url_header("QUJDMTIz") == "QUJDMTIz"

    def test_media_type_from_data_url(self):
        assert media_type_from_data_url("data:image/webp;base64,AAAA") == "image/webp"

    def test_media_type_from_bare_base64(self):
        assert media_type_from_data_url("AAAA") is None

    def test_to_data_url(self):
        assert to_data_url("ABC123", "image/jpeg") == "data:image/jpeg;base64,ABC123"
