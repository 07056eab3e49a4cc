"""
Unit tests for inline recipe image validation.
"""

import base64
from unittest.mock import patch

import pytest

from app.services.images import (
    ImageValidationError,
    decode_data_url,
    validate_image_data_url,
)


class TestDecodeDataUrl:

    @pytest.mark.unit
    def test_splits_mime_and_bytes(self):
        mime, raw = decode_data_url("data:text/plain;base64," + base64.b64encode(b"hi").decode())
        assert mime == "text/plain"
        assert raw == b"hi"

    @pytest.mark.unit
    @pytest.mark.parametrize("value", [
        "https://example.com/pie.png",
        "data:image/png,not-base64-marker",
        "data:image/png;base64,@@@",
    ])
    def test_rejects_malformed(self, value):
        with pytest.raises(ImageValidationError):
            decode_data_url(value)


class TestValidateImageDataUrl:

    @pytest.mark.unit
    def test_accepts_png(self, image_data_url):
        assert validate_image_data_url(image_data_url) == image_data_url

    @pytest.mark.unit
    def test_rejects_non_image_mime(self):
        data_url = "data:application/pdf;base64," + base64.b64encode(b"%PDF-1.4").decode()
        with pytest.raises(ImageValidationError, match="select an image"):
            validate_image_data_url(data_url)

    @pytest.mark.unit
    def test_rejects_disallowed_format(self, bmp_data_url):
        with pytest.raises(ImageValidationError, match="Invalid image format"):
            validate_image_data_url(bmp_data_url)

    @pytest.mark.unit
    def test_rejects_corrupt_bytes(self):
        data_url = "data:image/png;base64," + base64.b64encode(b"definitely not a png").decode()
        with pytest.raises(ImageValidationError, match="corrupted"):
            validate_image_data_url(data_url)

    @pytest.mark.unit
    def test_rejects_oversized(self, image_data_url):
        with patch("app.services.images.get_settings") as mock_settings:
            mock_settings.return_value.max_image_bytes = 10
            with pytest.raises(ImageValidationError, match="smaller than"):
                validate_image_data_url(image_data_url)

    @pytest.mark.unit
    def test_validation_error_is_invalid_input(self):
        from app.services.errors import InvalidInputError
        assert issubclass(ImageValidationError, InvalidInputError)
