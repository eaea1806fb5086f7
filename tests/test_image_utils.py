"""
Unit tests for image MIME type resolution
"""
import os
import sys
import io
import base64
import struct
import zlib

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from PIL import Image

from app.errors import InvalidInput
from app.utils.image import resolve_image, sniff_mime_type, split_data_url


def _encoded_image(fmt: str) -> str:
    image = Image.effect_noise((64, 64), 50).convert("RGB")
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return base64.b64encode(buffer.getvalue()).decode("utf-8")


def _encoded_mpo() -> str:
    """JPEG with a second embedded frame, as written by many phone cameras"""
    first = Image.effect_noise((64, 64), 50).convert("RGB")
    second = Image.effect_noise((64, 64), 30).convert("RGB")
    buffer = io.BytesIO()
    first.save(buffer, format="MPO", save_all=True, append_images=[second])
    return base64.b64encode(buffer.getvalue()).decode("utf-8")


def _encoded_png_header(width: int, height: int) -> str:
    """PNG whose header declares ``width`` x ``height`` without the pixel data"""
    def chunk(cid: bytes, data: bytes) -> bytes:
        return struct.pack(">I", len(data)) + cid + data + struct.pack(">I", zlib.crc32(cid + data) & 0xFFFFFFFF)

    ihdr = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    raw = b"\x89PNG\r\n\x1a\n" + chunk(b"IHDR", ihdr) + chunk(b"IDAT", bytes(range(256))) + chunk(b"IEND", b"")
    return base64.b64encode(raw).decode("utf-8")


class TestSniffMimeType:

    def test_png(self):
        assert sniff_mime_type(_encoded_image("PNG")) == "image/png"

    def test_jpeg(self):
        assert sniff_mime_type(_encoded_image("JPEG")) == "image/jpeg"

    def test_mpo_is_sent_as_jpeg(self):
        payload = _encoded_mpo()
        assert base64.b64decode(payload)[:2] == b"\xff\xd8"
        assert sniff_mime_type(payload) == "image/jpeg"

    def test_unsupported_gif(self):
        assert sniff_mime_type(_encoded_image("GIF")) is None

    def test_oversized_image_is_not_an_error(self):
        assert sniff_mime_type(_encoded_png_header(20000, 20000)) is None

    def test_not_an_image(self):
        assert sniff_mime_type("A" * 200) is None

    def test_not_base64(self):
        assert sniff_mime_type("this is not base64 at all!") is None


class TestSplitDataUrl:

    def test_data_url(self):
        assert split_data_url("data:image/webp;base64,AAAA") == ("image/webp", "AAAA")

    def test_plain_base64(self):
        assert split_data_url("  AAAA\n") == (None, "AAAA")


class TestResolveImage:

    def test_declared_mime_wins(self):
        assert resolve_image("data:image/webp;base64,AAAA", "image/PNG") == ("image/png", "AAAA")

    def test_data_url_before_sniffing(self):
        payload = _encoded_image("PNG")
        assert resolve_image(f"data:image/webp;base64,{payload}") == ("image/webp", payload)

    def test_sniffed_png(self):
        payload = _encoded_image("PNG")
        assert resolve_image(payload) == ("image/png", payload)

    def test_unknown_format_falls_back_to_jpeg(self):
        assert resolve_image("A" * 200) == ("image/jpeg", "A" * 200)

    def test_non_image_declared_mime_rejected(self):
        with pytest.raises(InvalidInput):
            resolve_image("A" * 200, "text/plain")

    def test_gif_falls_back_to_jpeg(self):
        payload = _encoded_image("GIF")
        assert resolve_image(payload) == ("image/jpeg", payload)

    def test_oversized_image_falls_back_to_jpeg(self):
        payload = _encoded_png_header(20000, 20000)
        assert resolve_image(payload) == ("image/jpeg", payload)

    def test_unsupported_data_url_type_is_ignored(self):
        payload = _encoded_image("PNG")
        assert resolve_image(f"data:image/gif;base64,{payload}") == ("image/png", payload)

    @pytest.mark.parametrize("mime_type", ["image/", "image/gif", "image/mpo", "application/octet-stream"])
    def test_unsupported_declared_mime_rejected(self, mime_type):
        with pytest.raises(InvalidInput):
            resolve_image("A" * 200, mime_type)
