import asyncio
import io
import struct
import time

import pytest
from PIL import Image

from snapdoc.core.errors import DecodeError
from snapdoc.models.image import RawInput
import snapdoc.services.decoder_service as decoder_service
from snapdoc.services.decoder_service import DecoderService


def _png_bytes(size=(40, 30), color=(255, 0, 0)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color=color).save(buffer, format="PNG")
    return buffer.getvalue()


def test_select_images_keeps_only_images_in_order():
    service = DecoderService()
    items = [
        RawInput(media_type="text/plain", payload=b"hello"),
        RawInput(media_type="image/png", payload=b"first", filename="a.png"),
        RawInput(media_type="text/html", payload=b"<b>hi</b>"),
        RawInput(media_type="IMAGE/JPEG", payload=b"second", filename="b.jpg"),
    ]

    selected = service.select_images(items)

    assert [item.filename for item in selected] == ["a.png", "b.jpg"]


def test_text_and_image_items_yield_one_decoded_image():
    service = DecoderService()
    items = [
        RawInput(media_type="text/plain", payload=b"not an image"),
        RawInput(media_type="image/png", payload=_png_bytes((64, 48))),
    ]

    decoded = [asyncio.run(service.decode(raw)) for raw in service.select_images(items)]

    assert len(decoded) == 1
    assert (decoded[0].width, decoded[0].height) == (64, 48)
    assert decoded[0].image.mode == "RGBA"


def test_read_payload_builds_data_url():
    raw = RawInput(media_type="image/png", payload=b"\x89PNG")
    assert DecoderService.read_payload(raw) == "data:image/png;base64,iVBORw=="


def test_malformed_image_raises_decode_error():
    service = DecoderService()
    raw = RawInput(media_type="image/png", payload=b"definitely not a png")

    with pytest.raises(DecodeError):
        asyncio.run(service.decode(raw))


def test_truncated_image_raises_decode_error():
    service = DecoderService()
    raw = RawInput(media_type="image/png", payload=_png_bytes((400, 400))[:60])

    with pytest.raises(DecodeError):
        asyncio.run(service.decode(raw))


def test_empty_payload_raises_decode_error():
    service = DecoderService()
    with pytest.raises(DecodeError):
        asyncio.run(service.decode(RawInput(media_type="image/png", payload=b"")))


def test_non_image_media_type_is_rejected():
    service = DecoderService()
    with pytest.raises(DecodeError):
        asyncio.run(service.decode(RawInput(media_type="text/plain", payload=b"x")))


def test_malformed_data_url_is_rejected():
    with pytest.raises(DecodeError):
        DecoderService.decode_data_url("image/png;base64,AAAA")
    with pytest.raises(DecodeError):
        DecoderService.decode_data_url("data:image/png;base64,@@@")


def test_slow_decode_times_out(monkeypatch):
    service = DecoderService(timeout_seconds=0.05)

    def slow_decode(data_url):  # noqa: ARG001
        time.sleep(0.3)
        raise AssertionError("should have timed out first")

    monkeypatch.setattr(service, "decode_data_url", slow_decode)

    with pytest.raises(DecodeError, match="timed out"):
        asyncio.run(service.decode(RawInput(media_type="image/png", payload=_png_bytes())))


def _ico_with_truncated_png_header() -> bytes:
    png = b"\x89PNG\r\n\x1a\n" + struct.pack(">I", 5) + b"IHDR" + b"\x00" * 5 + b"\x00" * 4
    header = struct.pack("<HHH", 0, 1, 1)
    entry = struct.pack("<BBBBHHII", 16, 16, 0, 0, 1, 32, len(png), 22)
    return header + entry + png


def test_broken_icon_raises_decode_error():
    service = DecoderService()
    raw = RawInput(media_type="image/x-icon", payload=_ico_with_truncated_png_header())

    with pytest.raises(DecodeError):
        asyncio.run(service.decode(raw))


def test_pillow_value_error_becomes_decode_error(monkeypatch):
    data_url = DecoderService.read_payload(RawInput(media_type="image/png", payload=_png_bytes()))

    def broken_open(fp):  # noqa: ARG001
        raise ValueError("Truncated IHDR chunk")

    monkeypatch.setattr(decoder_service.Image, "open", broken_open)

    with pytest.raises(DecodeError, match="Truncated IHDR chunk"):
        DecoderService.decode_data_url(data_url)


def test_explicit_zero_timeout_is_kept():
    assert DecoderService(timeout_seconds=0).timeout_seconds == 0
