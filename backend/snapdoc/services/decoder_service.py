from __future__ import annotations

import asyncio
import base64
import binascii
import io
import logging
from typing import Iterable, List

from PIL import Image, UnidentifiedImageError

from snapdoc.core.config import get_settings
from snapdoc.core.errors import DecodeError
from snapdoc.models.image import DecodedImage, RawInput

logger = logging.getLogger(__name__)


class DecoderService:
    """
    Convierte los elementos pegados o arrastrados en imágenes cargadas.

    La decodificación va en dos pasos asíncronos: primero se lee la carga
    útil a una data URL, después se decodifica esa URL con Pillow. Ninguno
    de los dos toca el lienzo; eso lo hace quien recibe el `DecodedImage`.
    """

    def __init__(self, timeout_seconds: float | None = None) -> None:
        settings = get_settings()
        self.timeout_seconds = (
            timeout_seconds if timeout_seconds is not None else settings.decode_timeout_seconds
        )

    # ---------- Selección ----------

    def select_images(self, items: Iterable[RawInput]) -> List[RawInput]:
        """
        Devuelve sólo los elementos de tipo imagen, en su orden original.
        """
        selected: List[RawInput] = []
        for item in items:
            if item.is_image:
                selected.append(item)
            else:
                logger.debug("Skipping non-image item of type %s", item.media_type)
        return selected

    # ---------- Decodificación ----------

    async def decode(self, raw: RawInput) -> DecodedImage:
        """
        Punto de entrada principal: lectura + decodificación con timeout.
        """
        if not raw.is_image:
            raise DecodeError(
                f"Unsupported media type: {raw.media_type}",
                {"media_type": raw.media_type},
            )

        try:
            return await asyncio.wait_for(self._decode(raw), timeout=self.timeout_seconds)
        except asyncio.TimeoutError as e:
            raise DecodeError(
                f"Decoding timed out after {self.timeout_seconds}s",
                {"filename": raw.filename},
            ) from e

    async def _decode(self, raw: RawInput) -> DecodedImage:
        # 1) Leer el blob a una forma transportable
        data_url = await asyncio.to_thread(self.read_payload, raw)
        # 2) Decodificar píxeles
        return await asyncio.to_thread(self.decode_data_url, data_url)

    @staticmethod
    def read_payload(raw: RawInput) -> str:
        """Codifica la carga útil como `data:<tipo>;base64,<datos>`."""
        if not raw.payload:
            raise DecodeError("Empty image payload", {"filename": raw.filename})
        encoded = base64.b64encode(raw.payload).decode("ascii")
        return f"data:{raw.media_type};base64,{encoded}"

    @staticmethod
    def decode_data_url(data_url: str) -> DecodedImage:
        """
        Decodifica una data URL de imagen y devuelve la imagen en RGBA.
        """
        header, sep, encoded = data_url.partition(",")
        if not sep or not header.startswith("data:") or not header.endswith(";base64"):
            raise DecodeError("Malformed data URL")

        try:
            content = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as e:
            raise DecodeError("Invalid base64 image payload") from e

        try:
            with Image.open(io.BytesIO(content)) as img:
                img.load()
                image = img.convert("RGBA")
        except (
            UnidentifiedImageError,
            Image.DecompressionBombError,
            OSError,
            SyntaxError,
            ValueError,
        ) as e:
            raise DecodeError(f"Could not decode image: {e}") from e

        if image.width <= 0 or image.height <= 0:
            raise DecodeError("Decoded image has no pixels")

        return DecodedImage(width=image.width, height=image.height, image=image)
