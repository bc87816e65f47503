from __future__ import annotations

"""Lienzo en memoria donde se pinta la imagen pegada."""

import io
import logging
from typing import Optional, Tuple

from PIL import Image

from snapdoc.core.errors import InvalidStateError
from snapdoc.models.image import DecodedImage, RasterSnapshot


class SurfaceService:
    """
    Dueño único del lienzo de una sesión.

    El lienzo siempre mide lo mismo que la última imagen dibujada, o (0, 0)
    si está vacío.
    """

    def __init__(self) -> None:
        self._canvas: Optional[Image.Image] = None
        self.logger = logging.getLogger(__name__)

    @property
    def size(self) -> Tuple[int, int]:
        if self._canvas is None:
            return 0, 0
        return self._canvas.size

    @property
    def is_empty(self) -> bool:
        return self._canvas is None

    def draw(self, decoded: DecodedImage) -> None:
        """
        Redimensiona el lienzo a W x H y pinta la imagen en (0, 0).
        Sustituye el contenido anterior sin componer ni escalar.
        """
        canvas = Image.new("RGBA", (decoded.width, decoded.height), (0, 0, 0, 0))
        canvas.paste(decoded.image, (0, 0))

        # El cambio de lienzo es una sola asignación
        previous, self._canvas = self._canvas, canvas
        if previous is not None:
            previous.close()
        self.logger.debug("Surface resized to %sx%s", decoded.width, decoded.height)

    def snapshot(self) -> RasterSnapshot:
        """Codifica el lienzo actual como PNG."""
        if self._canvas is None:
            raise InvalidStateError("Surface is empty; nothing to snapshot")

        buffer = io.BytesIO()
        self._canvas.save(buffer, format="PNG")
        width, height = self._canvas.size
        return RasterSnapshot(data=buffer.getvalue(), width=width, height=height)

    def clear(self) -> None:
        """Borra los píxeles y deja el lienzo sin dimensiones."""
        if self._canvas is not None:
            self._canvas.close()
        self._canvas = None
