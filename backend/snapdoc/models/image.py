from __future__ import annotations

"""Modelos de la imagen en sus distintas fases: entrada, decodificada y snapshot."""

from typing import Optional

from PIL import Image
from pydantic import BaseModel, ConfigDict, Field


class RawInput(BaseModel):
    """
    Elemento recibido en un pegado o un arrastre: tipo declarado + bytes.
    """

    media_type: str
    payload: bytes
    filename: Optional[str] = None

    @property
    def is_image(self) -> bool:
        return self.media_type.lower().startswith("image/")


class DecodedImage(BaseModel):
    """
    Imagen ya cargada en memoria con sus dimensiones intrínsecas.
    """

    width: int = Field(gt=0)
    height: int = Field(gt=0)
    image: Image.Image  # RGBA, totalmente cargada

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)


class RasterSnapshot(BaseModel):
    """PNG del contenido actual del lienzo."""

    data: bytes
    width: int
    height: int
    media_type: str = "image/png"

    model_config = ConfigDict(frozen=True)
