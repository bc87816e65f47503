from __future__ import annotations

"""Modelos que describen la página del documento y sus segmentos."""

from pydantic import BaseModel, ConfigDict


class PageGeometry(BaseModel):
    """
    Medidas fijas de la página de salida, todas en milímetros.
    """

    page_width: float
    page_height: float  # Alto de página (Ph)
    image_width: float  # Ancho imprimible al que se ajusta la imagen (Pw)
    margin: float  # Margen horizontal izquierdo (m)

    model_config = ConfigDict(frozen=True)


class PageSegment(BaseModel):
    """
    Ventana vertical de una página sobre la imagen escalada completa.
    """

    index: int  # 0-based
    offset: float  # Posición vertical (mm) del borde superior de la imagen

    model_config = ConfigDict(frozen=True)
