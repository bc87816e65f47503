from __future__ import annotations

from typing import List

from snapdoc.core.errors import GeometryError
from snapdoc.models.page import PageGeometry, PageSegment


class PaginationService:
    """
    Calcula en cuántas páginas cabe una imagen ajustada al ancho imprimible
    y desde qué altura se dibuja en cada una.
    """

    def scaled_height(self, width: int, height: int, geometry: PageGeometry) -> float:
        """
        Alto total de la imagen (mm) una vez escalada al ancho `image_width`.
        """
        self._validate(width, height, geometry)
        return height * (geometry.image_width / width)

    def plan(self, width: int, height: int, geometry: PageGeometry) -> List[PageSegment]:
        """
        Devuelve un segmento por página, en orden.

        La primera página dibuja la imagen en 0. Cada página siguiente vuelve
        a dibujar la misma imagen desplazada hacia arriba un alto de página
        más, de forma que el recorte de la página muestra el siguiente tramo.
        """
        total_height = self.scaled_height(width, height, geometry)
        page_height = geometry.page_height

        segments: List[PageSegment] = [PageSegment(index=0, offset=0.0)]
        height_left = total_height - page_height

        while height_left > 0:
            segments.append(
                PageSegment(index=len(segments), offset=height_left - total_height)
            )
            height_left -= page_height

        return segments

    # ---------- Helpers ----------

    @staticmethod
    def _validate(width: int, height: int, geometry: PageGeometry) -> None:
        if width <= 0 or height <= 0:
            raise GeometryError(
                f"Image must have positive dimensions, got {width}x{height}",
                {"width": width, "height": height},
            )
        if geometry.image_width <= 0 or geometry.page_height <= 0:
            raise GeometryError(
                "Page geometry must have positive image width and page height",
                {
                    "image_width": geometry.image_width,
                    "page_height": geometry.page_height,
                },
            )
