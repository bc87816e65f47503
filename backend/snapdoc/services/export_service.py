from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import fitz  # PyMuPDF

from snapdoc.models.image import RasterSnapshot
from snapdoc.models.page import PageGeometry, PageSegment
from snapdoc.services.pagination_service import PaginationService

# PyMuPDF trabaja en puntos; la geometría viene en milímetros
MM_TO_PT = 72 / 25.4


class ExportService:
    """
    Exporta el snapshot del lienzo a un PDF, una página por segmento.
    """

    def __init__(self, pagination_service: PaginationService | None = None) -> None:
        self.pagination_service = pagination_service or PaginationService()
        self.logger = logging.getLogger(__name__)

    def export_pdf(
        self,
        snapshot: RasterSnapshot,
        segments: List[PageSegment],
        geometry: PageGeometry,
        output_path: Optional[Path] = None,
    ) -> bytes:
        """
        Crea el PDF y devuelve sus bytes; si se indica `output_path`, también
        lo guarda en disco.

        En cada página se coloca la misma imagen a ancho completo, en el
        margen izquierdo y a la altura del segmento; la página recorta lo
        que queda fuera.
        """
        if not segments:
            raise ValueError("No pages to export to PDF")

        image_height = self.pagination_service.scaled_height(
            snapshot.width, snapshot.height, geometry
        )
        page_width = geometry.page_width * MM_TO_PT
        page_height = geometry.page_height * MM_TO_PT
        x0 = geometry.margin * MM_TO_PT
        x1 = (geometry.margin + geometry.image_width) * MM_TO_PT

        doc = fitz.open()
        try:
            xref = 0
            for segment in sorted(segments, key=lambda s: s.index):
                page = doc.new_page(width=page_width, height=page_height)
                y0 = segment.offset * MM_TO_PT
                rect = fitz.Rect(x0, y0, x1, y0 + image_height * MM_TO_PT)
                if xref == 0:
                    xref = page.insert_image(rect, stream=snapshot.data, keep_proportion=False)
                else:
                    # Reutilizamos la imagen ya incrustada en vez de repetirla
                    page.insert_image(rect, xref=xref, keep_proportion=False)

            data = doc.tobytes(garbage=3, deflate=True)
        finally:
            doc.close()

        if output_path is not None:
            # Nos aseguramos de que el directorio existe
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_bytes(data)

        self.logger.info(
            "Exported %s page(s) from %sx%s snapshot",
            len(segments),
            snapshot.width,
            snapshot.height,
        )
        return data
