from __future__ import annotations

import logging
from pathlib import Path
from time import perf_counter
from typing import Iterable, Optional

from snapdoc.core.config import get_page_geometry
from snapdoc.core.enums import IngestionSource, SessionState
from snapdoc.core.errors import DecodeError, IngestionInProgressError, InvalidStateError
from snapdoc.models.image import DecodedImage, RasterSnapshot, RawInput
from snapdoc.models.page import PageGeometry
from snapdoc.models.session import CaptureSession
from snapdoc.services.decoder_service import DecoderService
from snapdoc.services.export_service import ExportService
from snapdoc.services.pagination_service import PaginationService
from snapdoc.services.session_service import SessionService

logger = logging.getLogger(__name__)


class CaptureService:
    """
    Orquesta una sesión de captura:
    pegar/soltar -> decodificar -> dibujar -> (listo) -> paginar -> exportar.

    Es el único que cambia `CaptureSession.state`. Mientras una sesión está
    cargando se rechazan nuevas ingestas, el borrado y la exportación.
    """

    def __init__(
        self,
        session_service: SessionService,
        geometry: PageGeometry | None = None,
    ) -> None:
        self.session_service = session_service
        self.geometry = geometry or get_page_geometry()

        self.decoder_service = DecoderService()
        self.pagination_service = PaginationService()
        self.export_service = ExportService(self.pagination_service)

    # ---------- Transiciones de estado ----------

    def begin_ingestion(self, session: CaptureSession) -> SessionState:
        """Pasa la sesión a `loading` y devuelve el estado anterior."""
        if session.state == SessionState.LOADING:
            raise IngestionInProgressError(
                "An image is already being loaded", {"session_id": session.id}
            )
        previous = session.state
        session.mark_loading()
        self.session_service.update_session(session)
        return previous

    def complete_ingestion(self, session: CaptureSession, decoded: DecodedImage) -> None:
        """Dibuja la imagen y sólo entonces marca la sesión como lista."""
        if session.state != SessionState.LOADING:
            raise InvalidStateError(
                f"Cannot complete ingestion in state {session.state.value}",
                {"session_id": session.id},
            )
        surface = self.session_service.get_surface(session.id)
        surface.draw(decoded)
        session.mark_ready(decoded.width, decoded.height)
        self.session_service.update_session(session)

    def fail_ingestion(
        self, session: CaptureSession, previous_state: SessionState, error: Exception
    ) -> None:
        session.mark_failed(previous_state, str(error))
        self.session_service.update_session(session)

    # ---------- Operaciones ----------

    async def ingest(
        self,
        session_id: str,
        items: Iterable[RawInput],
        source: IngestionSource = IngestionSource.PASTE,
    ) -> int:
        """
        Procesa todos los elementos de imagen, en orden, y devuelve cuántos
        se dibujaron. El resto de elementos se ignoran.
        """
        session = self.session_service.require_session(session_id)
        if session.state == SessionState.LOADING:
            raise IngestionInProgressError(
                "An image is already being loaded", {"session_id": session.id}
            )

        images = self.decoder_service.select_images(items)
        if not images:
            logger.info("Session %s: %s contained no images", session_id, source.value)
            return 0

        drawn = 0
        decode_time = 0.0
        for raw in images:
            previous_state = self.begin_ingestion(session)
            started_at = perf_counter()
            try:
                decoded = await self.decoder_service.decode(raw)
                decode_time += perf_counter() - started_at
                self.complete_ingestion(session, decoded)
            except Exception as e:
                # Cualquier fallo devuelve la sesión al estado previo
                self.fail_ingestion(session, previous_state, e)
                if isinstance(e, DecodeError):
                    logger.warning(
                        "Session %s: failed to decode %s item %s: %s",
                        session_id,
                        source.value,
                        raw.filename or raw.media_type,
                        e,
                    )
                else:
                    logger.exception(
                        "Session %s: unexpected error ingesting %s item %s",
                        session_id,
                        source.value,
                        raw.filename or raw.media_type,
                    )
                raise
            drawn += 1

        session.timing_decode_ms = int(decode_time * 1000)
        self.session_service.update_session(session)
        logger.info(
            "Session %s: drew %s image(s) from %s, surface %sx%s",
            session_id,
            drawn,
            source.value,
            session.width,
            session.height,
        )
        return drawn

    def clear(self, session_id: str) -> CaptureSession:
        """Borra el lienzo. En una sesión vacía no hace nada."""
        session = self.session_service.require_session(session_id)
        if session.state == SessionState.LOADING:
            raise IngestionInProgressError(
                "Cannot clear while an image is loading", {"session_id": session_id}
            )
        if session.state == SessionState.EMPTY:
            return session

        self.session_service.get_surface(session_id).clear()
        session.mark_cleared()
        self.session_service.update_session(session)
        return session

    def snapshot(self, session_id: str) -> RasterSnapshot:
        session = self._require_ready(session_id)
        return self.session_service.get_surface(session.id).snapshot()

    def export_document(self, session_id: str, output_path: Optional[Path] = None) -> bytes:
        """
        Exporta el lienzo actual a PDF, partiéndolo en páginas si no cabe.
        """
        session = self._require_ready(session_id)

        export_started_at = perf_counter()
        snapshot = self.session_service.get_surface(session.id).snapshot()
        segments = self.pagination_service.plan(snapshot.width, snapshot.height, self.geometry)
        data = self.export_service.export_pdf(
            snapshot, segments, self.geometry, output_path=output_path
        )

        session.pages_exported = len(segments)
        session.timing_export_ms = int((perf_counter() - export_started_at) * 1000)
        self.session_service.update_session(session)
        return data

    # ---------- Helpers ----------

    def _require_ready(self, session_id: str) -> CaptureSession:
        session = self.session_service.require_session(session_id)
        if session.state != SessionState.READY:
            raise InvalidStateError(
                f"Session is {session.state.value}; load an image first",
                {"session_id": session_id, "state": session.state.value},
            )
        return session
