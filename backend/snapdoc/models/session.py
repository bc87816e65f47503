"""Definición del modelo de datos de una sesión de captura.

Una sesión representa el lienzo de un usuario: recibe imágenes pegadas o
arrastradas y, cuando hay una lista, permite exportarla a PDF. Se guarda en
memoria; el lienzo en sí lo gestiona `SurfaceService`, aquí sólo vive el
estado visible para la presentación.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from snapdoc.core.enums import SessionState


class CaptureSession(BaseModel):
    """Estado consultable de una sesión de captura."""

    id: str
    state: SessionState = SessionState.EMPTY

    width: int = 0  # Dimensiones del lienzo (0 si está vacío)
    height: int = 0

    images_ingested: int = 0  # Imágenes dibujadas desde que se creó
    error_message: Optional[str] = None  # Último fallo de decodificación

    # Métricas de tiempo (milisegundos)
    timing_decode_ms: Optional[int] = None
    timing_export_ms: Optional[int] = None
    pages_exported: Optional[int] = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def _touch(self) -> None:
        self.updated_at = datetime.now(timezone.utc)

    def mark_loading(self) -> None:
        """Empieza una ingesta; el lienzo anterior sigue intacto."""
        self.state = SessionState.LOADING
        self._touch()

    def mark_ready(self, width: int, height: int) -> None:
        """La imagen ya está dibujada en el lienzo."""
        self.state = SessionState.READY
        self.width = width
        self.height = height
        self.images_ingested += 1
        self.error_message = None
        self._touch()

    def mark_failed(self, previous_state: SessionState, error_message: str) -> None:
        """Vuelve al estado previo a la ingesta y guarda el motivo del fallo."""
        self.state = previous_state
        self.error_message = error_message
        self._touch()

    def mark_cleared(self) -> None:
        self.state = SessionState.EMPTY
        self.width = 0
        self.height = 0
        self.error_message = None
        self.pages_exported = None
        self._touch()
