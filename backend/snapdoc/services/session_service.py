"""Servicio simple en memoria para gestionar sesiones de captura.

Cada sesión tiene su modelo de estado (`CaptureSession`) y su lienzo
(`SurfaceService`). Se guardan juntos para que borrar una sesión libere
también la imagen.
"""

from __future__ import annotations

from typing import Dict, List, Optional
from uuid import uuid4

from snapdoc.core.errors import SessionNotFoundError
from snapdoc.models.session import CaptureSession
from snapdoc.services.surface_service import SurfaceService


class SessionService:
    """
    Gestión de sesiones. MVP: almacenamiento en memoria.
    """

    def __init__(self) -> None:
        self._sessions: Dict[str, CaptureSession] = {}
        self._surfaces: Dict[str, SurfaceService] = {}

    def create_session(self) -> CaptureSession:
        """Crea una sesión vacía con su propio lienzo."""
        session = CaptureSession(id=str(uuid4()))
        self._sessions[session.id] = session
        self._surfaces[session.id] = SurfaceService()
        return session

    def get_session(self, session_id: str) -> Optional[CaptureSession]:
        """Devuelve una sesión por id o None si no existe."""
        return self._sessions.get(session_id)

    def require_session(self, session_id: str) -> CaptureSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def get_surface(self, session_id: str) -> SurfaceService:
        surface = self._surfaces.get(session_id)
        if surface is None:
            raise SessionNotFoundError(session_id)
        return surface

    def update_session(self, session: CaptureSession) -> None:
        self._sessions[session.id] = session

    def delete_session(self, session_id: str) -> None:
        """Elimina la sesión y libera su lienzo."""
        self.require_session(session_id)
        del self._sessions[session_id]
        surface = self._surfaces.pop(session_id, None)
        if surface is not None:
            surface.clear()

    def list_sessions(self) -> List[CaptureSession]:
        """Listado sencillo para depuración."""
        return list(self._sessions.values())
