"""Excepciones propias del servicio.

Jerarquía:
    SnapdocError (base)
    ├── DecodeError           - datos de imagen corruptos o no soportados
    ├── GeometryError         - dimensiones degeneradas (ancho/alto <= 0)
    ├── SessionNotFoundError  - id de sesión desconocido
    └── InvalidStateError     - operación no válida en el estado actual
        └── IngestionInProgressError - ya hay una imagen decodificándose

Los servicios las lanzan y el router las traduce a respuestas HTTP.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class SnapdocError(Exception):
    """Base de todos los errores de la aplicación."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class DecodeError(SnapdocError):
    """La carga útil no pudo convertirse en una imagen."""


class GeometryError(SnapdocError):
    """Dimensiones que harían imposible escalar la imagen a la página."""


class SessionNotFoundError(SnapdocError):
    """No existe ninguna sesión con ese id."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session not found: {session_id}", {"session_id": session_id})
        self.session_id = session_id


class InvalidStateError(SnapdocError):
    """La sesión no está en un estado que permita la operación pedida."""


class IngestionInProgressError(InvalidStateError):
    """Se pidió una operación mientras otra imagen sigue cargando."""
