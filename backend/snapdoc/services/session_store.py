"""Almacén global de sesiones en memoria.

No hay base de datos, así que exponemos una instancia única de
`SessionService` que vive mientras el proceso está en marcha.
"""

from snapdoc.services.session_service import SessionService

# Instancia global única para toda la app
session_service = SessionService()
