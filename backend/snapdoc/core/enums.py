"""Enumeraciones compartidas que describen estados y orígenes de ingesta."""

from enum import Enum


class SessionState(str, Enum):
    """Estados posibles de una sesión de captura."""

    EMPTY = "empty"
    LOADING = "loading"
    READY = "ready"


class IngestionSource(str, Enum):
    """Evento que trajo la imagen al servicio."""

    PASTE = "paste"
    DROP = "drop"
