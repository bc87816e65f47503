"""Carga de configuración de la aplicación.

Usa `pydantic-settings` para leer valores desde `.env` o variables de
entorno. La geometría de página está en milímetros, la unidad por defecto
del documento que exportamos (A4 con 10 mm de margen lateral).
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from snapdoc.models.page import PageGeometry


class Settings(BaseSettings):
    """Contenedor tipado para todas las opciones configurables."""

    app_name: str = "Snapdoc API"
    environment: str = "development"
    log_level: str = "INFO"

    # CORS
    allowed_origins: list[str] = ["*"]
    allow_credentials: bool = False

    # Geometría de la página exportada (mm)
    page_width_mm: float = 210.0
    page_height_mm: float = 297.0
    image_width_mm: float = 190.0
    margin_mm: float = 10.0

    # Tiempo máximo que esperamos a que una imagen se decodifique
    decode_timeout_seconds: float = 10.0
    # Tamaño máximo de cada elemento pegado/soltado
    max_upload_bytes: int = 25 * 1024 * 1024

    # Nombre con el que se descarga el documento
    export_filename: str = "screenshot.pdf"

    # Le indicamos a Pydantic que lea automáticamente las variables de entorno
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)


@lru_cache
def get_settings() -> Settings:
    """Crea (y memoriza) la configuración de forma perezosa.

    Usamos `lru_cache` para que sólo se construya una instancia por proceso.
    También normalizamos la lista de orígenes permitidos para CORS cuando
    llega como cadena separada por comas.
    """

    settings = Settings()
    # Accept comma separated `ALLOWED_ORIGINS` env value as a string
    ao = settings.allowed_origins
    if isinstance(ao, str):
        settings.allowed_origins = [s.strip() for s in ao.split(",") if s.strip()]
    return settings


def get_page_geometry() -> PageGeometry:
    """Geometría fija de página construida a partir de la configuración."""
    settings = get_settings()
    return PageGeometry(
        page_width=settings.page_width_mm,
        page_height=settings.page_height_mm,
        image_width=settings.image_width_mm,
        margin=settings.margin_mm,
    )
