"""Punto de entrada de la API usando FastAPI.

Este módulo crea la aplicación, configura logging y CORS y registra los
routers de sesiones de captura.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from snapdoc.api.v1.sessions import router as sessions_router
from snapdoc.core.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s [%(levelname)-8s] %(name)s - %(message)s",
)

app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
)

# CORS configurable via `settings.allowed_origins` (definido en .env)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[str(o) for o in settings.allowed_origins],
    allow_credentials=settings.allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def ensure_cors_header(request: Request, call_next):
    """Fallback middleware that sets the CORS headers dynamically.

    - If `ALLOWED_ORIGINS` contains `*`, respond `Access-Control-Allow-Origin: *`.
    - Otherwise, if Origin is present and in the whitelist, echo it back.
    """
    origin = request.headers.get("origin")
    response = await call_next(request)

    if not origin:
        return response

    allowed = [str(o) for o in settings.allowed_origins]
    if allowed == ["*"]:
        response.headers["Access-Control-Allow-Origin"] = "*"
    elif origin in allowed:
        response.headers["Access-Control-Allow-Origin"] = origin
    else:
        return response

    if settings.allow_credentials:
        response.headers["Access-Control-Allow-Credentials"] = "true"
    return response


@app.get("/health")
async def health():
    return {"status": "ok"}


app.include_router(sessions_router, prefix="/api/v1")
