from __future__ import annotations

from typing import List

from fastapi import APIRouter, File, HTTPException, Response, UploadFile, status

from snapdoc.core.config import get_settings
from snapdoc.core.enums import IngestionSource
from snapdoc.core.errors import (
    DecodeError,
    GeometryError,
    InvalidStateError,
    SessionNotFoundError,
    SnapdocError,
)
from snapdoc.models.image import RawInput
from snapdoc.models.session import CaptureSession
from snapdoc.services.capture_service import CaptureService
from snapdoc.services.session_store import session_service

router = APIRouter(prefix="/sessions", tags=["sessions"])

settings = get_settings()
capture_service = CaptureService(session_service=session_service)


def session_payload(session: CaptureSession) -> dict:
    """Vista pública del estado de una sesión."""
    return {
        "session_id": session.id,
        "state": session.state,
        "width": session.width,
        "height": session.height,
        "images_ingested": session.images_ingested,
        "error_message": session.error_message,
        "timing_decode_ms": session.timing_decode_ms,
        "timing_export_ms": session.timing_export_ms,
        "pages_exported": session.pages_exported,
    }


def to_http_error(error: SnapdocError) -> HTTPException:
    """Traduce las excepciones del dominio a códigos HTTP."""
    if isinstance(error, SessionNotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, InvalidStateError):
        code = status.HTTP_409_CONFLICT
    elif isinstance(error, (DecodeError, GeometryError)):
        code = status.HTTP_422_UNPROCESSABLE_ENTITY
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return HTTPException(status_code=code, detail=error.message)


async def read_items(items: List[UploadFile]) -> List[RawInput]:
    """Lee los elementos subidos conservando su tipo declarado y su orden."""
    raw_items: List[RawInput] = []
    for item in items:
        payload = await item.read()
        if len(payload) > settings.max_upload_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"Item {item.filename!r} exceeds {settings.max_upload_bytes} bytes.",
            )
        raw_items.append(
            RawInput(
                media_type=item.content_type or "application/octet-stream",
                payload=payload,
                filename=item.filename,
            )
        )
    return raw_items


async def ingest_items(
    session_id: str, items: List[UploadFile], source: IngestionSource
) -> dict:
    raw_items = await read_items(items)
    try:
        drawn = await capture_service.ingest(session_id, raw_items, source)
        session = session_service.require_session(session_id)
    except SnapdocError as e:
        raise to_http_error(e)

    return {**session_payload(session), "images_drawn": drawn}


@router.post("", summary="Create an empty capture session", status_code=status.HTTP_201_CREATED)
async def create_session() -> dict:
    session = session_service.create_session()
    return session_payload(session)


@router.get("/{session_id}", summary="Get session state")
async def get_session_status(session_id: str) -> dict:
    try:
        session = session_service.require_session(session_id)
    except SessionNotFoundError as e:
        raise to_http_error(e)
    return session_payload(session)


@router.post("/{session_id}/paste", summary="Ingest pasted clipboard items")
async def paste_items(session_id: str, items: List[UploadFile] = File(...)) -> dict:
    return await ingest_items(session_id, items, IngestionSource.PASTE)


@router.post("/{session_id}/drop", summary="Ingest dropped items")
async def drop_items(session_id: str, items: List[UploadFile] = File(...)) -> dict:
    return await ingest_items(session_id, items, IngestionSource.DROP)


@router.get("/{session_id}/snapshot", summary="Download the current surface as PNG")
async def get_snapshot(session_id: str) -> Response:
    try:
        snapshot = capture_service.snapshot(session_id)
    except SnapdocError as e:
        raise to_http_error(e)
    return Response(content=snapshot.data, media_type=snapshot.media_type)


@router.get("/{session_id}/export", summary="Export the surface as a paginated PDF")
async def export_session(session_id: str) -> Response:
    try:
        data = capture_service.export_document(session_id)
    except SnapdocError as e:
        raise to_http_error(e)

    return Response(
        content=data,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{settings.export_filename}"'
        },
    )


@router.post("/{session_id}/clear", summary="Clear the surface")
async def clear_session(session_id: str) -> dict:
    try:
        session = capture_service.clear(session_id)
    except SnapdocError as e:
        raise to_http_error(e)
    return session_payload(session)


@router.delete(
    "/{session_id}",
    summary="Delete a session",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_session(session_id: str) -> Response:
    try:
        session_service.delete_session(session_id)
    except SessionNotFoundError as e:
        raise to_http_error(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
