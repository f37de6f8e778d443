from __future__ import annotations

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session

from meditime import schemas
from meditime.chat.orchestrator import ChatOrchestrator
from meditime.db import get_db
from meditime.errors import EmptyHistoryError, StoreError


router = APIRouter(prefix="/api", tags=["Chat"])


def get_orchestrator(request: Request) -> ChatOrchestrator:
    return request.app.state.orchestrator


def get_client_key(request: Request, chat_id: str | None = Header(None, alias="X-Chat-ID")) -> str:
    if chat_id and chat_id.strip():
        return chat_id.strip()
    return request.client.host if request.client else "anonymous"


@router.post("/chat", response_model=schemas.ChatOut)
async def chat(
    payload: schemas.ChatIn,
    db: Session = Depends(get_db),
    orchestrator: ChatOrchestrator = Depends(get_orchestrator),
    client_key: str = Depends(get_client_key),
):
    message = (payload.message or "").strip()
    if not message:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="El mensaje es obligatorio")

    try:
        result = await orchestrator.handle_message(db, client_key, message)
    except StoreError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc

    return schemas.ChatOut(
        respuestas=result.parts,
        stage=result.stage,
        medication=result.medication,
        intent=result.intent,
    )


@router.get("/preguntas", response_model=list[schemas.Faq])
def list_predefined_questions(
    db: Session = Depends(get_db),
    orchestrator: ChatOrchestrator = Depends(get_orchestrator),
):
    try:
        return orchestrator.list_faqs(db)
    except StoreError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="No se pudieron cargar las preguntas predefinidas",
        ) from exc


@router.get("/historial", response_model=list[schemas.HistoryEntry])
def list_history(
    db: Session = Depends(get_db),
    orchestrator: ChatOrchestrator = Depends(get_orchestrator),
    limit: int | None = None,
):
    if limit is not None and (limit < 1 or limit > 500):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="limit must be between 1 and 500")
    try:
        return orchestrator.list_history(db, limit=limit)
    except StoreError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="No se pudo cargar el historial") from exc


@router.delete("/historial", response_model=schemas.ClearHistoryOut)
def clear_history(
    db: Session = Depends(get_db),
    orchestrator: ChatOrchestrator = Depends(get_orchestrator),
    client_key: str = Depends(get_client_key),
):
    try:
        deleted = orchestrator.clear_history(db, client_key=client_key)
    except EmptyHistoryError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except StoreError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Error al borrar historial.") from exc
    return schemas.ClearHistoryOut(ok=True, message="Historial borrado correctamente.", deleted=deleted)
