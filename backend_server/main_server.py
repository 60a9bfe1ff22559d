from __future__ import annotations

import threading
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

import assistant_config as config
from assistant_errors import AssistantError, KnowledgeBaseNotReadyError
from exception_logger import exception_logger
from response_manager import Resolution, ResponseManager

from .session_manager import SessionManager


class ChatRequest(BaseModel):
    message: str
    session_id: Optional[str] = None


class SelectRequest(BaseModel):
    session_id: str
    document_id: str


class Suggestion(BaseModel):
    id: str
    label: str


class ChatResponse(BaseModel):
    session_id: str
    text: str
    follow_ups: List[str]
    outcome: str
    did_you_mean: List[Suggestion]


app = FastAPI(title="Portfolio Assistant Backend", version="1.0.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

sessions = SessionManager()

# Lazy-loaded engine
_backend_lock = threading.Lock()
_engine: Optional[ResponseManager] = None


def ensure_backend_initialized() -> ResponseManager:
    """Load the knowledge base and build the engine on first use.

    Thread-safe. A failed load leaves the backend uninitialized so the next
    request retries, and is reported to the client as "not ready".
    """
    global _engine
    if _engine is not None:
        return _engine

    with _backend_lock:
        if _engine is not None:
            return _engine
        # Imported here so the app module loads without touching the data files
        from knowledge_loader import load_knowledge_base, load_synonyms

        try:
            _engine = ResponseManager(
                knowledge_base=load_knowledge_base(config.KNOWLEDGE_BASE_SOURCE),
                synonyms=load_synonyms(config.SYNONYMS_SOURCE),
            )
        except AssistantError as exc:
            _engine = None
            raise KnowledgeBaseNotReadyError(str(exc)) from exc
        return _engine


def set_engine(engine: Optional[ResponseManager]):
    """Install a prebuilt engine (or None to force a reload on next request)."""
    global _engine
    with _backend_lock:
        _engine = engine


def _to_response(session_id: str, resolution: Resolution) -> ChatResponse:
    return ChatResponse(
        session_id=session_id,
        text=resolution.text,
        follow_ups=resolution.follow_ups,
        outcome=resolution.outcome.value,
        did_you_mean=[
            Suggestion(id=doc.id, label=doc.label) for doc in resolution.context.did_you_mean
        ],
    )


def _engine_or_503() -> ResponseManager:
    try:
        return ensure_backend_initialized()
    except KnowledgeBaseNotReadyError as exc:
        exception_logger.log_exception(exc, "server", "engine initialization")
        raise HTTPException(status_code=503, detail="Knowledge base not ready") from exc


@app.get("/health")
async def health():
    return {"status": "ok", "ready": _engine is not None and _engine.is_ready, "sessions": sessions.count()}


@app.post("/chat", response_model=ChatResponse)
def chat(request: ChatRequest):
    engine = _engine_or_503()
    session_id, context, turn_lock = sessions.open(request.session_id)
    with turn_lock:
        try:
            resolution = engine.resolve(request.message, context)
        except KnowledgeBaseNotReadyError as exc:
            raise HTTPException(status_code=503, detail="Knowledge base not ready") from exc
    return _to_response(session_id, resolution)


@app.post("/select", response_model=ChatResponse)
def select(request: SelectRequest):
    engine = _engine_or_503()
    session = sessions.get(request.session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Unknown session")
    context, turn_lock = session

    document = engine.index.get(request.document_id)
    if document is None:
        raise HTTPException(status_code=404, detail="Unknown document")

    with turn_lock:
        resolution = engine.select_did_you_mean(document, context)
    return _to_response(request.session_id, resolution)


@app.delete("/sessions/{session_id}")
async def close_session(session_id: str):
    if not sessions.close(session_id):
        raise HTTPException(status_code=404, detail="Unknown session")
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("backend_server.main_server:app", host=config.HTTP_HOST, port=config.HTTP_PORT, reload=False)
