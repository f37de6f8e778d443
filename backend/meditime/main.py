import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import inspect

from meditime.db import Base, engine
from meditime import models  # noqa: F401
from meditime.chat.orchestrator import ChatOrchestrator
from meditime.chat.session_memory import SessionStore
from meditime.config.chatbot import get_chatbot_config
from meditime.routes.chat_routes import router as chat_router
from meditime.seed import seed_catalog

logging.basicConfig(
    level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
_logger = logging.getLogger(__name__)


def _split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]

def _env_flag(name: str, *, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _required_tables() -> set[str]:
    return {"medicamentos", "preguntas", "historial"}


def _assert_schema_ready() -> None:
    inspector = inspect(engine)
    existing = set(inspector.get_table_names())
    missing = sorted(_required_tables() - existing)
    if not missing:
        return
    raise RuntimeError(
        "Database schema is not initialized. "
        "Run `alembic upgrade head` (from the `backend/` folder), "
        f"or set DB_AUTO_CREATE=1 for a quick dev bootstrap. Missing tables: {', '.join(missing)}"
    )


def init_database(*, seed: bool | None = None) -> None:
    auto_create = _env_flag("DB_AUTO_CREATE", default=(engine.dialect.name == "sqlite"))
    if auto_create:
        Base.metadata.create_all(bind=engine)
    else:
        _assert_schema_ready()

    if seed is None:
        seed = _env_flag("SEED_ON_STARTUP", default=False)
    if seed:
        seed_catalog()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_database()
    config = get_chatbot_config()
    sessions = SessionStore(ttl_minutes=config.session_ttl_minutes)
    app.state.orchestrator = ChatOrchestrator(sessions, config=config)

    scheduler = None
    if _env_flag("ENABLE_SESSION_SWEEP", default=False) and sessions.ttl is not None:
        from apscheduler.schedulers.background import BackgroundScheduler

        poll_seconds = int(os.getenv("SESSION_SWEEP_SECONDS", "300"))

        def _sweep_sessions() -> None:
            evicted = sessions.evict_expired()
            if evicted:
                _logger.info("evicted idle chat sessions count=%d", evicted)

        scheduler = BackgroundScheduler()
        scheduler.add_job(_sweep_sessions, "interval", seconds=poll_seconds, max_instances=1)
        scheduler.start()
    try:
        yield
    finally:
        if scheduler:
            scheduler.shutdown(wait=False)

app = FastAPI(title="MediTime Chatbot Backend", lifespan=lifespan)

cors_origins = _split_csv(os.getenv("CORS_ORIGINS")) or ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(chat_router)


@app.get("/")
def read_root():
    return {"message": "Backend is running"}
