import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Ensure the backend package is importable when running tests from repo root
BASE_DIR = Path(__file__).resolve().parents[1]
if str(BASE_DIR) not in sys.path:
    sys.path.append(str(BASE_DIR))

from meditime import crud, schemas
from meditime.db import Base, get_db
from meditime.errors import StoreError
from meditime.main import app

SQLALCHEMY_DATABASE_URL = "sqlite://"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def setup_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def seed_catalog():
    db = TestingSessionLocal()
    try:
        crud.upsert_medication(
            db,
            schemas.MedicationCreate.model_validate(
                {
                    "nombre": "Aspirina",
                    "presentacion": "comprimidos de 500 mg",
                    "usos": ["aliviar el dolor"],
                    "efectos": ["náuseas"],
                    "adversos": ["sangrado"],
                    "interacciones": ["warfarina"],
                }
            ),
        )
        crud.add_faq(db, schemas.FaqCreate.model_validate({"texto": "¿Qué hago si olvido una dosis?", "respuesta": "Tómala en cuanto te acuerdes."}))
        crud.add_faq(db, schemas.FaqCreate.model_validate({"texto": "¿Cómo guardo mis medicamentos?", "respuesta": "En un lugar fresco y seco."}))
    finally:
        db.close()


def test_chat_follow_up_uses_client_session(client: TestClient):
    seed_catalog()
    headers = {"X-Chat-ID": "chat-1"}

    res = client.post("/api/chat", headers=headers, json={"message": "¿para qué sirve la aspirina?"})
    assert res.status_code == 200
    body = res.json()
    assert body["stage"] == "medication"
    assert body["medication"] == "Aspirina"
    assert body["respuestas"] == ["El Aspirina se usa para aliviar el dolor."]

    res = client.post("/api/chat", headers=headers, json={"message": "¿y los efectos adversos?"})
    assert res.status_code == 200
    assert res.json()["intent"] == "adversos"
    assert res.json()["respuestas"] == ["Atención: Aspirina puede causar sangrado."]

    res = client.post("/api/chat", headers={"X-Chat-ID": "chat-2"}, json={"message": "¿y los efectos adversos?"})
    assert res.status_code == 200
    assert res.json()["stage"] == "fallback"


def test_chat_multi_part_reply(client: TestClient):
    res = client.post("/api/chat", json={"message": "¿qué puedo preguntarte?"})
    assert res.status_code == 200
    assert len(res.json()["respuestas"]) == 2


def test_chat_requires_message(client: TestClient):
    res = client.post("/api/chat", json={"message": "   "})
    assert res.status_code == 400


def test_chat_store_failure_returns_503(client: TestClient, monkeypatch):
    def boom(*_args, **_kwargs):
        raise StoreError("catalog down")

    monkeypatch.setattr(crud, "list_faqs", boom)
    res = client.post("/api/chat", json={"message": "¿para qué sirve la aspirina?"})
    assert res.status_code == 503


def test_predefined_questions_are_sorted(client: TestClient):
    seed_catalog()
    res = client.get("/api/preguntas")
    assert res.status_code == 200
    questions = [item["question"] for item in res.json()]
    assert questions == sorted(questions)
    assert len(questions) == 2


def test_history_listing_and_clear(client: TestClient):
    seed_catalog()
    client.post("/api/chat", json={"message": "hola"})
    client.post("/api/chat", json={"message": "¿qué hago si olvido una dosis?"})

    res = client.get("/api/historial")
    assert res.status_code == 200
    history = res.json()
    assert len(history) == 2
    assert history[0]["answer"] == "Tómala en cuanto te acuerdes."

    res = client.get("/api/historial", params={"limit": 1})
    assert len(res.json()) == 1

    res = client.get("/api/historial", params={"limit": 0})
    assert res.status_code == 400

    res = client.delete("/api/historial")
    assert res.status_code == 200
    assert res.json() == {"ok": True, "message": "Historial borrado correctamente.", "deleted": 2}

    res = client.delete("/api/historial")
    assert res.status_code == 409
    assert res.json()["detail"] == "No hay historial para borrar."


def test_root(client: TestClient):
    res = client.get("/")
    assert res.status_code == 200
    assert res.json() == {"message": "Backend is running"}


def test_chat_rejects_oversized_message(client: TestClient):
    res = client.post("/api/chat", json={"message": "dolor " * 1000})
    assert res.status_code == 422
    assert client.get("/api/historial").json() == []
