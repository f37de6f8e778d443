from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any

from sqlalchemy.orm import Session

from meditime import crud, schemas
from meditime.db import SessionLocal

_logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parents[1] / "data"
DEFAULT_MEDICATIONS_FILE = DATA_DIR / "medicamentos.json"
DEFAULT_FAQS_FILE = DATA_DIR / "preguntas.json"


def _load_list(path: Path) -> list[dict[str, Any]]:
    if not path.exists():
        return []
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError(f"{path} must contain a JSON list")
    return [item for item in raw if isinstance(item, dict)]


def seed_catalog(
    db: Session | None = None,
    *,
    medications_file: Path = DEFAULT_MEDICATIONS_FILE,
    faqs_file: Path = DEFAULT_FAQS_FILE,
) -> tuple[int, int]:
    """
    Insert medications and FAQs that are not stored yet.

    Existing records are never overwritten, so the command is safe to re-run.
    Returns (medications_added, faqs_added).
    """

    owns_session = db is None
    session = db or SessionLocal()
    try:
        meds_added = 0
        for item in _load_list(medications_file):
            medication = schemas.MedicationCreate.model_validate(item)
            if crud.upsert_medication(session, medication):
                meds_added += 1
                _logger.info("seeded medication name=%s", medication.name)

        faqs_added = 0
        for item in _load_list(faqs_file):
            if crud.add_faq(session, schemas.FaqCreate.model_validate(item)):
                faqs_added += 1

        _logger.info("seed completed medications_added=%d faqs_added=%d", meds_added, faqs_added)
        return meds_added, faqs_added
    finally:
        if owns_session:
            session.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the MediTime medication catalogue and FAQs.")
    parser.add_argument("--medications", type=Path, default=DEFAULT_MEDICATIONS_FILE)
    parser.add_argument("--faqs", type=Path, default=DEFAULT_FAQS_FILE)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    from meditime.main import init_database

    init_database(seed=False)
    meds, faqs = seed_catalog(medications_file=args.medications, faqs_file=args.faqs)
    print(f"medications added: {meds}, faqs added: {faqs}")


if __name__ == "__main__":
    main()
