"""Loads the fixed question template and seeds it into an empty store."""

import json
import logging
from pathlib import Path

from models.question import Question
from schemas.question import QuestionCreate
from services.record_store import RecordStore

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent.parent / "data"
DEFAULT_QUESTIONS_FILE = DATA_DIR / "iso27001_questions.json"


def load_question_template(path: str | Path | None = None) -> list[QuestionCreate]:
    path = Path(path) if path else DEFAULT_QUESTIONS_FILE
    with open(path, encoding="utf-8") as f:
        return [QuestionCreate.model_validate(item) for item in json.load(f)]


async def seed_questions(store: RecordStore, path: str | Path | None = None) -> int:
    """Insert the template when no questions exist yet. Returns how many were inserted."""
    if await store.count_questions():
        return 0
    template = load_question_template(path)
    await store.insert_questions([Question(text=q.text, control_ref=q.control_ref) for q in template])
    logger.info("Seeded %d template questions", len(template))
    return len(template)
