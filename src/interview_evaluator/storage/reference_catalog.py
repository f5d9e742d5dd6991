"""Question catalog of reference answers loaded from YAML."""

from pathlib import Path

import structlog
import yaml
from pydantic import BaseModel

from interview_evaluator.models.evaluation import ReferenceAnswer

logger = structlog.get_logger()


class CatalogQuestion(BaseModel):
    """A catalog entry."""

    id: str
    question: str
    expected_answer: str
    category: str = "general"


class ReferenceCatalog:
    """Read-only lookup of expected answers by question id.

    Args:
        questions: Catalog entries.
    """

    def __init__(self, questions: list[CatalogQuestion]):
        self._questions = {q.id: q for q in questions}

    @classmethod
    def from_file(cls, path: Path) -> "ReferenceCatalog":
        """Load a catalog from a YAML file with a top-level ``questions`` list."""
        if not path.exists():
            raise FileNotFoundError(f"Question catalog not found: {path}")
        with open(path, encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
        questions = [CatalogQuestion(**entry) for entry in data.get('questions', [])]
        logger.debug("catalog_loaded", path=str(path), count=len(questions))
        return cls(questions)

    def __len__(self) -> int:
        return len(self._questions)

    def questions(self) -> list[CatalogQuestion]:
        return list(self._questions.values())

    def get(self, question_id: str) -> ReferenceAnswer | None:
        """Reference answer for a question, or None if the id is unknown."""
        entry = self._questions.get(question_id)
        if entry is None:
            return None
        return ReferenceAnswer(
            text=entry.expected_answer,
            question_id=entry.id,
            question=entry.question,
        )
