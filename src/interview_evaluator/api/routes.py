"""REST API routes for question lookup and answer evaluation."""

import functools
from typing import Any

import structlog
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from interview_evaluator.assessment.evaluator import ResponseEvaluator
from interview_evaluator.config import get_settings
from interview_evaluator.models.evaluation import EvaluationResult, ReferenceAnswer
from interview_evaluator.storage.reference_catalog import ReferenceCatalog

logger = structlog.get_logger()
router = APIRouter(prefix="/api")


class EvaluateRequest(BaseModel):
    """Body of POST /api/evaluate."""

    text: str | None = None
    question_id: str | None = None
    reference_answer: str | None = None
    media_duration_seconds: float | None = Field(default=None, ge=0)
    modality_metrics: dict[str, Any] | None = None


@functools.lru_cache
def get_evaluator() -> ResponseEvaluator:
    return ResponseEvaluator.from_settings(get_settings())


@functools.lru_cache
def get_catalog() -> ReferenceCatalog:
    return ReferenceCatalog.from_file(get_settings().questions_path)


def resolve_reference(request: EvaluateRequest) -> ReferenceAnswer | None:
    """Pick the reference answer: catalog entry first, then an inline answer."""
    if request.question_id:
        reference = get_catalog().get(request.question_id)
        if reference is None:
            raise HTTPException(status_code=404, detail="Question not found")
        return reference
    if request.reference_answer is not None:
        return ReferenceAnswer(text=request.reference_answer)
    return None


@router.get("/questions")
async def list_questions() -> list[dict]:
    """List catalog questions without their expected answers."""
    return [
        {"id": q.id, "category": q.category, "question": q.question}
        for q in get_catalog().questions()
    ]


@router.post("/evaluate")
def evaluate_answer(request: EvaluateRequest) -> EvaluationResult:
    """Evaluate one answer against its reference. Runs in the threadpool."""
    reference = resolve_reference(request)
    logger.info(
        "evaluate_request",
        question_id=request.question_id,
        has_media=request.modality_metrics is not None,
    )
    return get_evaluator().evaluate(
        request.text,
        reference,
        request.modality_metrics,
        media_duration_seconds=request.media_duration_seconds,
    )


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}
