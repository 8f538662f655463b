"""
API endpoints for claim evaluation.

POST /api/evaluate: case narrative + policy documents → coverage decision
"""

import logging
import os
from typing import Optional

from fastapi import APIRouter, File, Form, HTTPException, UploadFile

from claim_evaluator.errors import (
    AuthError,
    ClaimEvaluationError,
    ConfigurationError,
    IngestionError,
    SchemaError,
    ServiceError,
    TransportError,
)
from claim_evaluator.services import evaluator

ALLOWED_EXTENSIONS = (".pdf", ".doc", ".docx", ".txt", ".eml")
MAX_FILE_BYTES = 10 * 1024 * 1024

_ERROR_STATUS = {
    IngestionError: 422,
    AuthError: 401,
    TransportError: 503,
    ServiceError: 502,
    SchemaError: 502,
    ConfigurationError: 500,
}

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/evaluate")
async def evaluate_claim(
    query: str = Form("", description="Describe the case, e.g. '46-year-old male, knee surgery in Pune, 3-month-old policy'"),
    files: list[UploadFile] = File(default=[], description="Policy documents (PDF, Word, TXT or EML, max 10MB each)"),
    api_key: Optional[str] = Form(None, description="Groq API key; falls back to GROQ_API_KEY"),
) -> dict:
    """
    Evaluate whether the described procedure is covered by the uploaded policy.

    Returns the EvaluationResult JSON (camelCase keys).
    """
    if not query.strip():
        raise HTTPException(status_code=422, detail="Query required: please describe your medical case.")

    if not files:
        raise HTTPException(status_code=422, detail="Policy documents required: please upload at least one.")

    rejected = [f.filename or "<unnamed>" for f in files if not _is_acceptable(f)]
    if rejected:
        raise HTTPException(
            status_code=422,
            detail=f"Some files were rejected: {', '.join(rejected)}. "
            f"Please upload PDF, Word, text or email files under 10MB.",
        )

    credential = api_key or os.environ.get("GROQ_API_KEY")
    if not credential:
        raise HTTPException(status_code=401, detail="API key required to evaluate the claim.")

    try:
        result = await evaluator.evaluate(query, files, credential)
    except ClaimEvaluationError as exc:
        if isinstance(exc, SchemaError) and exc.raw is not None:
            logger.error("Failed to parse AI response: %s", exc.raw)
        logger.warning("Evaluation failed: %s", exc)
        raise HTTPException(status_code=_status_for(exc), detail=exc.message)
    finally:
        for f in files:
            await f.close()

    return result.model_dump(mode="json", by_alias=True)


def _is_acceptable(file: UploadFile) -> bool:
    name = (file.filename or "").lower()
    content_type = file.content_type or ""
    has_valid_type = any(
        name.endswith(ext) or ext.lstrip(".") in content_type for ext in ALLOWED_EXTENSIONS
    )
    return has_valid_type and (file.size is None or file.size <= MAX_FILE_BYTES)


def _status_for(exc: ClaimEvaluationError) -> int:
    for error_type, status in _ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status
    return 500
