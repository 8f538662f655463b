"""
Orchestrates the claim evaluation pipeline:
  ingest → compose prompt → Groq → validate

This is the only entry point for evaluating a claim. Any stage failure stops
the pipeline and its typed error reaches the caller unchanged.
"""

import logging
from typing import Mapping, Optional, Sequence

from claim_evaluator.llm import GroqClient
from claim_evaluator.prompts.evaluation_prompt import build_evaluation_prompt
from claim_evaluator.reader import TextExtractor, UploadedFile, ingest
from claim_evaluator.schemas import EvaluationResult
from claim_evaluator.validation import validate

logger = logging.getLogger(__name__)


async def evaluate(
    case_narrative: str,
    files: Sequence[UploadedFile],
    credential: str,
    *,
    client: Optional[GroqClient] = None,
    extractors: Optional[Mapping[str, TextExtractor]] = None,
    strict: bool = True,
) -> EvaluationResult:
    """
    Evaluate a claim narrative against uploaded policy documents.

    Args:
        case_narrative: Free-text description of the case.
        files:          Upload handles (fastapi.UploadFile or compatible).
        credential:     Groq API key, sent as a bearer token.
        client:         Reasoning client; a default GroqClient when omitted.
        extractors:     Per-format text extractors overriding the defaults.
        strict:         Decode every field of the response, not just the top-level keys.

    Raises:
        IngestionError, AuthError, TransportError, ServiceError, SchemaError
    """
    documents = await ingest(files, extractors)

    prompt = build_evaluation_prompt(case_narrative, documents)
    logger.debug("Composed prompt of %d chars from %d document(s)", len(prompt), len(documents))

    raw = await (client or GroqClient()).complete(prompt, credential)

    result = validate(raw, strict=strict)
    if not result.justification:
        logger.warning("Decision %r returned without any justifying clause", result.decision)

    logger.info("Evaluation complete, decision=%s", getattr(result.decision, "value", result.decision))
    return result
