"""
Raw model output → EvaluationResult.

Two levels of checking:
  - lenient (strict=False): JSON parse + required top-level keys, nothing else.
  - strict (default): also decode every field through the pydantic models, so an
    unknown decision or a malformed clause is rejected instead of passed through.
"""

import json
import re
from typing import Any

from pydantic import ValidationError

from claim_evaluator.errors import SchemaError, UnrecognizedDecisionError
from claim_evaluator.schemas import (
    REQUIRED_RESULT_FIELDS,
    Decision,
    EvaluationResult,
    ParsedQuery,
    PolicyClause,
)

_FENCE_RE = re.compile(r"^\s*```(?:json)?\s*(.*?)\s*```\s*$", re.DOTALL)


def validate(raw: str, strict: bool = True) -> EvaluationResult:
    """
    Parse and check a model response.

    Raises SchemaError (with `raw` attached) on any failure.
    """
    data = _parse(raw)

    missing = [field for field in REQUIRED_RESULT_FIELDS if field not in data]
    if missing:
        raise SchemaError(
            f"Invalid response structure from AI: missing required field(s) {', '.join(missing)}",
            raw=raw,
            missing_fields=missing,
        )

    if not strict:
        return _construct(data)

    decision = data.get("decision")
    if decision not in [d.value for d in Decision]:
        raise UnrecognizedDecisionError(decision, raw=raw)

    try:
        return EvaluationResult.model_validate(data)
    except ValidationError as exc:
        problems = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        ]
        raise SchemaError(
            f"Invalid response structure from AI: {'; '.join(problems)}",
            raw=raw,
            details={"errors": problems},
        ) from exc


def _parse(raw: str) -> dict:
    match = _FENCE_RE.match(raw or "")
    cleaned = match.group(1) if match else raw
    try:
        data = json.loads(cleaned)
    except (TypeError, ValueError) as exc:
        raise SchemaError("Invalid JSON response from AI. Please try again.", raw=raw) from exc

    if not isinstance(data, dict):
        raise SchemaError("Invalid response structure from AI: expected a JSON object", raw=raw)
    return data


def _construct(data: dict) -> EvaluationResult:
    """Type the parsed value as EvaluationResult without validating its contents."""
    fields: dict[str, Any] = dict(data)
    if isinstance(fields.get("parsedQuery"), dict):
        fields["parsedQuery"] = ParsedQuery.model_construct(**fields["parsedQuery"])
    if isinstance(fields.get("justification"), list):
        fields["justification"] = [
            PolicyClause.model_construct(**clause) if isinstance(clause, dict) else clause
            for clause in fields["justification"]
        ]
    return EvaluationResult.model_construct(**fields)
