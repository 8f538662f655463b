"""
Pydantic models for the claim evaluation result.
This is the source of truth for the JSON shape returned by the model and the API.

Field names are snake_case in Python; the wire format uses camelCase aliases.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Decision(str, Enum):
    APPROVED = "Approved"
    REJECTED = "Rejected"
    MORE_INFO_NEEDED = "More Info Needed"


class Document(BaseModel):
    """One uploaded file after text extraction."""
    model_config = ConfigDict(frozen=True)

    name: str
    text: str


class ParsedQuery(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    age: Optional[int] = Field(default=None, ge=0)
    gender: Optional[str] = None
    procedure: Optional[str] = None
    location: Optional[str] = None
    policy_duration: Optional[str] = Field(default=None, alias="policyDuration")


class PolicyClause(BaseModel):
    """One piece of policy evidence backing the decision."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str
    page_number: Optional[int] = Field(default=None, ge=1, alias="pageNumber")
    snippet: str = Field(min_length=1)
    reasoning: str = Field(min_length=1)


class EvaluationResult(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    parsed_query: ParsedQuery = Field(alias="parsedQuery")
    decision: Decision
    amount: Optional[float] = Field(default=None, ge=0)
    justification: list[PolicyClause]


REQUIRED_RESULT_FIELDS = ("parsedQuery", "decision", "justification")
