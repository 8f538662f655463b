"""
Tests for the claim evaluation prompt builder.
"""

from claim_evaluator.prompts.evaluation_prompt import build_evaluation_prompt
from claim_evaluator.schemas import Document

NARRATIVE = "32-year-old female, appendectomy, 2-year-old policy"


def test_prompt_is_deterministic():
    docs = [Document(name="policy.txt", text="Appendectomy is covered after 90 days waiting period.")]
    assert build_evaluation_prompt(NARRATIVE, docs) == build_evaluation_prompt(NARRATIVE, list(docs))


def test_prompt_contains_case_documents_and_schema():
    docs = [Document(name="policy.txt", text="Appendectomy is covered after 90 days waiting period.")]
    prompt = build_evaluation_prompt(NARRATIVE, docs)

    assert f"MEDICAL CASE:\n{NARRATIVE}\n" in prompt
    assert "=== policy.txt ===\nAppendectomy is covered after 90 days waiting period." in prompt
    for key in ("parsedQuery", "policyDuration", "decision", "amount", "justification", "pageNumber"):
        assert f'"{key}"' in prompt
    assert '"Approved" | "Rejected" | "More Info Needed"' in prompt
    assert "waiting periods" in prompt
    assert "Respond only with valid JSON" in prompt


def test_documents_keep_ingestion_order():
    docs = [Document(name="b.txt", text="second"), Document(name="a.txt", text="first")]
    prompt = build_evaluation_prompt(NARRATIVE, docs)
    assert prompt.index("=== b.txt ===") < prompt.index("=== a.txt ===")
    assert "=== b.txt ===\nsecond\n\n=== a.txt ===\nfirst" in prompt


def test_empty_document_section():
    prompt = build_evaluation_prompt(NARRATIVE, [])
    assert "POLICY DOCUMENTS:\n\n" in prompt
    assert "===" not in prompt
