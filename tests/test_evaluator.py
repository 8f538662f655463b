"""
End-to-end tests for the evaluation pipeline with a mocked Groq endpoint.
"""

import io
import json

import httpx
import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from claim_evaluator.errors import AuthError, IngestionError, SchemaError
from claim_evaluator.llm import GroqClient
from claim_evaluator.schemas import Decision
from claim_evaluator.services.evaluator import evaluate

NARRATIVE = "32-year-old female, appendectomy, 2-year-old policy"
POLICY_TEXT = "Appendectomy is covered after 90 days waiting period."

APPROVED = {
    "parsedQuery": {
        "age": 32,
        "gender": "female",
        "procedure": "appendectomy",
        "location": None,
        "policyDuration": "2 years",
    },
    "decision": "Approved",
    "amount": None,
    "justification": [
        {
            "title": "Waiting Period",
            "pageNumber": None,
            "snippet": POLICY_TEXT,
            "reasoning": "The policy has been active for 2 years, beyond the 90 day waiting period.",
        }
    ],
}


def _upload(name: str, text: str) -> UploadFile:
    return UploadFile(
        file=io.BytesIO(text.encode("utf-8")),
        filename=name,
        headers=Headers({"content-type": "text/plain"}),
    )


def _client(status: int, content=None, body=None, prompts=None) -> GroqClient:
    def handler(request: httpx.Request) -> httpx.Response:
        if prompts is not None:
            prompts.append(json.loads(request.content)["messages"][1]["content"])
        if status != 200:
            return httpx.Response(status, json=body) if body is not None else httpx.Response(status)
        return httpx.Response(
            200,
            json={
                "id": "chatcmpl-test",
                "object": "chat.completion",
                "created": 1700000000,
                "model": "llama-3.3-70b-versatile",
                "choices": [
                    {"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": "stop"}
                ],
            },
        )

    return GroqClient(http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


@pytest.mark.asyncio
async def test_scenario_a_well_formed_response_is_returned_unchanged():
    client = _client(200, content=json.dumps(APPROVED))

    result = await evaluate(NARRATIVE, [_upload("policy.txt", POLICY_TEXT)], "sk-test", client=client)

    assert result.decision is Decision.APPROVED
    assert len(result.justification) == 1
    assert result.model_dump(mode="json", by_alias=True) == APPROVED


@pytest.mark.asyncio
async def test_scenario_b_no_documents_still_composes_prompt():
    prompts: list[str] = []
    client = _client(200, content=json.dumps({**APPROVED, "decision": "More Info Needed"}), prompts=prompts)

    result = await evaluate(NARRATIVE, [], "sk-test", client=client)

    assert result.decision is Decision.MORE_INFO_NEEDED
    assert len(prompts) == 1
    assert NARRATIVE in prompts[0]
    assert "POLICY DOCUMENTS:\n\n" in prompts[0]


@pytest.mark.asyncio
async def test_scenario_c_prose_answer_is_schema_error():
    client = _client(200, content="I cannot process this request.")

    with pytest.raises(SchemaError) as exc_info:
        await evaluate(NARRATIVE, [_upload("policy.txt", POLICY_TEXT)], "sk-test", client=client)
    assert exc_info.value.raw == "I cannot process this request."


@pytest.mark.asyncio
async def test_scenario_d_unauthorized_is_auth_error():
    client = _client(401, body={"error": {"message": "Invalid API Key"}})

    with pytest.raises(AuthError) as exc_info:
        await evaluate(NARRATIVE, [_upload("policy.txt", POLICY_TEXT)], "sk-bad", client=client)
    assert exc_info.value.message == "Invalid API Key"


@pytest.mark.asyncio
async def test_ingestion_failure_short_circuits():
    prompts: list[str] = []
    client = _client(200, content=json.dumps(APPROVED), prompts=prompts)
    bad = UploadFile(
        file=io.BytesIO(b"\xff\xfe\xfa"),
        filename="policy.txt",
        headers=Headers({"content-type": "text/plain; charset=utf-8"}),
    )

    with pytest.raises(IngestionError):
        await evaluate(NARRATIVE, [bad], "sk-test", client=client)
    assert prompts == []


@pytest.mark.asyncio
async def test_document_text_reaches_the_model():
    prompts: list[str] = []
    client = _client(200, content=json.dumps(APPROVED), prompts=prompts)

    await evaluate(NARRATIVE, [_upload("policy.txt", POLICY_TEXT)], "sk-test", client=client)

    assert f"=== policy.txt ===\n{POLICY_TEXT}" in prompts[0]


@pytest.mark.asyncio
async def test_lenient_mode_passes_unknown_decision_through():
    client = _client(200, content=json.dumps({**APPROVED, "decision": "Maybe"}))

    result = await evaluate(
        NARRATIVE, [_upload("policy.txt", POLICY_TEXT)], "sk-test", client=client, strict=False
    )
    assert result.decision == "Maybe"
