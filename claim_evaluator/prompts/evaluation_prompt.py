"""
Prompt builder for claim evaluation: case narrative + policy documents → decision JSON.

The output schema is spelled out literally so the model answers with exactly
the shape validation.py checks. No timestamps or randomness: the same inputs
always produce the same prompt.
"""

from typing import Sequence

from claim_evaluator.schemas import Document

SYSTEM_PROMPT = "You are an expert insurance claim evaluator. Always respond with valid JSON."

OUTPUT_SCHEMA = """{
  "parsedQuery": {
    "age": number or null,
    "gender": "string or null",
    "procedure": "string or null",
    "location": "string or null",
    "policyDuration": "string or null"
  },
  "decision": "Approved" | "Rejected" | "More Info Needed",
  "amount": number or null,
  "justification": [
    {
      "title": "Relevant policy clause title",
      "pageNumber": number or null,
      "snippet": "Relevant text from policy",
      "reasoning": "Explanation of how this clause applies"
    }
  ]
}"""


def format_documents(documents: Sequence[Document]) -> str:
    return "\n\n".join(f"=== {doc.name} ===\n{doc.text}" for doc in documents)


def build_evaluation_prompt(case_narrative: str, documents: Sequence[Document]) -> str:
    documents_text = format_documents(documents)
    return f"""You are an expert insurance claim evaluator. Analyze the following medical case and policy documents to determine if the claim should be approved.

MEDICAL CASE:
{case_narrative}

POLICY DOCUMENTS:
{documents_text}

Please provide a JSON response with the following structure:
{OUTPUT_SCHEMA}

Guidelines:
1. Parse the query to extract structured information
2. Look for relevant clauses in the policy documents (exclusions, waiting periods, coverage limits, etc.)
3. Make a decision based on policy terms
4. Provide clear reasoning for each relevant clause
5. If amount is covered, estimate based on policy terms
6. Be thorough but concise in your analysis

Respond only with valid JSON. No markdown fences, no commentary."""
