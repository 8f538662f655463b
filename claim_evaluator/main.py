"""
Claim evaluator HTTP service.

Serves POST /api/evaluate, which checks a described medical procedure against
uploaded policy documents and returns a coverage decision with the policy
clauses behind it. Settings come from the environment or a root-level .env.
"""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI

env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))

from claim_evaluator.llm import DEFAULT_MODEL, GroqClient
from claim_evaluator.router import router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Fail at boot on a malformed GROQ_* setting rather than on the first claim
    client = GroqClient()
    logger.info("Claim evaluator ready, model=%s max_tokens=%d", client.model, client.max_tokens)
    yield


app = FastAPI(
    title="Insurance Claim Evaluator",
    description="LLM-backed pre-claim coverage check against uploaded policy documents.",
    version="0.1.0",
    lifespan=lifespan,
)
app.include_router(router, prefix="/api", tags=["Claims"])


@app.get("/")
def health():
    return {"status": "ok", "service": "claim-evaluator", "model": os.environ.get("GROQ_MODEL", DEFAULT_MODEL)}
