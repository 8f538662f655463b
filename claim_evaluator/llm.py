"""
Groq API wrapper. The only file that calls Groq.

One request per call, no retries. HTTP failures are translated into the
pipeline's typed errors; the model output is returned untouched.
"""

import logging
import os
from typing import Any, Optional

import groq
import httpx
from groq import AsyncGroq

from claim_evaluator.errors import AuthError, ConfigurationError, ServiceError, TransportError
from claim_evaluator.prompts.evaluation_prompt import SYSTEM_PROMPT

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "llama-3.3-70b-versatile"
DEFAULT_MAX_TOKENS = 2000
TEMPERATURE = 0.3
AUTH_STATUS_CODES = {401, 403}


class GroqClient:
    def __init__(
        self,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.model = model or os.environ.get("GROQ_MODEL", DEFAULT_MODEL)
        self.max_tokens = max_tokens or _max_tokens_from_env()
        self._http_client = http_client

    async def complete(self, payload: str, credential: str) -> str:
        """Send the prompt to Groq and return the raw assistant text."""
        if not credential:
            raise AuthError("Unauthorized: no API key provided")

        client = AsyncGroq(api_key=credential, max_retries=0, http_client=self._http_client)
        try:
            logger.info("Requesting evaluation from model=%s", self.model)
            response = await client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": payload},
                ],
                temperature=TEMPERATURE,
                max_tokens=self.max_tokens,
                stream=False,
            )
        except groq.APIStatusError as exc:
            raise _status_error(exc) from exc
        except groq.APIConnectionError as exc:
            raise TransportError(f"Could not reach Groq API: {exc}") from exc
        except groq.APIResponseValidationError as exc:
            raise ServiceError(f"Malformed response from Groq: {exc}") from exc
        finally:
            if self._http_client is None:
                await client.close()

        # A non-JSON 2xx body (e.g. a proxy error page) comes back as a plain str
        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as exc:
            raise ServiceError("Malformed response from Groq: no chat completion in body") from exc
        if not content:
            raise ServiceError("No response content from Groq")
        return content


def _max_tokens_from_env() -> int:
    value = os.environ.get("GROQ_MAX_TOKENS")
    if value is None:
        return DEFAULT_MAX_TOKENS
    try:
        max_tokens = int(value)
    except ValueError:
        max_tokens = 0
    if max_tokens <= 0:
        raise ConfigurationError(f"GROQ_MAX_TOKENS must be a positive integer, got {value!r}")
    return max_tokens


def _status_error(exc: groq.APIStatusError) -> Exception:
    status = exc.status_code
    message = _service_message(exc.body)
    if status in AUTH_STATUS_CODES:
        return AuthError(message or f"Unauthorized: Groq API returned {status}", status_code=status)
    reason = exc.response.reason_phrase if exc.response is not None else ""
    return ServiceError(message or f"Groq API error: {status} {reason}".strip(), status_code=status)


def _service_message(body: Any) -> Optional[str]:
    """Pull `error.message` out of an OpenAI-style error body, if present."""
    if not isinstance(body, dict):
        return None
    if isinstance(body.get("error"), dict):
        body = body["error"]
    message = body.get("message")
    return message if isinstance(message, str) and message else None
