"""
Cloudflare Workers AI gateway.

All outbound calls to the inference endpoint go through this class.

  - Chat messages are rendered into the Llama 3 Instruct prompt template
  - One attempt per call, no retries; the caller surfaces failures as-is
  - Structured GatewayResult returned to the blueprint

Testability: pass a mock `session` to WorkersAIGateway() in tests instead of
letting it create a real requests.Session internally, or patch the
module-level `workers_ai_gateway.run`.
"""

from __future__ import annotations

import logging
import time

import requests

logger = logging.getLogger(__name__)

API_BASE = "https://api.cloudflare.com/client/v4"
DEFAULT_MODEL = "@cf/meta/llama-3-8b-instruct"
MAX_TOKENS = 1024
TEMPERATURE = 0.6
_DEFAULT_TIMEOUT = 60

CHAT_ROLES = ("system", "user", "assistant")


def build_llama3_prompt(messages: list[dict]) -> str:
    """Render chat messages with the Llama 3 Instruct template.

    Messages with an unknown role are skipped. The prompt always ends with an
    open assistant header so the model answers as the assistant.
    """
    prompt = ""
    for msg in messages:
        role = msg.get("role")
        content = msg.get("content", "")
        if role == "system":
            prompt += f"<|begin_of_text|><|start_header_id|>system<|end_header_id|>\n\n{content}<|eot_id|>"
        elif role in ("user", "assistant"):
            prompt += f"<|start_header_id|>{role}<|end_header_id|>\n\n{content}<|eot_id|>"
    prompt += "<|start_header_id|>assistant<|end_header_id|>\n\n"
    return prompt


class GatewayResult:
    """Structured return value from WorkersAIGateway calls.

    Attributes:
        ok:           True if the call succeeded (HTTP 2xx).
        status_code:  HTTP status code.
        data:         Parsed JSON response body (or {"raw": text} when not JSON).
        duration_ms:  Round-trip latency in milliseconds.
    """

    def __init__(self, ok: bool, status_code: int, data, duration_ms: int) -> None:
        self.ok = ok
        self.status_code = status_code
        self.data = data
        self.duration_ms = duration_ms


class WorkersAIGateway:
    """Workers AI REST gateway (module-level singleton below).

    Usage:
        from safety_vitals.integrations.workers_ai_gateway import workers_ai_gateway
        result = workers_ai_gateway.run(messages, account_id=..., api_token=...)
    """

    def __init__(self, session: requests.Session | None = None) -> None:
        self._session: requests.Session | None = session

    @property
    def session(self) -> requests.Session:
        """Return (or lazily create) the requests.Session."""
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def run(
        self,
        messages: list[dict],
        *,
        account_id: str,
        api_token: str,
        model: str = DEFAULT_MODEL,
        timeout: int = _DEFAULT_TIMEOUT,
    ) -> GatewayResult:
        """Run one chat completion.

        Network errors (requests.RequestException) propagate to the caller.
        """
        prompt = build_llama3_prompt(messages)
        url = f"{API_BASE}/accounts/{account_id}/ai/run/{model}"
        logger.info("Workers AI: running model=%s prompt_chars=%d", model, len(prompt))

        t0 = time.perf_counter()
        resp = self.session.post(
            url,
            headers={
                "Authorization": f"Bearer {api_token}",
                "Content-Type": "application/json",
            },
            json={"prompt": prompt, "max_tokens": MAX_TOKENS, "temperature": TEMPERATURE},
            timeout=timeout,
        )
        duration_ms = int((time.perf_counter() - t0) * 1000)

        try:
            data = resp.json()
        except ValueError:
            data = {"raw": resp.text}

        logger.info("Workers AI: status=%d duration_ms=%d", resp.status_code, duration_ms)
        return GatewayResult(
            ok=resp.ok,
            status_code=resp.status_code,
            data=data,
            duration_ms=duration_ms,
        )


workers_ai_gateway = WorkersAIGateway()
