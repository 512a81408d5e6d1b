"""Centralized OpenAI client for the Scenario Agent.

The agent MUST use `call_openai_chat_async()` from this module.
This ensures:
  - Key, model, temperature, timeout, and token limits are read from env.
  - JSON response format is requested via response_format.
  - 1 retry on transport failure (non-200, timeout, empty body), then None.
  - Consistent logging across callers.

Parsing the returned text is the caller's job (see `sanitize_json`), so a
malformed answer can be told apart from an unreachable service.
"""

from __future__ import annotations

import json
import os
import re
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

# ---------------------------------------------------------------------------
# Constants — all read from environment with safe defaults
# ---------------------------------------------------------------------------
_OPENAI_API_URL = "https://api.openai.com/v1/chat/completions"

_EXPERT_MODEL = "gpt-4.1"
_STANDARD_MODEL = "gpt-4.1-mini"


def _env_float(key: str, default: float) -> float:
    try:
        return float(os.getenv(key, str(default)))
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    try:
        return int(os.getenv(key, str(default)))
    except ValueError:
        return default


def is_openai_available() -> bool:
    """True when an OPENAI_API_KEY is configured."""
    return bool(os.getenv("OPENAI_API_KEY", "").strip())


def get_openai_key() -> str:
    """Read OPENAI_API_KEY from the environment. Raises EnvironmentError if missing."""
    key = os.getenv("OPENAI_API_KEY", "").strip()
    if not key:
        print("⚠️  [OPENAI] API key missing (OPENAI_API_KEY)")
        raise EnvironmentError("OPENAI_API_KEY environment variable not set")
    return key


def get_openai_model(automation_maturity: str) -> str:
    """OPENAI_MODEL if set, else gpt-4.1 for experts and gpt-4.1-mini otherwise."""
    override = os.getenv("OPENAI_MODEL", "").strip()
    if override:
        return override
    return _EXPERT_MODEL if automation_maturity == "expert" else _STANDARD_MODEL


def _get_temperature() -> float:
    return _env_float("OPENAI_TEMPERATURE", 0.7)


def _get_timeout() -> float:
    return _env_float("OPENAI_REQUEST_TIMEOUT", 40.0)


def _get_default_max_tokens() -> int:
    return _env_int("OPENAI_MAX_COMPLETION_TOKENS", 4000)


# ---------------------------------------------------------------------------
# JSON sanitizer — extracts valid JSON from LLM output
# ---------------------------------------------------------------------------
def sanitize_json(raw: str) -> str:
    """Extract a JSON object from raw LLM output.

    Handles:
      - Markdown fences (```json ... ```)
      - Leading/trailing whitespace and BOM
      - Prose before/after JSON
      - Trailing commas before } or ]

    Raises ValueError if no JSON object is found.
    """
    text = raw.strip().lstrip("\ufeff")

    # 1. Strip markdown fences
    if text.startswith("```"):
        parts = text.split("```")
        if len(parts) >= 3:
            text = parts[1]
        else:
            text = text[3:]

    # 2. Strip language identifier (e.g., "json\n")
    text = text.strip()
    if text.lower().startswith("json"):
        text = text[4:].strip()

    # 3. Find first '{' — everything before it is prose
    brace_idx = text.find("{")
    if brace_idx == -1:
        raise ValueError("LLM did not return a JSON object — no '{' found")
    text = text[brace_idx:]

    # 4. Find matching closing '}' from the end
    rbrace_idx = text.rfind("}")
    if rbrace_idx == -1:
        raise ValueError("LLM did not return a JSON object — no '}' found")
    text = text[: rbrace_idx + 1]

    # 5. Remove trailing commas before } or ], only if the text does not parse as-is
    try:
        json.loads(text)
    except ValueError:
        text = re.sub(r",\s*([}\]])", r"\1", text)

    return text


def build_payload(
    *,
    model: str,
    messages: List[Dict[str, str]],
    max_completion_tokens: int,
    temperature: float,
) -> Dict[str, Any]:
    """Build an OpenAI chat completions payload.

    Uses:
      - model, messages, max_tokens, temperature
      - response_format: json_object
    """
    payload: Dict[str, Any] = {
        "model": model,
        "messages": messages,
        "max_tokens": max_completion_tokens,
        "temperature": temperature,
        "response_format": {"type": "json_object"},
    }

    print(f"🧠 [OPENAI] Model: {model}")
    print(f"🧠 [OPENAI] Tokens requested: {max_completion_tokens}")

    return payload


@dataclass(frozen=True)
class ChatCompletion:
    """Raw completion text plus the model that actually answered."""

    content: str
    model: str


# ---------------------------------------------------------------------------
# Async call — non-blocking I/O
# ---------------------------------------------------------------------------
async def call_openai_chat_async(
    *,
    messages: List[Dict[str, str]],
    model: str,
    max_completion_tokens: int = 0,
    api_key: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Optional[ChatCompletion]:
    """Call OpenAI chat completions and return the raw answer, or None when unreachable.

    Parameters
    ----------
    messages : list[dict]
        The messages array (system + user).
    model : str
        Model name to request.
    max_completion_tokens : int
        Token limit for the response. 0 = use env default.
    api_key : str, optional
        Override API key (default: from env).
    transport : httpx.AsyncBaseTransport, optional
        Custom transport (tests use ``httpx.MockTransport``).

    Returns
    -------
    ChatCompletion or None
        Non-empty completion text, or None if all attempts failed.
    """
    if api_key is None:
        api_key = get_openai_key()
    if max_completion_tokens <= 0:
        max_completion_tokens = _get_default_max_tokens()

    temperature = _get_temperature()
    timeout = _get_timeout()
    max_retries = 1  # 1 retry only (2 attempts total)

    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }

    payload = build_payload(
        model=model,
        messages=messages,
        max_completion_tokens=max_completion_tokens,
        temperature=temperature,
    )

    for attempt in range(max_retries + 1):
        t0 = time.time()
        try:
            print(f"🧠 [OPENAI] Calling {model} (attempt {attempt + 1}/{max_retries + 1})")
            async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
                response = await client.post(
                    _OPENAI_API_URL,
                    headers=headers,
                    json=payload,
                )
            duration = time.time() - t0
            print(f"📦 [OPENAI] HTTP {response.status_code} ({duration:.1f}s)")

            if response.status_code != 200:
                error_body = response.text[:400]
                print(f"⚠️  [OPENAI] Error response: {error_body}")
                if attempt < max_retries:
                    print("🔄 [OPENAI] Retrying...")
                    continue
                return None

            data = response.json()

            usage = data.get("usage")
            if usage:
                print(f"🧠 [OPENAI] Tokens used: prompt={usage.get('prompt_tokens', '?')}, completion={usage.get('completion_tokens', '?')}, total={usage.get('total_tokens', '?')}")

            raw_content = (data["choices"][0]["message"]["content"] or "").strip()
            print(f"🧠 [OPENAI] Raw output length: {len(raw_content)} chars")

            if not raw_content:
                print(f"⚠️  [OPENAI] Empty response (attempt {attempt + 1})")
                if attempt < max_retries:
                    continue
                return None

            print("🧠 [OPENAI] Success")
            return ChatCompletion(content=raw_content, model=data.get("model") or model)

        except httpx.TimeoutException:
            duration = time.time() - t0
            print(f"❌ [OPENAI] Timeout — aborting ({duration:.1f}s)")
            if attempt < max_retries:
                continue
            return None

        except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError) as exc:
            print(f"❌ [OPENAI] Unexpected error: {exc}")
            return None

    return None
