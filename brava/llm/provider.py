# brava/llm/provider.py
"""
Gemini REST client used by the AI flows.

call_llm_text raises ProviderError when the model can't be reached;
safe_call_llm turns that into an ``(None, True)`` pair for callers that keep
a rule-based answer ready.
"""
import os
import json
import time
import random
import logging

import requests
import certifi

from brava import config

logger = logging.getLogger(__name__)

GENERATE_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

# 429 and the gateway-type 5xx are worth another try; anything else is final
RETRY_STATUS = {429, 500, 502, 503, 504}


class ProviderError(RuntimeError):
    pass


def _resolved_model(explicit_model: str | None) -> str:
    """Per-call model, then LLM_MODEL from the environment, then the configured default."""
    return (explicit_model or os.getenv("LLM_MODEL") or config.LLM_MODEL).strip()


def _make_body(system_prompt: str, user_prompt: str, json_mode: bool = False) -> dict:
    body = {
        "systemInstruction": {"parts": [{"text": str(system_prompt or "")}]},
        "contents": [{"role": "user", "parts": [{"text": str(user_prompt or "")}]}],
    }
    if json_mode:
        body["generationConfig"] = {"responseMimeType": "application/json"}
    return body


def _backoff(attempt: int, base: float) -> float:
    return base * (2 ** attempt) * (0.8 + 0.4 * random.random())


def _first_text(data: dict) -> str:
    candidates = data.get("candidates") or []
    if not candidates:
        raise ProviderError(f"Gemini returned no candidates: {data}")
    for part in (candidates[0].get("content") or {}).get("parts") or []:
        if isinstance(part, dict) and "text" in part:
            return part["text"]
    # a candidate without text (e.g. blocked); the flow's JSON check will reject it
    return json.dumps(data)


def call_llm_text(system_prompt: str, user_prompt: str, model: str | None = None, json_mode: bool = False) -> str:
    """
    One generateContent call, retried with jittered exponential backoff.

    ``json_mode`` asks Gemini for an application/json body; the caller still
    validates what comes back.
    """
    api_key = os.getenv("GEMINI_API_KEY") or config.GEMINI_API_KEY
    if not api_key:
        raise ProviderError("Missing GEMINI_API_KEY")

    model_name = _resolved_model(model)
    payload = json.dumps(_make_body(system_prompt, user_prompt, json_mode), ensure_ascii=False)
    attempts = int(os.getenv("LLM_RETRIES", str(config.LLM_RETRIES)))
    base = float(os.getenv("LLM_BACKOFF_BASE", str(config.LLM_BACKOFF_BASE)))

    last_status = None
    last_body = None
    for attempt in range(attempts):
        final = attempt == attempts - 1
        try:
            resp = requests.post(
                GENERATE_URL.format(model=model_name),
                headers={"Content-Type": "application/json"},
                params={"key": api_key},
                data=payload,
                timeout=config.LLM_TIMEOUT,
                verify=certifi.where(),
            )
            last_status = resp.status_code
            if resp.status_code in RETRY_STATUS and not final:
                last_body = resp.text
                logger.warning("Gemini HTTP %s for %s, retry %d/%d", resp.status_code, model_name, attempt + 1, attempts)
                time.sleep(_backoff(attempt, base))
                continue

            resp.raise_for_status()
            return _first_text(resp.json())

        except requests.exceptions.RequestException as e:
            last_body = getattr(getattr(e, "response", None), "text", last_body)
            if not final:
                logger.warning("Gemini request failed (%s), retry %d/%d", e, attempt + 1, attempts)
                time.sleep(_backoff(attempt, base))
                continue
            detail = f"HTTP {last_status}: {e}" if last_status is not None else str(e)
            if last_body:
                detail += f" | body: {last_body}"
            raise ProviderError(f"LLM call failed: {detail}")

    raise ProviderError(f"LLM call failed after {attempts} attempts (last status={last_status})")


def safe_call_llm(system_prompt: str, user_prompt: str, model: str | None = None, json_mode: bool = False):
    """Returns ``(text, False)``, or ``(None, True)`` after logging the provider error."""
    try:
        return call_llm_text(system_prompt, user_prompt, model=model, json_mode=json_mode), False
    except ProviderError as e:
        logger.error("Gemini unavailable: %s", e)
        return None, True
