# services/llm_client.py
import os
import logging
from typing import Dict, List, Optional

from openai import OpenAI, APIError, RateLimitError, APITimeoutError

# ENV:
# OPENAI_API_KEY=<...>          (unset -> narrative report falls back to templates)
# OPENAI_BASE_URL (optional proxy/gateway)
# OPENAI_MODEL=gpt-4o-mini

logger = logging.getLogger(__name__)

_DEFAULT_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
_BASE_URL = os.getenv("OPENAI_BASE_URL", None)

_client: Optional[OpenAI] = None


def llm_available() -> bool:
    return bool(os.getenv("OPENAI_API_KEY"))


def _get_client() -> OpenAI:
    global _client
    if _client is None:
        if _BASE_URL:
            _client = OpenAI(base_url=_BASE_URL, api_key=os.getenv("OPENAI_API_KEY"))
        else:
            _client = OpenAI(api_key=os.getenv("OPENAI_API_KEY"))
    return _client


def call_llm_text(messages: List[Dict[str, str]], model: Optional[str] = None, timeout: int = 30) -> Optional[str]:
    """
    Plain-text completion. Returns None on API errors so callers can fall back.
    """
    client = _get_client()
    try:
        resp = client.chat.completions.create(
            model=model or _DEFAULT_MODEL,
            messages=messages,
            temperature=0.2,
            timeout=timeout,
        )
        return (resp.choices[0].message.content or "").strip() or None
    except (APIError, RateLimitError, APITimeoutError) as e:
        logger.warning("LLM call failed: %s", e)
        return None
