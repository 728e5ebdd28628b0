import os
from typing import Any, Dict, List

import requests
from openai import OpenAI

ADVISOR_BASE_URL = os.getenv("ADVISOR_BASE_URL", "https://api.openai.com/v1")
ADVISOR_MODEL = os.getenv("ADVISOR_MODEL", "gpt-4o-mini")
ADVISOR_QUESTION_MODEL = os.getenv("ADVISOR_QUESTION_MODEL", ADVISOR_MODEL)
ADVISOR_TIMEOUT = float(os.getenv("ADVISOR_TIMEOUT", "25"))
ADVISOR_HEALTH_TIMEOUT = float(os.getenv("ADVISOR_HEALTH_TIMEOUT", "1.0"))
ADVISOR_MAX_RETRIES = max(0, int(os.getenv("ADVISOR_MAX_RETRIES", "0")))
ADVISOR_API_KEY = os.getenv("ADVISOR_API_KEY") or os.getenv("OPENAI_API_KEY")
ADVISOR_DEFAULT_MAX_TOKENS = int(os.getenv("ADVISOR_DEFAULT_MAX_TOKENS", "1200"))


def _base_url() -> str:
    # accept a full .../chat/completions endpoint as well as the API root
    return ADVISOR_BASE_URL.split("?", 1)[0].rstrip("/").removesuffix("/chat/completions")


def _get_client() -> OpenAI:
    return OpenAI(base_url=_base_url(), api_key=ADVISOR_API_KEY, max_retries=ADVISOR_MAX_RETRIES)


def check_advisor_online(timeout: float | None = None) -> bool:
    base = _base_url()
    health_timeout = timeout if timeout is not None else ADVISOR_HEALTH_TIMEOUT
    headers = {"Authorization": f"Bearer {ADVISOR_API_KEY}"} if ADVISOR_API_KEY else {}
    for path in ("/models", "/health"):
        try:
            resp = requests.get(f"{base}{path}", timeout=health_timeout, headers=headers)
        except requests.RequestException:
            continue
        # Any non-5xx HTTP response means the endpoint is reachable.
        if resp.status_code < 500:
            return True
    return False


def query_advisor(
    prompt: str,
    model: str | None = None,
    max_tokens: int | None = None,
    temperature: float | None = None,
) -> Dict[str, Any]:
    if not ADVISOR_API_KEY:
        raise RuntimeError("Missing ADVISOR_API_KEY. Set the environment variable and restart the service.")
    client = _get_client()

    token_limit = int(max_tokens) if max_tokens is not None else ADVISOR_DEFAULT_MAX_TOKENS
    response = client.chat.completions.create(
        model=model or ADVISOR_MODEL,
        messages=[{"role": "user", "content": prompt}],
        temperature=0.2 if temperature is None else float(temperature),
        max_tokens=token_limit,
        timeout=ADVISOR_TIMEOUT,
    )
    return response.model_dump()


def extract_text(response: Dict[str, Any]) -> str:
    """Assistant text of the first choice, stripped; empty when there is none."""
    choices = response.get("choices") or []
    message = (choices[0].get("message") if choices else None) or {}
    content = message.get("content")
    return content.strip() if isinstance(content, str) else ""


def extract_sources(response: Dict[str, Any]) -> List[Dict[str, str]]:
    """Citation links as [{uri, title}], from message annotations or a top-level citations list."""
    sources: List[Dict[str, str]] = []
    seen = set()

    def add(uri: Any, title: Any = "") -> None:
        if not isinstance(uri, str) or not uri or uri in seen:
            return
        seen.add(uri)
        sources.append({"uri": uri, "title": str(title or "")})

    for choice in response.get("choices") or []:
        message = choice.get("message") if isinstance(choice, dict) else None
        if not isinstance(message, dict):
            continue
        for annotation in message.get("annotations") or []:
            if isinstance(annotation, dict) and annotation.get("type") == "url_citation":
                citation = annotation.get("url_citation") or {}
                add(citation.get("url"), citation.get("title"))

    for citation in response.get("citations") or []:
        if isinstance(citation, dict):
            add(citation.get("uri") or citation.get("url"), citation.get("title"))
        else:
            add(citation)
    return sources
