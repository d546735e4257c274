import json
from typing import Any

import httpx

from .base import ChatClient, ChatReply
from ..core.config import settings
from ..core.errors import UpstreamTransportError
from ..core.utils import sanitize, smart_parse

# Webhook spells a few preference fields differently
PREF_ALIASES = {"community": "locations", "ptype": "propertyType", "bedrooms": "bedroom"}

def extract_answer(payload: Any) -> str:
    """
    First non-blank string among the fields webhooks tend to answer in,
    falling back to the JSON text of the whole payload.
    """
    j = smart_parse(payload)
    output = j.get("output") if isinstance(j, dict) else None
    nested = output if isinstance(output, dict) else {}
    top = j if isinstance(j, dict) else {}
    for candidate in (
        top.get("answer"), nested.get("answer"), nested.get("state"),
        output, top.get("content"), top.get("message"), top.get("result"),
    ):
        if candidate is None:
            continue
        # First present field decides, blank or not
        if isinstance(candidate, str) and candidate.strip():
            return candidate.strip()
        break
    return json.dumps(j if j is not None else payload)

def webhook_params(question: str, session_id: str, prefs: dict) -> dict[str, str]:
    clean = sanitize(prefs)
    for src, dst in PREF_ALIASES.items():
        if clean.get(src):
            clean[dst] = clean[src]
    params = {"question": question, "sessionId": session_id, "prefs_json": json.dumps(clean)}
    params.update(clean)
    return params

class MockChat(ChatClient):
    """Offline stand-in that echoes the question and what it knows."""
    async def ask(self, question: str, session_id: str, prefs: dict) -> ChatReply:
        clean = sanitize(prefs)
        known = ", ".join(f"{k}={v}" for k, v in clean.items()) or "no preferences"
        answer = f"(offline) You asked: {question!r}. Known: {known}."
        return ChatReply(ok=True, answer=answer, raw=json.dumps({"answer": answer}))

class HttpChat(ChatClient):
    """
    Conversational webhook reached with a GET and query parameters.
    """
    def __init__(self, url: str, timeout: float = 30):
        self.url = url
        self.timeout = timeout

    async def ask(self, question: str, session_id: str, prefs: dict) -> ChatReply:
        params = webhook_params(question, session_id, prefs)
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                r = await client.get(self.url, params=params)
        except httpx.TransportError as exc:
            raise UpstreamTransportError(self.url, str(exc) or exc.__class__.__name__) from exc
        answer = extract_answer(r.text)
        if r.status_code >= 400:
            return ChatReply(ok=False, answer=answer, raw=r.text, error=f"webhook HTTP {r.status_code}")
        return ChatReply(ok=True, answer=answer, raw=r.text)

def chat_client() -> ChatClient:
    if settings.CHAT_PROVIDER == "http" and settings.CHAT_WEBHOOK_URL:
        return HttpChat(settings.CHAT_WEBHOOK_URL)
    return MockChat()
