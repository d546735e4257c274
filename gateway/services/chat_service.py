import json
import logging
import re

from ..core.utils import sanitize
from ..data.chat_client import chat_client
from .prefs_store import PrefsStore, prefs_store

log = logging.getLogger(__name__)

SAVE_PREFS = "__prefs__"
GET_PREFS = "__get_prefs__"
DEFAULT_SESSION = "default-session"

_PREFS_PARAM_RE = re.compile(r"^prefs\[(.+)\]$")
_NO_PREFS_RE = re.compile(r"no preferences", re.IGNORECASE)

# (pref key, label) in the order they are read back to the user
SUMMARY_FIELDS = [
    ("community", "community"),
    ("ptype", "property type"),
    ("bedrooms", "bedrooms"),
    ("musthave", "must-have"),
    ("lifestyle", "lifestyle"),
    ("personality", "personality"),
    ("style", "style"),
    ("commute", "commute"),
    ("budget", "budget mindset"),
]

def summarize_prefs(prefs: dict) -> str:
    if not prefs:
        return "You currently have no saved preferences."
    bits = [f"{label}: {prefs[key]}" for key, label in SUMMARY_FIELDS if prefs.get(key)]
    return "Your saved preferences are — " + ", ".join(bits) + "."

def gather_prefs(query: dict) -> dict[str, str]:
    """
    Preferences come either as prefs[<key>]=value params or, when none of
    those are present, as a prefs_json blob.
    """
    prefs = {}
    for k, v in query.items():
        m = _PREFS_PARAM_RE.match(k)
        if m:
            prefs[m.group(1)] = v
    if not prefs and query.get("prefs_json"):
        try:
            parsed = json.loads(query["prefs_json"])
        except ValueError:
            parsed = None
        if isinstance(parsed, dict):
            prefs.update(parsed)
    return sanitize(prefs)

def session_from(query: dict) -> str:
    return query.get("sessionId") or query.get("sessionID") or query.get("sessioniD") or DEFAULT_SESSION

class ChatService:
    """
    Keeps per-session preferences and relays questions to the chat webhook.
    Preference commands are answered locally without a webhook round trip.
    """
    def __init__(self, store: PrefsStore = prefs_store, client=None):
        self.store = store
        self.client = client or chat_client()

    async def handle(self, query: dict) -> dict:
        question = (query.get("question") or "").strip()
        session_id = session_from(query)

        incoming = gather_prefs(query)
        if incoming or question == SAVE_PREFS:
            merged = self.store.merge(session_id, incoming)
        else:
            merged = self.store.get(session_id)

        q_lower = question.lower()
        if q_lower == SAVE_PREFS:
            return {"ok": True, "answer": "✅ Preferences saved.", "raw": json.dumps(merged)}
        if "what are my preferences" in q_lower or q_lower == GET_PREFS:
            return {"ok": True, "answer": summarize_prefs(merged), "raw": json.dumps(merged)}

        reply = await self.client.ask(question, session_id, merged)
        if not reply.ok:
            log.warning("chat webhook failed for session %s: %s", session_id, reply.error)
        if merged and (not reply.ok or _NO_PREFS_RE.search(reply.answer or "")):
            return {"ok": True, "answer": summarize_prefs(merged), "raw": reply.raw}
        return {"ok": True, "answer": reply.answer, "raw": reply.raw}
