import json

from ..core.cache import Cache, cache

class PrefsStore:
    """
    Per-session preferences kept as JSON strings in the shared cache.
    Merges are shallow and right-biased: the newest value per key wins.
    """
    def __init__(self, backend: Cache = cache, prefix: str = "prefs"):
        self.backend = backend
        self.prefix = prefix

    def _key(self, session_id: str) -> str:
        return f"{self.prefix}:{session_id}"

    def get(self, session_id: str) -> dict:
        stored = self.backend.get(self._key(session_id))
        return json.loads(stored) if stored else {}

    def put(self, session_id: str, prefs: dict) -> None:
        self.backend.set(self._key(session_id), json.dumps(prefs))

    def merge(self, session_id: str, incoming: dict) -> dict:
        merged = {**self.get(session_id), **(incoming or {})}
        self.put(session_id, merged)
        return merged

prefs_store = PrefsStore()
