import json
from typing import Any

def fnv1a_32(s: str) -> int:
    """Deterministic, fast hash for seed generation."""
    h = 0x811c9dc5
    for c in s.encode("utf-8"):
        h ^= c
        h = (h * 0x01000193) & 0xFFFFFFFF
    return h

def seeded_rand(seed: int, n: int = 1) -> list[float]:
    """
    Stateless pseudo-random generator (Mulberry32-like) so
    same seed → same outputs without storing PRNG state.
    """
    out = []
    t = (seed + 0x6D2B79F5) & 0xFFFFFFFF
    for _ in range(n):
        t = (t ^ (t >> 15)) * (t | 1) & 0xFFFFFFFF
        t ^= t + ((t ^ (t >> 7)) * (t | 61) & 0xFFFFFFFF)
        r = ((t ^ (t >> 14)) & 0xFFFFFFFF) / 4294967296.0
        out.append(r)
    return out

def sanitize(values: dict | None) -> dict[str, str]:
    """
    Stringify and trim every value, dropping the ones that end up empty.
    None counts as empty.
    """
    out = {}
    for k, v in (values or {}).items():
        s = ("" if v is None else str(v)).strip()
        if s:
            out[k] = s
    return out

def smart_parse(payload: Any) -> Any:
    """
    Lenient JSON decode for webhook bodies:
    - dicts/lists pass through
    - double-encoded JSON strings are unwrapped once more
    - anything that isn't JSON becomes {"output": text}
    """
    if isinstance(payload, (dict, list)):
        return payload
    txt = ("" if payload is None else str(payload)).strip()
    if not txt:
        return None
    try:
        once = json.loads(txt)
    except ValueError:
        return {"output": txt}
    if isinstance(once, str):
        try:
            return json.loads(once)
        except ValueError:
            return {"output": once}
    return once
