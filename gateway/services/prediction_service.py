import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import httpx

from ..core.config import settings
from ..core.metrics import PREDICT_ATTEMPTS, PREDICT_RULE
from ..data.base import UpstreamResponse
from ..data.upstream import post_json
from ..prediction.extractor import extract_number
from ..prediction.resolver import RuleTag, resolve

log = logging.getLogger(__name__)

@dataclass(frozen=True)
class Attempt:
    path: str
    shape: str
    wrap: Callable[[Dict[str, Any]], Any]

# Body wrappings the model has been seen to accept
SHAPES = [
    ("plain", lambda body: body),
    ("data", lambda body: {"data": body}),
    ("data_list", lambda body: {"data": [body]}),
]
PATHS = ["/predict", "/"]

# Path-major: every shape against /predict before trying the root
ATTEMPTS = [Attempt(path, name, wrap) for path in PATHS for name, wrap in SHAPES]
FINAL_ATTEMPT = ATTEMPTS[0]

@dataclass
class ProxyResult:
    status: int
    raw_response: Any
    predicted_price_raw: Optional[float] = None
    predicted_price: Optional[float] = None
    used_rule: Optional[RuleTag] = None

class PredictionService:
    """
    Finds a request shape the model endpoint answers, pulls a number out of
    its reply and converts it into a plausible absolute price.

    Attempts run one at a time and stop at the first reply carrying a number.
    A transport failure on any attempt aborts the whole dispatch.
    """
    def __init__(self, base_url: str | None = None, client: httpx.AsyncClient | None = None):
        self.base_url = (base_url or settings.MODEL_BASE).rstrip("/")
        self.client = client

    async def _call(self, attempt: Attempt, body: Dict[str, Any]) -> tuple[UpstreamResponse, float | None]:
        resp = await post_json(f"{self.base_url}{attempt.path}", attempt.wrap(body), client=self.client)
        # A body we could not decode carries no usable number
        raw_number = extract_number(resp.json) if resp.parsed else None
        outcome = "hit" if raw_number is not None else "miss"
        PREDICT_ATTEMPTS.labels(path=attempt.path, shape=attempt.shape, outcome=outcome).inc()
        log.info("predict attempt path=%s shape=%s status=%s outcome=%s",
                 attempt.path, attempt.shape, resp.status, outcome)
        return resp, raw_number

    def _finalize(self, resp: UpstreamResponse, raw_number: float | None, body: Dict[str, Any]) -> ProxyResult:
        if raw_number is None:
            return ProxyResult(status=resp.status, raw_response=resp.json)
        chosen = resolve(raw_number, body)
        PREDICT_RULE.labels(rule=chosen.rule).inc()
        log.info("predicted raw=%s price=%s rule=%s", raw_number, chosen.value, chosen.rule)
        return ProxyResult(
            status=resp.status,
            raw_response=resp.json,
            predicted_price_raw=raw_number,
            predicted_price=chosen.value,
            used_rule=chosen.rule,
        )

    async def dispatch(self, body: Dict[str, Any]) -> ProxyResult:
        body = body or {}
        resp = None
        for attempt in ATTEMPTS:
            resp, raw_number = await self._call(attempt, body)
            if raw_number is not None:
                return self._finalize(resp, raw_number, body)

        if not settings.PREDICT_FINAL_ATTEMPT:
            return self._finalize(resp, None, body)

        # Same request as the first attempt; kept for parity with existing callers
        resp, raw_number = await self._call(FINAL_ATTEMPT, body)
        return self._finalize(resp, raw_number, body)
