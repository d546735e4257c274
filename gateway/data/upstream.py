import json
import logging
from typing import Any

import httpx

from .base import UpstreamResponse
from ..core.config import settings
from ..core.errors import UpstreamTransportError

log = logging.getLogger(__name__)

def decode_body(text: str) -> tuple[Any, bool]:
    """
    Empty body reads as {}; anything that isn't JSON is kept as {"raw": text}
    and flagged unparsed.
    """
    try:
        return json.loads(text or "{}"), True
    except ValueError:
        return {"raw": text}, False

async def post_json(
    url: str,
    body: Any,
    client: httpx.AsyncClient | None = None,
    timeout: float | None = None,
) -> UpstreamResponse:
    """
    POST a JSON body and decode whatever comes back.
    Non-2xx answers are returned, not raised; only transport failures raise.
    """
    timeout = settings.UPSTREAM_TIMEOUT_SECONDS if timeout is None else timeout
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=timeout) as own:
                r = await own.post(url, json=body if body is not None else {})
        else:
            r = await client.post(url, json=body if body is not None else {}, timeout=timeout)
    except httpx.TransportError as exc:
        raise UpstreamTransportError(url, str(exc) or exc.__class__.__name__) from exc

    payload, parsed = decode_body(r.text)
    if not parsed:
        log.warning("non-JSON body from %s (HTTP %s)", url, r.status_code)
    return UpstreamResponse(status=r.status_code, json=payload, parsed=parsed)
