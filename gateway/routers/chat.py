import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..schemas import ChatResponse
from ..services.chat_service import ChatService

router = APIRouter()
log = logging.getLogger(__name__)

def service_dep() -> ChatService:
    return ChatService()

@router.get("/chat", response_model=ChatResponse)
async def chat(request: Request, svc: ChatService = Depends(service_dep)):
    try:
        return await svc.handle(dict(request.query_params))
    except Exception:
        log.exception("chat relay failed")
        return JSONResponse(status_code=500, content={"ok": False, "error": "Chat failed"})
