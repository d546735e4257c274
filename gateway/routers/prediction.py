from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from ..core.config import settings
from ..data.upstream import post_json
from ..schemas import PredictResponse
from ..services.prediction_service import PredictionService

router = APIRouter()

# Statuses that must not carry a body; the JSON envelope goes out as 200 instead
_BODYLESS = {204, 205, 304}

def _mirror(status: int) -> int:
    return 200 if status < 200 or status in _BODYLESS else status

def service_dep() -> PredictionService:
    return PredictionService()

@router.post("/predict", response_model=PredictResponse, response_model_by_alias=True)
async def predict(
    body: Dict[str, Any] | None = Body(default=None),
    svc: PredictionService = Depends(service_dep),
):
    result = await svc.dispatch(body or {})
    payload = PredictResponse(
        predicted_price=result.predicted_price,
        predicted_price_raw=result.predicted_price_raw,
        used_rule=result.used_rule,
        raw_response=result.raw_response,
    )
    return JSONResponse(status_code=_mirror(result.status), content=payload.model_dump(by_alias=True))

@router.post("/recommend")
async def recommend(payload: Any = Body(default=None)):
    resp = await post_json(settings.RECOMMENDER_URL, payload or {})
    return JSONResponse(status_code=_mirror(resp.status), content=resp.json)
