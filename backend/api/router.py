from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Request, status
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import get_prediction_orchestrator
from config import settings
from models.requests import OutcomeReport, PredictionRequest
from models.responses import CalibrationStats, SuccessPrediction
from models.schemas.prediction import Dimension
from services.prediction.errors import PredictionValidationError
from services.prediction.orchestrator import PredictionOrchestrator

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


@router.get("/health")
async def health(orchestrator: PredictionOrchestrator = Depends(get_prediction_orchestrator)):
    return {
        "status": "ok",
        "model_endpoint_configured": bool(settings.ml_api_endpoint),
        "market_data_configured": bool(settings.market_data_endpoint or settings.gemini_api_key),
        "cache": orchestrator.cache_stats(),
    }


@router.post("/predict", response_model=SuccessPrediction)
@limiter.limit(settings.rate_limit)
async def predict(
    request: Request,
    body: PredictionRequest,
    orchestrator: PredictionOrchestrator = Depends(get_prediction_orchestrator),
):
    try:
        return await orchestrator.predict_success(body)
    except PredictionValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))


@router.post("/outcomes/{fingerprint}", status_code=status.HTTP_202_ACCEPTED)
async def record_outcome(
    fingerprint: str,
    body: OutcomeReport,
    orchestrator: PredictionOrchestrator = Depends(get_prediction_orchestrator),
):
    stored = await orchestrator.record_outcome(fingerprint, body)
    return {"recorded": len(stored)}


@router.delete("/predictions/{fingerprint}")
async def invalidate(
    fingerprint: str,
    orchestrator: PredictionOrchestrator = Depends(get_prediction_orchestrator),
):
    return {"invalidated": orchestrator.invalidate(fingerprint)}


@router.get("/calibration/{dimension}", response_model=CalibrationStats)
async def calibration(
    dimension: Dimension,
    start: datetime | None = None,
    end: datetime | None = None,
    orchestrator: PredictionOrchestrator = Depends(get_prediction_orchestrator),
):
    if start and end and start >= end:
        raise HTTPException(status_code=400, detail="start must be before end")
    return orchestrator.get_calibration_data(dimension, start, end)
