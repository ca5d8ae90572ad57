# fleet_monitor/api/v1/predictions.py
import logging

from fastapi import APIRouter, Depends

from fleet_monitor.api.v1.deps import get_rng
from fleet_monitor.api.v1.schemas import ErrorResponse, SensorInput
from fleet_monitor.services.risk_engine import ScoreResult, score_inputs

router = APIRouter(tags=["predictions"])
logger = logging.getLogger("predictions")


# ============================================================
# POST /predict
# ============================================================
@router.post("/predict", response_model=ScoreResult, responses={400: {"model": ErrorResponse}})
def predict(payload: SensorInput, rng=Depends(get_rng)):
    """On-demand risk score for a sensor tuple. Nothing is persisted."""
    result = score_inputs(
        payload.temperature,
        payload.vibration,
        payload.usage_hours,
        power_consumption=payload.power_consumption,
        noise_level=payload.noise_level,
        rng=rng,
    )
    logger.debug("predict: %s -> %.1f (%s)", payload.model_dump(), result.failure_probability, result.risk_level.value)
    return result
