from typing import Any, Dict

from fastapi import APIRouter

from petrosys.core.config import settings
from petrosys.utils.response_formatter import success_response

router = APIRouter(tags=["core"])

@router.get("/health")
def health_check():
    return {"status": "ok"}

@router.get("/settings")
def get_public_settings() -> Dict[str, Any]:
    """
    Non-secret runtime settings: reasoning model, chance policy and pipeline workers
    """
    return success_response({
        "reasoning_model": settings.REASONING_MODEL,
        "chance_combination": settings.CHANCE_COMBINATION,
        "chance_geological_weight": settings.CHANCE_GEOLOGICAL_WEIGHT,
        "chance_commercial_weight": settings.CHANCE_COMMERCIAL_WEIGHT,
        "chance_missing_risk": settings.CHANCE_MISSING_RISK,
        "pipeline_max_workers": settings.PIPELINE_MAX_WORKERS,
    })
