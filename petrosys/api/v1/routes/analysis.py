import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from petrosys.api.v1.dependencies.reasoning import get_chance_policy, get_reasoning_client
from petrosys.schemas.inputs import (
    ChanceCalculationInput,
    ChargeHistoryInput,
    RecoveryPredictionInput,
    ReserveEstimationInput,
    RiskAssessmentInput,
    SystemIntegrationInput,
)
from petrosys.services.analysis import (
    ChanceCalculationAnalyzer,
    ChancePolicy,
    ChargeHistoryAnalyzer,
    RecoveryPredictionAnalyzer,
    ReserveEstimationAnalyzer,
    RiskAssessmentAnalyzer,
    SystemIntegrationAnalyzer,
)
from petrosys.services.reasoning import ReasoningClient
from petrosys.utils.error_handling import handle_api_error
from petrosys.utils.response_formatter import analysis_response

# Configure logging
logger = logging.getLogger(__name__)

# Create router
router = APIRouter(tags=["analysis"])


@router.post("/petroleum-system")
async def analyze_petroleum_system(
    data: SystemIntegrationInput,
    client: ReasoningClient = Depends(get_reasoning_client),
) -> Dict[str, Any]:
    """
    Integrate geological, geochemical and geophysical data into a petroleum system.

    Args:
        data: Raw data for the five petroleum system elements

    Returns:
        Success envelope with the PetroleumSystem record
    """
    try:
        result = await run_in_threadpool(SystemIntegrationAnalyzer(client).analyze, data)
        return analysis_response(result)
    except Exception as e:
        logger.error(f"Error in petroleum system analysis: {str(e)}")
        raise handle_api_error(e)


@router.post("/charge-history")
async def analyze_charge_history(
    data: ChargeHistoryInput,
    client: ReasoningClient = Depends(get_reasoning_client),
) -> Dict[str, Any]:
    """
    Reconstruct generation, migration and accumulation timing for a petroleum system.
    """
    try:
        result = await run_in_threadpool(ChargeHistoryAnalyzer(client).analyze, data)
        return analysis_response(result)
    except Exception as e:
        logger.error(f"Error in charge history analysis: {str(e)}")
        raise handle_api_error(e)


@router.post("/reserves")
async def estimate_reserves(
    data: ReserveEstimationInput,
    client: ReasoningClient = Depends(get_reasoning_client),
) -> Dict[str, Any]:
    """
    Estimate hydrocarbons in place and recoverable volumes as low/best/high ranges.
    """
    try:
        result = await run_in_threadpool(ReserveEstimationAnalyzer(client).analyze, data)
        return analysis_response(result)
    except Exception as e:
        logger.error(f"Error in reserve estimation: {str(e)}")
        raise handle_api_error(e)


@router.post("/recovery-factor")
async def predict_recovery_factor(
    data: RecoveryPredictionInput,
    client: ReasoningClient = Depends(get_reasoning_client),
) -> Dict[str, Any]:
    """
    Predict primary, secondary and tertiary recovery factors.
    """
    try:
        logger.info(f"Received recovery prediction request using method {data.recovery_method.value}")
        result = await run_in_threadpool(RecoveryPredictionAnalyzer(client).analyze, data)
        return analysis_response(result)
    except Exception as e:
        logger.error(f"Error in recovery prediction: {str(e)}")
        raise handle_api_error(e)


@router.post("/risk")
async def assess_risk(
    data: RiskAssessmentInput,
    client: ReasoningClient = Depends(get_reasoning_client),
    policy: ChancePolicy = Depends(get_chance_policy),
) -> Dict[str, Any]:
    """
    Score geological, economic and technical risks and derive the overall chance.

    The overall chance is computed from the risk scores with the configured
    chance policy; it is never taken from the narrative.
    """
    try:
        result = await run_in_threadpool(RiskAssessmentAnalyzer(client, policy).analyze, data)
        return analysis_response(result, f"Overall chance derived with the {policy.combination} policy")
    except Exception as e:
        logger.error(f"Error in risk assessment: {str(e)}")
        raise handle_api_error(e)


@router.post("/chance-factors")
async def calculate_chance_factors(
    data: ChanceCalculationInput,
    client: ReasoningClient = Depends(get_reasoning_client),
) -> Dict[str, Any]:
    """
    Calculate geological, commercial and conditional chances of success.
    """
    try:
        result = await run_in_threadpool(ChanceCalculationAnalyzer(client).analyze, data)
        return analysis_response(result)
    except Exception as e:
        logger.error(f"Error in chance calculation: {str(e)}")
        raise handle_api_error(e)
