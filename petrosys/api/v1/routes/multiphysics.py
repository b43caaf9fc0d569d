import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from starlette.concurrency import run_in_threadpool

from petrosys.api.v1.dependencies.reasoning import get_reasoning_client
from petrosys.schemas.inputs import (
    BayesianUncertaintyInput,
    GeochemicalProxyInput,
    GeologicalAnalogyInput,
    GeomechanicalInput,
    GravityMagneticInput,
    SurfaceCorrelationInput,
    ThermalAnomalyInput,
)
from petrosys.services.multiphysics import (
    BayesianUncertaintyAnalyzer,
    GeologicalAnalogyAnalyzer,
    GravityMagneticInversionAnalyzer,
    SurfaceSubsurfaceAnalyzer,
)
from petrosys.services.reasoning import ReasoningClient
from petrosys.utils.error_handling import NotFoundError, ValidationError, handle_api_error
from petrosys.utils.response_formatter import analysis_response

# Configure logging
logger = logging.getLogger(__name__)

# Create router
router = APIRouter(tags=["multiphysics"])

# section -> (input model, SurfaceSubsurfaceAnalyzer method)
SURFACE_SECTIONS = {
    "geochemical-proxies": (GeochemicalProxyInput, "analyze_geochemical_proxies"),
    "geomechanical-expressions": (GeomechanicalInput, "analyze_geomechanical_expressions"),
    "thermal-anomalies": (ThermalAnomalyInput, "map_thermal_anomalies"),
}


@router.post("/gravity-magnetic")
async def invert_gravity_magnetic(
    data: GravityMagneticInput,
    client: ReasoningClient = Depends(get_reasoning_client),
) -> Dict[str, Any]:
    """
    Interpret gravity and magnetic data for basement depth, basin type and structures.
    """
    try:
        result = await run_in_threadpool(GravityMagneticInversionAnalyzer(client).analyze, data)
        return analysis_response(result)
    except Exception as e:
        logger.error(f"Error in gravity-magnetic inversion: {str(e)}")
        raise handle_api_error(e)


@router.post("/analogs")
async def find_analogs(
    data: GeologicalAnalogyInput,
    client: ReasoningClient = Depends(get_reasoning_client),
) -> Dict[str, Any]:
    """
    Rank analogue basins against a target basin.

    Returns:
        Success envelope with one GeologicalAnalogy per analogue named in the narrative
    """
    try:
        logger.info(f"Finding analogs for {data.target_basin.get('name')} among {len(data.candidate_basins)} candidate(s)")
        result = await run_in_threadpool(GeologicalAnalogyAnalyzer(client).analyze, data)
        return analysis_response(result, metadata={"count": len(result)} if isinstance(result, tuple) else None)
    except Exception as e:
        logger.error(f"Error in analogy search: {str(e)}")
        raise handle_api_error(e)


@router.post("/uncertainty")
async def quantify_uncertainty(
    data: BayesianUncertaintyInput,
    client: ReasoningClient = Depends(get_reasoning_client),
) -> Dict[str, Any]:
    """
    Quantify depth and property uncertainty and risk-weighted drilling decisions.
    """
    try:
        result = await run_in_threadpool(BayesianUncertaintyAnalyzer(client).analyze, data)
        return analysis_response(result)
    except Exception as e:
        logger.error(f"Error in uncertainty quantification: {str(e)}")
        raise handle_api_error(e)


@router.post("/surface-correlation")
async def correlate_surface_subsurface(
    data: SurfaceCorrelationInput,
    client: ReasoningClient = Depends(get_reasoning_client),
) -> Dict[str, Any]:
    """
    Run the geochemical, geomechanical and thermal sub-analyses and combine them.

    A failed sub-analysis leaves its section empty and flagged; the request
    fails only when all three fail.
    """
    try:
        result = await run_in_threadpool(SurfaceSubsurfaceAnalyzer(client).analyze, data)
        return analysis_response(result)
    except Exception as e:
        logger.error(f"Error in surface-subsurface correlation: {str(e)}")
        raise handle_api_error(e)


@router.post("/surface-correlation/{section}")
async def correlate_surface_section(
    section: str,
    payload: Dict[str, Any] = Body(default_factory=dict),
    client: ReasoningClient = Depends(get_reasoning_client),
) -> Dict[str, Any]:
    """
    Run one surface-subsurface sub-analysis.

    Args:
        section: geochemical-proxies, geomechanical-expressions or thermal-anomalies
        payload: Input for that section
    """
    try:
        if section not in SURFACE_SECTIONS:
            raise NotFoundError(
                f"Unknown surface correlation section: {section}",
                details={"available": sorted(SURFACE_SECTIONS)},
            )
        model, method = SURFACE_SECTIONS[section]
        try:
            data = model.model_validate(payload)
        except ValueError as e:
            raise ValidationError(f"Invalid input for {section}", details={"error": str(e)}) from e

        analyzer = SurfaceSubsurfaceAnalyzer(client)
        result = await run_in_threadpool(getattr(analyzer, method), data)
        return analysis_response(result)
    except Exception as e:
        logger.error(f"Error in surface correlation section {section}: {str(e)}")
        raise handle_api_error(e)
