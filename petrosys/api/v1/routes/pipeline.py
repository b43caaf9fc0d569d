import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from petrosys.api.v1.dependencies.reasoning import get_pipeline_service
from petrosys.schemas.inputs import PipelineInput
from petrosys.schemas.pipeline import BatchPipelineInput, PipelineStatus
from petrosys.services.pipeline import PipelineService
from petrosys.utils.error_handling import handle_api_error
from petrosys.utils.response_formatter import success_response

# Set up logging
logger = logging.getLogger(__name__)

# Create router
router = APIRouter(tags=["pipeline"])

@router.get("/stages")
async def get_stage_graph(service: PipelineService = Depends(get_pipeline_service)) -> Dict[str, Any]:
    """
    Get the pipeline stages in execution order with the stages each one requires
    """
    try:
        return success_response(service.get_stage_graph())
    except Exception as e:
        logger.error(f"Error getting pipeline stages: {str(e)}")
        raise handle_api_error(e)

@router.post("/run")
async def run_pipeline(
    input_data: PipelineInput,
    service: PipelineService = Depends(get_pipeline_service),
) -> Dict[str, Any]:
    """
    Run every analysis stage for one prospect.

    A blocked pipeline is still a successful request: the result carries the
    stage where it stopped and every record produced before and around it.
    """
    try:
        logger.info(f"Received pipeline run request for '{input_data.name or 'unnamed'}'")
        result = await run_in_threadpool(service.run, input_data)
        return success_response(result, metadata={"status": result.status.value})
    except Exception as e:
        logger.error(f"Error in pipeline run: {str(e)}")
        raise handle_api_error(e)

@router.post("/batch")
async def run_pipeline_batch(
    input_data: BatchPipelineInput,
    service: PipelineService = Depends(get_pipeline_service),
) -> Dict[str, Any]:
    """
    Run independent pipelines concurrently; results keep the request order
    """
    try:
        logger.info(f"Received pipeline batch request with {len(input_data.runs)} run(s)")
        results = await run_in_threadpool(service.run_batch, input_data.runs)
        complete = sum(1 for r in results if r.status == PipelineStatus.COMPLETE)
        return success_response(
            results,
            metadata={"total": len(results), "complete": complete, "blocked": len(results) - complete},
        )
    except Exception as e:
        logger.error(f"Error in pipeline batch: {str(e)}")
        raise handle_api_error(e)
