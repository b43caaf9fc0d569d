import logging
from typing import Any, Dict, List, Optional, Sequence

from petrosys.schemas.inputs import PipelineInput
from petrosys.schemas.pipeline import PipelineResult, PipelineStatus
from petrosys.services.analysis import ChancePolicy
from petrosys.services.pipeline.orchestrator import REQUIREMENTS, STAGES, PipelineOrchestrator
from petrosys.services.reasoning.client import ReasoningClient

# Configure logging
logger = logging.getLogger(__name__)

class PipelineService:
    """
    Service for running the prospect evaluation pipeline.
    This service wraps the stage orchestrator for the API layer.
    """

    def __init__(
        self,
        client: ReasoningClient,
        policy: Optional[ChancePolicy] = None,
        max_workers: Optional[int] = None,
    ):
        self.orchestrator = PipelineOrchestrator(client, policy=policy, max_workers=max_workers)

    def get_stage_graph(self) -> List[Dict[str, Any]]:
        """
        Get the pipeline stages in execution order with their requirements.

        Returns:
            List of stages, each with the stages it requires
        """
        logger.info("Getting pipeline stage graph")
        return [
            {"stage": stage.value, "requires": [r.value for r in REQUIREMENTS[stage]]}
            for stage in STAGES
        ]

    def run(self, data: PipelineInput) -> PipelineResult:
        """
        Run the full pipeline for one prospect.

        Args:
            data: Raw stage inputs and optional fallback records

        Returns:
            PipelineResult with every record produced
        """
        result = self.orchestrator.run(data)
        if result.status == PipelineStatus.BLOCKED:
            logger.warning(f"Pipeline '{data.name or 'unnamed'}' blocked at {result.blocked_at.value}")
        return result

    def run_batch(self, runs: Sequence[PipelineInput]) -> List[PipelineResult]:
        """
        Run several independent pipelines.

        Args:
            runs: One input per prospect

        Returns:
            Results in the same order as the inputs
        """
        results = self.orchestrator.run_batch(runs)
        complete = sum(1 for r in results if r.status == PipelineStatus.COMPLETE)
        logger.info(f"Batch finished: {complete}/{len(results)} pipeline(s) complete")
        return results
