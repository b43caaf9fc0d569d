# petrosys/services/pipeline/__init__.py
# Export the orchestrator and service to simplify imports
from petrosys.services.pipeline.orchestrator import REQUIREMENTS, STAGES, PipelineOrchestrator, run_pipeline
from petrosys.services.pipeline.pipeline_service import PipelineService

__all__ = ["PipelineOrchestrator", "PipelineService", "REQUIREMENTS", "STAGES", "run_pipeline"]
