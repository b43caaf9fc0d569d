import logging
from functools import lru_cache

from fastapi import Depends

from petrosys.services.analysis import ChancePolicy
from petrosys.services.pipeline import PipelineService
from petrosys.services.reasoning import OpenAIReasoningClient, ReasoningClient
from petrosys.utils.error_handling import ConfigurationError

# Configure logging
logger = logging.getLogger(__name__)

@lru_cache(maxsize=1)
def get_reasoning_client() -> ReasoningClient:
    """
    Dependency providing the reasoning service client.
    Built once from settings; tests replace it through app.dependency_overrides.
    """
    logger.info("Creating reasoning client")
    return OpenAIReasoningClient()

def get_chance_policy() -> ChancePolicy:
    """
    Dependency providing the chance policy from settings.

    Raises:
        ConfigurationError: If the configured weights or combination are unusable
    """
    try:
        return ChancePolicy.from_settings()
    except ValueError as e:
        logger.error(f"Invalid chance policy configuration: {str(e)}")
        raise ConfigurationError(f"Invalid chance policy configuration: {str(e)}") from e

def get_pipeline_service(
    client: ReasoningClient = Depends(get_reasoning_client),
    policy: ChancePolicy = Depends(get_chance_policy),
) -> PipelineService:
    return PipelineService(client, policy=policy)
