import logging
from typing import Any, Dict

from fastapi import APIRouter

from petrosys.schemas.inputs import NarrativeParseInput
from petrosys.services.parsers import PARSERS, parse_narrative
from petrosys.utils.error_handling import handle_api_error
from petrosys.utils.response_formatter import analysis_response, success_response

# Configure logging
logger = logging.getLogger(__name__)

# Create router
router = APIRouter(tags=["extraction"])

@router.get("/record-types")
def get_record_types() -> Dict[str, Any]:
    """
    List the record types a narrative can be parsed into
    """
    return success_response(sorted(PARSERS))

@router.post("/parse")
def parse_stored_narrative(data: NarrativeParseInput) -> Dict[str, Any]:
    """
    Parse a stored narrative into a record without calling the reasoning service.

    Args:
        data: Record type, narrative and optional parser context

    Returns:
        Success envelope with the parsed record
    """
    try:
        return analysis_response(parse_narrative(data.record_type, data.narrative, data.context))
    except Exception as e:
        logger.error(f"Error parsing narrative as {data.record_type}: {str(e)}")
        raise handle_api_error(e)
