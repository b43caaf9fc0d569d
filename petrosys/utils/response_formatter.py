# petrosys/utils/response_formatter.py

from typing import Dict, Any, Optional

from pydantic import BaseModel

from petrosys.schemas.common import AnalysisError, Invalid
from petrosys.utils.error_handling import AnalysisFailedError


def _dump(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json")
    if isinstance(data, (list, tuple)):
        return [_dump(item) for item in data]
    return data

def success_response(
    data: Any = None,
    message: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Success envelope: {"status": "success", "data": ...} plus the optional
    message and metadata keys. Records are dumped in JSON mode so enums and
    the computed `valid` flag serialize.
    """
    response = {"status": "success", "data": _dump(data)}
    if message:
        response["message"] = message
    if metadata:
        response["metadata"] = metadata
    return response

def error_response(
    message: str,
    error_code: str = "internal_error",
    details: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """Error envelope: {"status": "error", "error": {code, message, details}}."""
    return {
        "status": "error",
        "error": {"code": error_code, "message": message, "details": details or {}},
    }

class ResponseFormatter:
    """Envelope builders for the middleware and exception handlers."""

    success = staticmethod(success_response)
    error = staticmethod(error_response)

response_formatter = ResponseFormatter()

def analysis_response(
    result: Any,
    message: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Wrap an analyzer result in a success response.

    Args:
        result: A record, a tuple of records, an Invalid or an AnalysisError
        message: Optional success message
        metadata: Optional metadata

    Returns:
        Standardized success response dictionary

    Raises:
        AnalysisFailedError: If the analyzer failed or the record could not be built
    """
    if isinstance(result, AnalysisError):
        raise AnalysisFailedError(result.message, details=result.model_dump(mode="json"))
    if isinstance(result, Invalid):
        raise AnalysisFailedError(
            f"Could not build {result.record_type}",
            details=result.model_dump(mode="json"),
        )
    return success_response(result, message, metadata)
