# petrosys/utils/error_handling.py

import logging
import traceback
from typing import Dict, Any, Optional

from fastapi import HTTPException, status

logger = logging.getLogger(__name__)

class APIError(Exception):
    """
    Base class for API errors.

    Subclasses set status_code and error_code; handle_api_error turns any
    of them into the error envelope.
    """
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "internal_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_detail(self) -> Dict[str, Any]:
        return {"error": self.error_code, "message": self.message, "details": self.details}

class ValidationError(APIError):
    """Malformed parser context or analyzer input"""
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "validation_error"

class NotFoundError(APIError):
    """Unknown record type or surface-correlation section"""
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "not_found"

class CollaboratorError(APIError):
    """The reasoning service failed or returned no text"""
    status_code = status.HTTP_502_BAD_GATEWAY
    error_code = "collaborator_error"

class ConfigurationError(APIError):
    """Settings that cannot build a working service"""
    error_code = "configuration_error"

class AnalysisFailedError(APIError):
    """An analyzer returned an AnalysisError or an Invalid record"""
    status_code = status.HTTP_502_BAD_GATEWAY
    error_code = "analysis_failed"

def handle_api_error(error: Exception) -> HTTPException:
    """
    Convert any exception raised by a route into an HTTPException.

    Args:
        error: The exception to handle

    Returns:
        HTTPException whose detail the app's handler renders as an error envelope
    """
    if isinstance(error, HTTPException):
        return error
    if isinstance(error, APIError):
        if error.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.warning(f"{error.error_code}: {error.message}")
        return HTTPException(status_code=error.status_code, detail=error.to_detail())

    logger.error(f"Unexpected error: {str(error)}\n{traceback.format_exc()}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={
            "error": "internal_error",
            "message": "An unexpected error occurred",
            "details": {"error_type": type(error).__name__}
        }
    )
