import logging
import traceback
from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.status import HTTP_422_UNPROCESSABLE_ENTITY, HTTP_500_INTERNAL_SERVER_ERROR

from petrosys.utils.error_handling import APIError
from petrosys.utils.response_formatter import response_formatter

logger = logging.getLogger(__name__)

class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Converts exceptions that escape the routes into the standard error envelope.

    APIError keeps its status code and error code. A pydantic ValidationError
    raised while building records outside request parsing becomes a 422.
    Anything else is logged with its traceback and returned as a 500.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = getattr(request.state, "request_id", None)
        try:
            return await call_next(request)
        except APIError as e:
            logger.warning(f"[{request_id}] {e.error_code}: {e.message}")
            detail = e.to_detail()
            return JSONResponse(
                status_code=e.status_code,
                content=response_formatter.error(detail["message"], detail["error"], detail["details"]),
            )
        except PydanticValidationError as e:
            logger.warning(f"Record validation failed: {e.error_count()} error(s)")
            return JSONResponse(
                status_code=HTTP_422_UNPROCESSABLE_ENTITY,
                content=response_formatter.error(
                    message="Record validation failed",
                    error_code="validation_error",
                    details={"errors": [
                        {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
                        for err in e.errors()
                    ]}
                )
            )
        except Exception as e:
            logger.error(f"[{request_id}] Unhandled {type(e).__name__} on {request.url.path}\n{traceback.format_exc()}")
            return JSONResponse(
                status_code=HTTP_500_INTERNAL_SERVER_ERROR,
                content=response_formatter.error(
                    message="An unexpected error occurred",
                    error_code="internal_error",
                    details={"error_type": type(e).__name__, "request_id": request_id}
                )
            )
