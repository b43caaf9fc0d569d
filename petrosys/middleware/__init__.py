from petrosys.middleware.logging_middleware import LoggingMiddleware
from petrosys.middleware.error_middleware import ErrorHandlingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlingMiddleware"]
