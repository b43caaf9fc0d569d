import logging
from fastapi import FastAPI, Request, status
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.gzip import GZipMiddleware

from petrosys.api.v1.routes import api_router
from petrosys.core.config import settings
from petrosys.middleware import ErrorHandlingMiddleware, LoggingMiddleware
from petrosys.utils.response_formatter import response_formatter

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="""
    API for petroleum system analysis

    Each analysis endpoint sends its typed inputs to the configured reasoning
    service and parses the returned narrative into a typed record. Records carry
    a status (complete, partial or empty) and the issues found while parsing:

    - `extraction_gap`: a field the narrative did not state
    - `invariant_violation`: a stated value that broke a rule (reversed range, percentage out of bounds)
    - `data_quality`: a plausible but suspicious value

    The pipeline endpoints chain the six stage analyses and report where a run
    was blocked. `POST /extraction/parse` parses stored narratives without a
    reasoning call.
    """,
    version="1.0.0",
    root_path=settings.API_V1_STR,
    docs_url="/docs" if settings.DEBUG else None,  # Disable docs in production
    redoc_url="/redoc" if settings.DEBUG else None,  # Disable redoc in production
)

# Add CORS middleware with settings from config
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Accept", "X-Request-ID"],
    expose_headers=["X-Process-Time", "X-Request-ID"],
)

# Add GZip compression middleware
app.add_middleware(GZipMiddleware, minimum_size=1000)

# Error handling runs inside the logging middleware so it can read the request id
app.add_middleware(ErrorHandlingMiddleware)
app.add_middleware(LoggingMiddleware)

# Structured HTTP errors from handle_api_error use the standard error envelope
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail
    if isinstance(detail, dict) and "error" in detail:
        content = response_formatter.error(
            message=detail.get("message", ""),
            error_code=detail["error"],
            details=detail.get("details"),
        )
    else:
        content = response_formatter.error(message=str(detail), error_code=f"http_{exc.status_code}")
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)

# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global exception: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=response_formatter.error(message="Internal server error"),
    )

app.include_router(api_router)

@app.get("/")
def read_root():
    return {"message": f"Welcome to the {settings.PROJECT_NAME}"}

@app.get("/health")
def health_check():
    """Health check endpoint for monitoring"""
    return {"status": "healthy"}
