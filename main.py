"""
CV Buddy — FastAPI Application Entry Point

Registers the CV router, applies middleware, maps pipeline errors to JSON,
and serves the API.
"""

import logging
import contextlib
import traceback
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from cvbuddy.config import get_settings
from cvbuddy.domain.errors import CVBuddyError
from cvbuddy.routers import cv
from cvbuddy.services.error_classifier import error_message

settings = get_settings()

# ── Logging ───────────────────────────────────────────────────
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
)
logger = logging.getLogger(__name__)

UNEXPECTED_ERROR = "An unexpected error occurred while processing the CV"


def describe_validation_errors(errors) -> str:
    """Map FastAPI request-validation errors onto the API's 400 messages."""
    for error in errors:
        loc = error.get("loc", ())
        if "cvFile" in loc:
            # A text part sent as cvFile has no PDF media type
            return "CV file must be a PDF"
        if "jobDescription" in loc:
            return "Job description is required"
    first = errors[0] if errors else {}
    where = ".".join(str(part) for part in first.get("loc", ()))
    return f"Invalid request ({where}): {first.get('msg', 'validation failed')}"


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"🚀 {settings.app_name} is starting up")
    missing = settings.missing_required()
    if missing:
        logger.warning(f"Azure OpenAI is not configured (missing: {', '.join(missing)})")
    else:
        logger.info(f"Completion endpoint: {settings.expected_url}")
    yield
    logger.info(f"🛑 {settings.app_name} is shutting down")


# ── App factory ───────────────────────────────────────────────
app = FastAPI(
    title=settings.app_name,
    description=(
        "Analyzes a job description and rewrites an uploaded CV to match it "
        "using an Azure OpenAI deployment."
    ),
    version="0.1.0",
    debug=settings.debug,
    lifespan=lifespan,
)

# ── CORS ──────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Exception Handlers ────────────────────────────────────────


@app.exception_handler(CVBuddyError)
async def cvbuddy_error_handler(request: Request, exc: CVBuddyError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {type(exc).__name__}: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    message = describe_validation_errors(exc.errors())
    logger.info(f"{request.method} {request.url.path} rejected: {message}")
    return JSONResponse(status_code=400, content={"error": message})


# Ensures ALL unhandled errors still return the JSON error shape
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}: "
        f"{type(exc).__name__}: {exc}\n{traceback.format_exc()}"
    )
    return JSONResponse(
        status_code=500,
        content={"error": error_message(exc) or UNEXPECTED_ERROR},
    )


# ── Routers ───────────────────────────────────────────────────
app.include_router(cv.router)


# ── Health Check ──────────────────────────────────────────────
@app.get("/", tags=["Health"])
async def health_check():
    return {"status": "ok", "service": settings.app_name}
