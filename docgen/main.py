from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from docgen.core.config import settings
from docgen.core.errors import DocumentProcessingError, ValidationFailed
from docgen.core.problem import problem_response
from docgen.validation.middleware import initialize
from docgen.api.v1 import endpoints

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Resolved once; a bad FILE_UPLOADS_MAX_FILE_SIZE stops startup here
    app.state.upload_limits = initialize()
    yield

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "X-Report-Id"],
)

@app.exception_handler(ValidationFailed)
async def validation_failed_handler(request: Request, exc: ValidationFailed):
    return problem_response(422, "Validation failed", errors=exc.errors)

@app.exception_handler(DocumentProcessingError)
async def document_processing_handler(request: Request, exc: DocumentProcessingError):
    if exc.status_code >= 500:
        logger.error("%s: %s %s", exc.error_type, exc.message, exc.details)
    return problem_response(exc.status_code, exc.message, errorType=exc.error_type, details=exc.details)

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return problem_response(exc.status_code, str(exc.detail))

# Health check
@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": settings.VERSION}

app.include_router(endpoints.router, prefix=settings.API_V1_STR)
