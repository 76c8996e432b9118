from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging
import uvicorn

from app.config import settings
from app.exceptions import RAGServiceError
from app.rag.models import ServiceHealth
from app.services.state import ServiceState

from app.routers import chat, documents

from app.middleware import LoggingMiddleware

APP_VERSION = "1.0.0"

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("Starting Research Assistant API...")
    services = ServiceState()
    # a failed initialization keeps the process up; AI endpoints answer 503
    services.initialize(settings)
    app.state.services = services

    yield

    logger.info("Shutting down Research Assistant API...")
    services.close()

app = FastAPI(
    title="Research Assistant API",
    description="Upload PDFs and ask questions answered from their content",
    version=APP_VERSION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(LoggingMiddleware)

app.include_router(documents.router)
app.include_router(chat.router)

@app.exception_handler(RAGServiceError)
async def rag_service_error_handler(request: Request, exc: RAGServiceError):
    logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{location}: {error.get('msg')}" if location else error.get("msg", ""))
    message = "Invalid request: " + "; ".join(problems)
    logger.warning(f"{request.method} {request.url.path} -> 422: {message}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"message": message}
    )

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler"""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"}
    )

@app.get("/health", tags=["Health"], response_model=ServiceHealth)
async def health_check(request: Request):
    """Health check endpoint"""
    services = getattr(request.app.state, "services", None)
    ready = services is not None and services.ready
    return ServiceHealth(
        status="healthy" if ready else "degraded",
        initialized=ready,
        message="Research Assistant API is running",
        version=APP_VERSION,
        error=services.error if services is not None else None,
    )

@app.get("/", tags=["Root"])
async def root():
    """Root endpoint"""
    return {
        "message": "Welcome to the Research Assistant API",
        "docs": "/docs",
        "redoc": "/redoc"
    }

if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="info" if settings.debug else "warning"
    )
