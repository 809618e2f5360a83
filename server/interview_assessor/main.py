import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import load_settings
from .dependencies import close_orchestrator, init_orchestrator
from .routes import analyze_router
from .services.errors import MethodError

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}
METHOD_NOT_ALLOWED_BODY = {"error": "Method not allowed"}


def configure_logging(level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    settings = load_settings()
    configure_logging(settings.log_level)
    logger.info("Starting server on port %s", settings.port)
    if settings.has_ai_credentials:
        logger.info("Using %s for Gemini", "Vertex AI" if settings.use_vertex else "API Key")

    init_orchestrator(settings)

    yield

    close_orchestrator()
    logger.info("Server shutdown complete")


app = FastAPI(
    title="Interview Assessor API",
    description="Competency scoring for interview transcripts and recordings",
    version="2.0.0",
    lifespan=lifespan,
)


# CORS - fixed headers on every response; preflights are answered by the routes
@app.middleware("http")
async def add_cors_headers(request: Request, call_next):
    response = await call_next(request)
    for name, value in CORS_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


@app.exception_handler(MethodError)
async def method_error_handler(request: Request, exc: MethodError):
    return JSONResponse(status_code=405, content=METHOD_NOT_ALLOWED_BODY)


@app.exception_handler(StarletteHTTPException)
async def starlette_http_error_handler(request: Request, exc: StarletteHTTPException):
    # Verbs no route declares (TRACE, CONNECT, ...) share the analyze 405 body.
    if exc.status_code == 405:
        return JSONResponse(status_code=405, content=METHOD_NOT_ALLOWED_BODY, headers=exc.headers)
    return await http_exception_handler(request, exc)


app.include_router(analyze_router, prefix="/api", tags=["analysis"])


@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": "interview-assessor"}
