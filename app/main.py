from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
from datetime import datetime
from contextlib import asynccontextmanager

from app.clients.gemini import GeminiClient
from app.config import settings
from app.exceptions import WaypointError
from app.models.schemas import ErrorResponse
from app.api.routes import router

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def build_ai_client(app_settings):
    """Construct the completion client from settings; a missing key stops startup"""
    api_key = app_settings.require_ai_api_key()
    return GeminiClient(api_key=api_key, model=app_settings.GEMINI_MODEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    if getattr(app.state, "settings", None) is None:
        app.state.settings = settings
    if getattr(app.state, "ai_client", None) is None:
        app.state.ai_client = build_ai_client(app.state.settings)
    logger.info(f"AI client ready (model {app.state.settings.GEMINI_MODEL})")

    yield
    logger.info("Application shutting down...")

app = FastAPI(
    title=settings.API_TITLE,
    description=settings.API_DESCRIPTION,
    version=settings.API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes with prefix
app.include_router(router, prefix="/api/v1", tags=["Customs Classification"])


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information"""
    return {
        "message": "Waypoint Customs Classifier API",
        "version": settings.API_VERSION,
        "documentation": {
            "swagger_ui": "/docs",
            "redoc": "/redoc",
            "openapi_json": "/openapi.json"
        },
        "endpoints": {
            "products": "/api/v1/products",
            "classify": "/api/v1/classify",
            "save_metafields": "/api/v1/save-metafields",
            "health": "/api/v1/health"
        },
        "status": "active"
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": datetime.now(),
        "version": settings.API_VERSION,
        "service": "Waypoint Customs Classifier"
    }


# Global exception handlers
@app.exception_handler(WaypointError)
async def waypoint_error_handler(request, exc: WaypointError):
    if exc.status_code >= 500:
        logger.error(f"{exc.error}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=exc.error,
            message=exc.message,
            status_code=exc.status_code
        ).model_dump(mode="json")
    )


@app.exception_handler(404)
async def not_found_handler(request, exc):
    return JSONResponse(
        status_code=404,
        content=ErrorResponse(
            error="Not Found",
            message="The requested resource was not found",
            status_code=404
        ).model_dump(mode="json")
    )


@app.exception_handler(500)
async def internal_server_error_handler(request, exc):
    logger.error(f"Internal server error: {exc}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="Internal Server Error",
            message="An internal server error occurred",
            status_code=500
        ).model_dump(mode="json")
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error="HTTP Error",
            message=exc.detail,
            status_code=exc.status_code
        ).model_dump(mode="json")
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
