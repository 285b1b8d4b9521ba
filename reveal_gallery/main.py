"""
FastAPI application entry point.
Application factory with middleware and route configuration.
"""
from fastapi import FastAPI, Request, status, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from pathlib import Path
from typing import Optional
import logging

from reveal_gallery.catalog import load_catalog
from reveal_gallery.config import Settings, get_settings
from reveal_gallery.services.access_notifier import AccessEventNotifier
from reveal_gallery.services.image_gateway import ImageAccessGateway
from reveal_gallery.routes import gallery, images

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"
INDEX_PAGE = STATIC_DIR / "index.html"

CONTENT_SECURITY_POLICY = "; ".join([
    "default-src 'self'",
    "script-src 'self' 'unsafe-inline'",
    "img-src 'self' data:",
])


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def create_app(
    settings: Optional[Settings] = None,
    notifier: Optional[AccessEventNotifier] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Application settings; read from the environment when omitted
        notifier: Access event notifier; built from WEBHOOK_URL when omitted

    Raises:
        CatalogError: If the configured catalog cannot be loaded
    """
    settings = settings or get_settings()
    notifier = notifier or AccessEventNotifier(
        settings.WEBHOOK_URL,
        timeout=settings.WEBHOOK_TIMEOUT_SECONDS,
    )

    app = FastAPI(
        title=settings.API_TITLE,
        description=settings.API_DESCRIPTION,
        version=settings.API_VERSION,
    )
    app.state.settings = settings
    app.state.catalog = load_catalog(settings)
    app.state.notifier = notifier
    app.state.gateway = ImageAccessGateway(settings, notifier)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=False,  # Must be False when using wildcard origin
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
        max_age=3600,  # Cache preflight requests for 1 hour
    )

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers["Content-Security-Policy"] = CONTENT_SECURITY_POLICY
        return response

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log method, path and status of every request."""
        method = request.method
        path = request.url.path
        logger.debug(f"Incoming {method} request to {path}")

        try:
            response = await call_next(request)
            logger.info(f"Response status: {response.status_code} for {method} {path}")
            return response
        except Exception as e:
            logger.error(
                f"Error processing {method} {path}: {str(e)}\n"
                f"  Error type: {type(e).__name__}",
                exc_info=True
            )
            raise

    app.include_router(images.router, tags=["images"])
    app.include_router(gallery.router, prefix="/api", tags=["gallery"])
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Handle HTTP exceptions (400, 404, etc.)."""
        logger.error(
            f"HTTPException on {request.method} {request.url.path}:\n"
            f"  Status: {exc.status_code}\n"
            f"  Detail: {exc.detail}"
        )

        # Handle both string and dict detail formats
        if isinstance(exc.detail, dict):
            content = exc.detail
        else:
            content = {"error": exc.detail, "detail": str(exc.detail)}

        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle request validation errors."""
        logger.error(
            f"Validation error on {request.method} {request.url.path}:\n"
            f"  Errors: {exc.errors()}"
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": "Validation error",
                "detail": exc.errors()
            }
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle general exceptions."""
        logger.error(
            f"Unhandled exception on {request.method} {request.url.path}:\n"
            f"  Error: {str(exc)}\n"
            f"  Error type: {type(exc).__name__}",
            exc_info=True
        )
        response = JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Internal server error",
                "detail": "An unexpected error occurred"
            }
        )
        # served by ServerErrorMiddleware, outside security_headers
        response.headers["Content-Security-Policy"] = CONTENT_SECURITY_POLICY
        return response

    @app.get("/", response_class=HTMLResponse)
    async def index():
        """Gallery page."""
        return HTMLResponse(INDEX_PAGE.read_text(encoding="utf-8"))

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": settings.API_VERSION,
            "catalog_size": len(app.state.catalog),
            "webhook": "configured" if notifier.enabled else "disabled",
        }

    @app.on_event("startup")
    async def startup_event():
        logger.info(
            f"Serving {len(app.state.catalog)} catalog images from {settings.IMAGE_DIR} "
            f"(webhook {'enabled' if notifier.enabled else 'disabled'})"
        )
        if not Path(settings.IMAGE_DIR).is_dir():
            logger.warning(f"IMAGE_DIR {settings.IMAGE_DIR} does not exist - every image request will 404")

    @app.on_event("shutdown")
    async def shutdown_event():
        """Flush pending access events and close the webhook client."""
        await notifier.aclose()

    return app
