from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import logging

from menu_import.core.config import get_settings
from menu_import.core.logging import configure_logging
from menu_import.routers.health import router as health_router
from menu_import.routers.imports import router as imports_router

logger = logging.getLogger(__name__)

settings = get_settings()
configure_logging(level=settings.LOG_LEVEL)

app = FastAPI(
    title=settings.APP_NAME,
    description="Imports restaurants, menus, and menu items from JSON documents without creating duplicates.",
    version="0.1.0",
    debug=settings.DEBUG,
)


# Global exception handler for unhandled errors
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected server errors with structured response."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": "An unexpected error occurred. Please try again later.",
            "results": None,
        }
    )


app.include_router(health_router)
app.include_router(imports_router, prefix="/api")
