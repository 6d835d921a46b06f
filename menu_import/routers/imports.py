"""
Import router for restaurant documents.

Accepts either a JSON file upload (multipart field ``file``) or a raw
``application/json`` request body.
"""
import logging
import os
from typing import Optional

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from menu_import.core.config import Settings, get_settings
from menu_import.core.errors import ConstraintError, InputError, MenuImportError, ValidationError
from menu_import.db.session import get_db
from menu_import.schemas.imports import ImportResponse
from menu_import.services.importer import import_restaurants
from menu_import.services.result_formatter import format_failure, format_import_result

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/imports", tags=["imports"])

ALLOWED_CONTENT_TYPES = {"application/json", "text/json", "application/octet-stream"}


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "results": None},
    )


def _is_json_request(request: Request) -> bool:
    return "application/json" in request.headers.get("content-type", "")


def validate_upload(file: Optional[UploadFile], content: bytes, settings: Settings) -> Optional[str]:
    """
    Check an uploaded import file.

    Args:
        file: Uploaded file (None when the field is missing)
        content: File bytes
        settings: Application settings (size limit)

    Returns:
        Error message, or None if the file is acceptable
    """
    if file is None:
        return "No file provided"

    if len(content) > settings.MAX_IMPORT_FILE_SIZE:
        return (
            f"File size exceeds maximum allowed size of "
            f"{settings.max_import_file_size_mb}MB"
        )

    extension = os.path.splitext(file.filename or "")[1].lower()
    if file.content_type not in ALLOWED_CONTENT_TYPES and extension != ".json":
        return "Invalid file type. Expected JSON"

    return None


@router.post("/restaurants", response_model=ImportResponse)
async def import_restaurants_endpoint(
    request: Request,
    file: Optional[UploadFile] = File(None),
    console: bool = Query(False, description="Echo import events to the server console"),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Import restaurants, menus, and menu items from a JSON document.

    The whole document is imported in one transaction: on any failure nothing
    is written and the response carries no counts.

    Returns:
        ImportResponse with creation counts and the event log
    """
    if _is_json_request(request):
        content = await request.body()
        if len(content) > settings.MAX_IMPORT_FILE_SIZE:
            return _error_response(
                status.HTTP_400_BAD_REQUEST,
                f"File size exceeds maximum allowed size of {settings.max_import_file_size_mb}MB",
            )
    elif file is not None:
        content = await file.read()
        error = validate_upload(file, content, settings)
        if error:
            return _error_response(status.HTTP_400_BAD_REQUEST, error)
    else:
        return _error_response(
            status.HTTP_400_BAD_REQUEST,
            "No file provided or invalid content type",
        )

    try:
        report = import_restaurants(
            db,
            content,
            console=console,
            isolation_level=settings.IMPORT_ISOLATION_LEVEL,
        )
    except InputError as e:
        return _failure_response(status.HTTP_422_UNPROCESSABLE_ENTITY, e)
    except (ValidationError, ConstraintError) as e:
        logger.error(f"Import rolled back: {e}")
        return _failure_response(status.HTTP_422_UNPROCESSABLE_ENTITY, e)
    except MenuImportError as e:
        logger.error(f"Unexpected error during import: {e}", exc_info=True)
        return _failure_response(status.HTTP_500_INTERNAL_SERVER_ERROR, e)

    return format_import_result(report)


def _failure_response(status_code: int, error: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=format_failure(error).model_dump(mode="json"),
    )
