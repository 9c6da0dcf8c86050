"""Request dependencies that gate endpoints on payload validation.

A dependency either returns the parsed body, letting the endpoint run, or
raises ``ValidationFailed``; the application turns that into a single 422
problem response listing every violation.
"""
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from fastapi import Depends, HTTPException, Request

from docgen.core.config import settings
from docgen.core.errors import ConfigurationError, ValidationFailed
from docgen.core.sizes import parse_size
from docgen.validation.composite import validate_carbone_shape, validate_template_upload

logger = logging.getLogger(__name__)

DEFAULT_MAX_FILE_SIZE = "25MB"


@dataclass(frozen=True)
class UploadLimits:
    max_file_size: int


def initialize(options: Optional[Mapping[str, Any]] = None) -> UploadLimits:
    """Resolve the maximum template upload size.

    Precedence: ``options["maxFileSize"]`` / ``options["max-file-size"]``, then
    the ``FILE_UPLOADS_MAX_FILE_SIZE`` setting, then 25MB. Call once at
    startup; an unreadable value raises ConfigurationError.
    """
    raw = None
    if options:
        raw = options.get("maxFileSize") or options.get("max-file-size")
    raw = raw or settings.FILE_UPLOADS_MAX_FILE_SIZE or DEFAULT_MAX_FILE_SIZE

    max_file_size = parse_size(raw)
    if max_file_size is None or max_file_size < 1:
        raise ConfigurationError(
            f"Could not determine max file size (bytes) for file uploads from {raw!r}."
        )
    logger.info("Maximum template upload size: %d bytes", max_file_size)
    return UploadLimits(max_file_size=max_file_size)


def get_upload_limits(request: Request) -> UploadLimits:
    return request.app.state.upload_limits


def raise_for_violations(errors: List[Dict[str, Any]]) -> None:
    if errors:
        raise ValidationFailed(errors)


async def read_json_body(request: Request) -> Any:
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise HTTPException(status_code=400, detail="Request body must be valid JSON")


async def validate_conversion_request(request: Request) -> Dict[str, Any]:
    payload = await read_json_body(request)
    raise_for_violations(await validate_carbone_shape(payload))
    return payload


async def validate_template_request(
    request: Request,
    limits: UploadLimits = Depends(get_upload_limits),
) -> Dict[str, Any]:
    payload = await read_json_body(request)
    raise_for_violations(await validate_template_upload(payload, limits.max_file_size))
    return payload
