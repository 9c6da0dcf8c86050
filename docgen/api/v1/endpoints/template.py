from fastapi import APIRouter, Depends, UploadFile, File as FileParam, Response
from sqlalchemy.ext.asyncio import AsyncSession
from docgen.core.database import get_db
from docgen.core.encoding import decode_content
from docgen.core.errors import TemplateNotFoundError, ValidationFailed
from docgen.core.sizes import format_size
from docgen.schemas.template import TemplateOut
from docgen.services.render_service import render_service
from docgen.services.report_log_service import report_log_service
from docgen.services.storage_service import storage_service
from docgen.validation import fields
from docgen.validation.composite import CONVERSION_MESSAGE, output_type_of
from docgen.validation.middleware import (
    UploadLimits,
    get_upload_limits,
    validate_conversion_request,
    validate_template_request,
)
from typing import Any, Dict
import logging
import os
import uuid

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/template", tags=["Templates"])

def _template_prefix(template_id: uuid.UUID) -> str:
    return f"templates/{template_id}."

async def _render_report(
    db: AsyncSession,
    template: bytes,
    file_type: str,
    payload: Dict[str, Any],
) -> Response:
    options = payload.get("options") or {}
    rendered = await render_service.render(template, file_type, payload["data"], options)

    uid = report_log_service.new_uid()
    object_name = storage_service.upload_file(
        f"reports/{uid}/{rendered.filename}",
        rendered.content,
        metadata={"operation": "render", "file_type": file_type, "output_type": rendered.output_type},
    )
    await report_log_service.record(
        db,
        uid=uid,
        title=os.path.splitext(rendered.filename)[0],
        filename=rendered.filename,
        object_name=object_name,
        mime_type=rendered.media_type,
        file_size=len(rendered.content),
        generation_time=rendered.generation_time,
    )

    return Response(
        content=rendered.content,
        media_type=rendered.media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{rendered.filename}"',
            "X-Report-Id": uid,
        },
    )

@router.post("/render", response_class=Response)
async def render_template(
    payload: Dict[str, Any] = Depends(validate_template_request),
    db: AsyncSession = Depends(get_db)
):
    """Render a template supplied inline (encoded) in the request body."""
    template = payload["template"]
    content = decode_content(template["content"], template["encodingType"])
    return await _render_report(db, content, template["fileType"], payload)

@router.post("", response_model=TemplateOut, status_code=201)
async def upload_template(
    file: UploadFile = FileParam(...),
    limits: UploadLimits = Depends(get_upload_limits)
):
    filename = file.filename or ""
    file_type = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    if not fields.file_type(file_type):
        raise ValidationFailed([{"value": file_type, "message": "Invalid value `template.fileType`."}])

    content = await file.read()
    if not content:
        raise ValidationFailed([{"value": filename, "message": "Invalid value `template.content`."}])
    if len(content) > limits.max_file_size:
        raise ValidationFailed([{
            "value": "Template document too large",
            "message": f"Template exceeds size limit of {format_size(limits.max_file_size)}.",
        }])

    template_id = uuid.uuid4()
    storage_service.upload_file(
        f"{_template_prefix(template_id)}{file_type}",
        content,
        metadata={"source": filename},
    )
    logger.info("Stored template %s (%s, %d bytes)", template_id, file_type, len(content))
    return TemplateOut(template_id=str(template_id), file_type=file_type, size=len(content))

@router.post("/{template_id}/render", response_class=Response)
async def render_stored_template(
    template_id: uuid.UUID,
    payload: Dict[str, Any] = Depends(validate_conversion_request),
    db: AsyncSession = Depends(get_db)
):
    object_name = storage_service.find_object(_template_prefix(template_id))
    if not object_name:
        raise TemplateNotFoundError(str(template_id))

    file_type = object_name.rsplit(".", 1)[-1]
    output_type = output_type_of(payload)
    if not fields.file_conversion(file_type, output_type):
        raise ValidationFailed([{"values": [file_type, output_type], "message": CONVERSION_MESSAGE}])

    content = storage_service.download_file(object_name)
    if content is None:
        raise TemplateNotFoundError(str(template_id))
    return await _render_report(db, content, file_type, payload)

@router.delete("/{template_id}", status_code=200)
async def delete_template(template_id: uuid.UUID):
    object_name = storage_service.find_object(_template_prefix(template_id))
    if not object_name:
        raise TemplateNotFoundError(str(template_id))
    storage_service.delete_file(object_name)
    return {"status": "success"}
