from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession
from docgen.core.database import get_db
from docgen.schemas.report import ReportsOut
from docgen.services.report_log_service import report_log_service
from docgen.services.storage_service import storage_service
from typing import List

router = APIRouter(prefix="/reports", tags=["Reports"])

@router.get("", response_model=List[ReportsOut])
async def list_reports(db: AsyncSession = Depends(get_db)):
    return await report_log_service.list_reports(db)

@router.get("/{uid}/download", response_class=Response)
async def download_report(uid: str, db: AsyncSession = Depends(get_db)):
    report = await report_log_service.get(db, uid)
    if not report:
        raise HTTPException(status_code=404, detail="Report not found")

    content = storage_service.download_file(report.object_name)
    if content is None:
        raise HTTPException(status_code=404, detail="Report not found in storage")

    await report_log_service.register_download(db, report)
    return Response(
        content=content,
        media_type=report.mime_type,
        headers={"Content-Disposition": f'attachment; filename="{report.filename}"'}
    )
