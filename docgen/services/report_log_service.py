import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from docgen.models.report import Report, Reports

logger = logging.getLogger(__name__)


class ReportLogService:
    @staticmethod
    def new_uid() -> str:
        return str(uuid.uuid4())

    @staticmethod
    async def find_parent(db: AsyncSession, title: str) -> Optional[Reports]:
        return await db.scalar(select(Reports).where(Reports.title == title))

    @staticmethod
    async def record(
        db: AsyncSession,
        *,
        uid: str,
        title: str,
        filename: str,
        object_name: str,
        mime_type: str,
        file_size: int,
        generation_time: float,
    ) -> Report:
        """Log one generated report and fold it into the aggregate for ``title``.

        When another request creates the aggregate between our lookup and our
        commit, the unique title rejects the insert; the entry is then appended
        to the row that won.
        """
        entry = dict(
            uid=uid,
            title=title,
            filename=filename,
            object_name=object_name,
            mime_type=mime_type,
            file_size=file_size,
            generation_time=generation_time,
        )
        try:
            report = await ReportLogService._append(db, **entry)
            await db.commit()
        except IntegrityError:
            await db.rollback()
            logger.info("Aggregate for %r created concurrently, retrying", title)
            report = await ReportLogService._append(db, **entry)
            await db.commit()
        logger.info("Logged report %s (%s, %d bytes)", uid, title, file_size)
        return report

    @staticmethod
    async def _append(
        db: AsyncSession,
        *,
        uid: str,
        title: str,
        filename: str,
        object_name: str,
        mime_type: str,
        file_size: int,
        generation_time: float,
    ) -> Report:
        now = datetime.now(timezone.utc)
        parent = await ReportLogService.find_parent(db, title)
        if parent is None:
            parent = Reports(
                title=title,
                uid=uid,
                filename=filename,
                date=now,
                total_generated_reports=0,
                file_size=0,
                average_generation_time=0.0,
            )
            db.add(parent)

        count = parent.total_generated_reports or 0
        parent.average_generation_time = (
            (parent.average_generation_time or 0.0) * count + generation_time
        ) / (count + 1)
        parent.total_generated_reports = count + 1
        parent.uid = uid
        parent.filename = filename
        parent.file_size = file_size
        parent.date = now

        report = Report(
            title=title,
            uid=uid,
            filename=filename,
            object_name=object_name,
            mime_type=mime_type,
            date=now,
            total_downloads=0,
            file_size=file_size,
            average_generation_time=generation_time,
            parent=parent,
        )
        db.add(report)
        return report

    @staticmethod
    async def get(db: AsyncSession, uid: str) -> Optional[Report]:
        return await db.scalar(select(Report).where(Report.uid == uid))

    @staticmethod
    async def register_download(db: AsyncSession, report: Report) -> Report:
        report.total_downloads = (report.total_downloads or 0) + 1
        await db.commit()
        return report

    @staticmethod
    async def list_reports(db: AsyncSession) -> List[Reports]:
        result = await db.execute(select(Reports).order_by(Reports.date.desc()))
        return list(result.scalars().all())

report_log_service = ReportLogService()
