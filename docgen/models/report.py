from sqlalchemy import String, Integer, Float, DateTime, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from docgen.models.base import Base
from datetime import datetime
from typing import List

class Reports(Base):
    """All generations of one named report."""
    __tablename__ = "reports"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    uid: Mapped[str] = mapped_column(String(36), nullable=False)  # latest child
    filename: Mapped[str] = mapped_column(String, nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    total_generated_reports: Mapped[int] = mapped_column(Integer, default=0)
    file_size: Mapped[int] = mapped_column(Integer, default=0)
    average_generation_time: Mapped[float] = mapped_column(Float, default=0.0)

    reports: Mapped[List["Report"]] = relationship(
        "Report", back_populates="parent", order_by="Report.id", lazy="selectin"
    )

class Report(Base):
    __tablename__ = "report"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    reports_id: Mapped[int] = mapped_column(ForeignKey("reports.id"), nullable=False)
    title: Mapped[str] = mapped_column(String, nullable=False)
    uid: Mapped[str] = mapped_column(String(36), nullable=False, unique=True)
    filename: Mapped[str] = mapped_column(String, nullable=False)
    object_name: Mapped[str] = mapped_column(String, nullable=False)
    mime_type: Mapped[str] = mapped_column(String)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    total_downloads: Mapped[int] = mapped_column(Integer, default=0)
    file_size: Mapped[int] = mapped_column(Integer)
    # milliseconds spent rendering and converting
    average_generation_time: Mapped[float] = mapped_column(Float)

    parent: Mapped["Reports"] = relationship("Reports", back_populates="reports")
