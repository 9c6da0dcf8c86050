from pydantic import BaseModel, ConfigDict
from typing import List
from datetime import datetime

class ReportOut(BaseModel):
    uid: str
    title: str
    filename: str
    date: datetime
    total_downloads: int
    file_size: int
    average_generation_time: float

    model_config = ConfigDict(from_attributes=True)

class ReportsOut(BaseModel):
    title: str
    uid: str
    filename: str
    date: datetime
    total_generated_reports: int
    file_size: int
    average_generation_time: float
    reports: List[ReportOut] = []

    model_config = ConfigDict(from_attributes=True)
