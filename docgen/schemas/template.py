from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List

class TemplateOut(BaseModel):
    template_id: str = Field(alias="templateId")
    file_type: str = Field(alias="fileType")
    size: int

    model_config = ConfigDict(populate_by_name=True)

class FileTypesOut(BaseModel):
    dictionary: Dict[str, List[str]]
