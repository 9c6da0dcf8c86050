from fastapi import APIRouter
from docgen.schemas.template import FileTypesOut
from docgen.services.file_types import FILE_TYPES

router = APIRouter(tags=["File Types"])

@router.get("/fileTypes", response_model=FileTypesOut)
async def get_file_types():
    """Supported template types and the output types each converts to."""
    return FileTypesOut(dictionary=FILE_TYPES)
