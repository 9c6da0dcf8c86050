from fastapi import APIRouter
from .file_types import router as file_types_router
from .template import router as template_router
from .reports import router as reports_router

router = APIRouter()
router.include_router(file_types_router)
router.include_router(template_router)
router.include_router(reports_router)
