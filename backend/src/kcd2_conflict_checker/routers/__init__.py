from fastapi import APIRouter

from kcd2_conflict_checker.routers.export import router as export_router
from kcd2_conflict_checker.routers.scan import router as scan_router
from kcd2_conflict_checker.routers.settings import router as settings_router
from kcd2_conflict_checker.routers.whitelist import router as whitelist_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(settings_router)
api_router.include_router(whitelist_router)
api_router.include_router(scan_router)
api_router.include_router(export_router)
