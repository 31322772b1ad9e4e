"""Aggregate all API sub-routers."""

from fastapi import APIRouter

from . import export, imports, deletion, audit

api_router = APIRouter()

api_router.include_router(export.router)
api_router.include_router(imports.router)
api_router.include_router(deletion.router)
api_router.include_router(audit.router)
