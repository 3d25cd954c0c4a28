from fastapi import APIRouter

from app.api.catalog import locations_router, roles_router
from app.api.employees import employees_router
from app.api.reports import reports_router
from app.api.requests import requests_router

api_router = APIRouter()
api_router.include_router(employees_router)
api_router.include_router(roles_router)
api_router.include_router(locations_router)
api_router.include_router(requests_router)
api_router.include_router(reports_router)
