from fastapi import APIRouter

from peopledesk.api.employees import employees_router
from peopledesk.api.reports import reports_router
from peopledesk.api.time_offs import time_offs_router

api_router = APIRouter()
api_router.include_router(employees_router)
api_router.include_router(time_offs_router)
api_router.include_router(reports_router)
