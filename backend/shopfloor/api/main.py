from fastapi import APIRouter

from shopfloor.api.routes import schedules

api_router = APIRouter()

api_router.include_router(schedules.router, prefix="/scheduling", tags=["schedules"])
