from fastapi import APIRouter
from smarttask.api.routes import tasks_router, system_router

api_router = APIRouter(prefix="/api")
api_router.include_router(tasks_router)
api_router.include_router(system_router)
