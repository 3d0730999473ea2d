from fastapi import APIRouter
from . import auth, users, activities, statistics, logs

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
# Activities router serves /activities and /activity-types, so we mount at root of API
api_router.include_router(activities.router, tags=["activities"])
api_router.include_router(statistics.router, prefix="/statistics", tags=["statistics"])
api_router.include_router(logs.router, prefix="/logs", tags=["logs"])
