from fastapi import APIRouter
from gymdesk.api import (
    trainees,
    trainers,
    attendance,
    plan,
    notifications
)

api_router = APIRouter()

# Include all routers
api_router.include_router(trainees.router)
api_router.include_router(trainers.router)
api_router.include_router(attendance.router)
api_router.include_router(plan.workout_router)
api_router.include_router(plan.diet_router)
api_router.include_router(notifications.router)
