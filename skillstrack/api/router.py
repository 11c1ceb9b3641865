"""
Main API router
"""
from fastapi import APIRouter

from skillstrack.api.v1 import (
    health,
    departments,
    employees,
    managers,
    history,
    images,
    records,
    users,
)

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(departments.router, prefix="/departments", tags=["departments"])
api_router.include_router(employees.router, prefix="/employees", tags=["employees"])
api_router.include_router(managers.router, prefix="/managers", tags=["managers"])
api_router.include_router(records.training_router, prefix="/training-records", tags=["training-records"])
api_router.include_router(records.ticket_router, prefix="/ticket-records", tags=["ticket-records"])
api_router.include_router(history.router, prefix="/history", tags=["history"])
api_router.include_router(images.router, prefix="/images", tags=["images"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
