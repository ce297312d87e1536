from fastapi import APIRouter
from fieldservice.api.v1.endpoints import (
    health, clients, jobs, quotes, employees, configs, dashboard
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])

# Resource endpoints
api_router.include_router(clients.router, prefix="/clients", tags=["clients"])
api_router.include_router(jobs.router, prefix="/jobs", tags=["jobs"])
api_router.include_router(quotes.router, prefix="/quotes", tags=["quotes"])
api_router.include_router(employees.router, prefix="/employees", tags=["employees"])
api_router.include_router(configs.router, tags=["configs"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
