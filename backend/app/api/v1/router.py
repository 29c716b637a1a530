from fastapi import APIRouter
from app.api.v1.endpoints import auth, users, activities, health
from app.api.v1.endpoints.admin import admin_router

api_router = APIRouter()

# Deep health checks (/health/live, /health/ready)
api_router.include_router(health.router)


# Simple health check endpoint for load balancers
@api_router.get("/health", tags=["Health"])
async def health_check():
    """Simple health check endpoint"""
    return {"status": "healthy", "service": "campus-activity-board"}


# Include all endpoint routers
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(activities.router, prefix="/activities", tags=["Activities"])

# Admin endpoints
api_router.include_router(admin_router)
