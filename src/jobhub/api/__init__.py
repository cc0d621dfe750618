"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Unlike a router-wide auth dependency, each resource here mixes
public reads with gated writes, so auth is applied per route:
- reads take get_current_user_optional (or nothing)
- writes take get_current_user (401) or require_admin (401/403)
"""

from fastapi import APIRouter

from jobhub.api.applications import router as applications_router
from jobhub.api.auth import router as auth_router
from jobhub.api.categories import router as categories_router
from jobhub.api.comments import router as comments_router
from jobhub.api.health import router as health_router
from jobhub.api.jobs import router as jobs_router
from jobhub.api.likes import router as likes_router

api_router = APIRouter(prefix="/api")

api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(categories_router, tags=["categories"])
api_router.include_router(jobs_router, tags=["jobs"])
api_router.include_router(applications_router, tags=["applications"])
api_router.include_router(comments_router, tags=["comments"])
api_router.include_router(likes_router, tags=["likes"])
