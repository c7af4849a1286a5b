"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.auth import router as auth_router
from api.v1.routes.groups import router as groups_router
from api.v1.routes.members import router as members_router
from api.v1.routes.posts import comments_router, posts_router
from api.v1.schemas.common import ErrorResponse

# Every v1 error uses the tagged body
router = APIRouter(
    responses={
        422: {"model": ErrorResponse, "description": "Request validation failed"},
        429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
    }
)
router.include_router(auth_router)
router.include_router(groups_router)
router.include_router(members_router)
router.include_router(posts_router)
router.include_router(comments_router)
