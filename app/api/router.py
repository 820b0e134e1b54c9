from fastapi import APIRouter

from app.api.http import (
    auth_router, users_router, teams_router, invitations_router, manuals_router,
    sharing_router, public_share_router, versions_router, search_router,
    notifications_router, uploads_router
)

api_router = APIRouter()
api_router.include_router(auth_router)
api_router.include_router(users_router)
api_router.include_router(teams_router)
api_router.include_router(invitations_router)
api_router.include_router(manuals_router)
api_router.include_router(sharing_router)
api_router.include_router(versions_router)
api_router.include_router(public_share_router)
api_router.include_router(search_router)
api_router.include_router(notifications_router)
api_router.include_router(uploads_router)
