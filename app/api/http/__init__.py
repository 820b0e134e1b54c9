from app.api.http.health import router as health_router
from app.api.http.auth import router as auth_router
from app.api.http.users import router as users_router
from app.api.http.teams import router as teams_router
from app.api.http.invitations import router as invitations_router
from app.api.http.manuals import router as manuals_router
from app.api.http.sharing import router as sharing_router, public_router as public_share_router
from app.api.http.versions import router as versions_router
from app.api.http.search import router as search_router
from app.api.http.notifications import router as notifications_router
from app.api.http.uploads import router as uploads_router

__all__ = [
    "health_router",
    "auth_router",
    "users_router",
    "teams_router",
    "invitations_router",
    "manuals_router",
    "sharing_router",
    "public_share_router",
    "versions_router",
    "search_router",
    "notifications_router",
    "uploads_router"
]
