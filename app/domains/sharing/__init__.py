from app.domains.sharing.entities import ManualShare, ExternalLink
from app.domains.sharing.schemas import (
    ShareCreate, ShareUpdate, ExternalLinkCreate, ExternalLinkUpdate,
    ShareSettingsResponse, SharedUserResponse, ExternalLinkResponse,
    SectionOutlineResponse, PublicShareResponse
)
from app.domains.sharing.services import SharingService, PublicShareService

__all__ = [
    "ManualShare", "ExternalLink",
    "ShareCreate", "ShareUpdate", "ExternalLinkCreate", "ExternalLinkUpdate",
    "ShareSettingsResponse", "SharedUserResponse", "ExternalLinkResponse",
    "SectionOutlineResponse", "PublicShareResponse",
    "SharingService", "PublicShareService"
]
