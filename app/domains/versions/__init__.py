from app.domains.versions.entities import ManualVersion
from app.domains.versions.schemas import (
    VersionCreate, VersionResponse, VersionDetailResponse, VersionListResponse, RestoreResponse
)
from app.domains.versions.services import VersionService

__all__ = [
    "ManualVersion",
    "VersionCreate", "VersionResponse", "VersionDetailResponse", "VersionListResponse", "RestoreResponse",
    "VersionService"
]
