from app.domains.uploads.schemas import UploadResponse, UploadedFileResponse
from app.domains.uploads.services import UploadService

__all__ = ["UploadResponse", "UploadedFileResponse", "UploadService"]
