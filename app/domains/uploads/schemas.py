from pydantic import BaseModel
import uuid


class UploadedFileResponse(BaseModel):
    uuid: uuid.UUID
    filename: str
    url: str
    mime_type: str
    size: int


class UploadResponse(BaseModel):
    success: bool = True
    file: UploadedFileResponse
