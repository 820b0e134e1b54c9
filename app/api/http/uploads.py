from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import uuid

from app.api.deps import get_current_user
from app.core.config import settings
from app.core.db import get_db
from app.domains.identity.entities import User
from app.domains.uploads.schemas import UploadResponse
from app.domains.uploads.services import UploadService

router = APIRouter(prefix="/upload", tags=["uploads"])


@router.post("", response_model=UploadResponse)
async def upload_file(
    file: UploadFile = File(...),
    manual_id: Optional[uuid.UUID] = Form(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Загрузка изображения или видео"""
    # Читаем на байт больше лимита, чтобы распознать превышение
    data = await file.read(settings.max_upload_size + 1)
    stored = await UploadService(db).save(
        current_user,
        filename=file.filename,
        mime_type=file.content_type,
        data=data,
        manual_uuid=manual_id
    )
    return UploadResponse(file=stored)
