import logging
import os
import uuid
from pathlib import Path
from typing import Optional

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.db import unit_of_work
from app.core.errors import BadRequestError
from app.db.repositories.file_repository import StoredFileRepository
from app.domains.identity.entities import User
from app.domains.manuals.access import ManualAccessService
from app.domains.uploads.schemas import UploadedFileResponse

logger = logging.getLogger(__name__)


class UploadService:
    """Сохранение загруженных файлов на диск и их метаданных в БД"""

    def __init__(self, session: AsyncSession, upload_dir: Optional[str] = None):
        self.session = session
        self.upload_dir = Path(upload_dir or settings.upload_dir)
        self.file_repository = StoredFileRepository(session)
        self.access = ManualAccessService(session)

    def validate(self, mime_type: Optional[str], size: int) -> None:
        if mime_type not in settings.allowed_file_types:
            raise BadRequestError(f"Unsupported file type: {mime_type}")
        if size > settings.max_upload_size:
            raise BadRequestError(
                f"File exceeds the {settings.max_upload_size // (1024 * 1024)}MB limit"
            )
        if size == 0:
            raise BadRequestError("File is empty")

    async def save(
        self,
        user: User,
        filename: str,
        mime_type: Optional[str],
        data: bytes,
        manual_uuid: Optional[uuid.UUID] = None
    ) -> UploadedFileResponse:
        """Проверка, запись на диск и регистрация файла"""
        self.validate(mime_type, len(data))
        if manual_uuid is not None:
            await self.access.require_view(user.uuid, manual_uuid)

        extension = os.path.splitext(filename or "")[1].lower()
        stored_filename = f"{uuid.uuid4().hex}{extension}"
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        target = self.upload_dir / stored_filename
        await run_in_threadpool(target.write_bytes, data)

        try:
            async with unit_of_work(self.session):
                record = await self.file_repository.create(
                    filename=filename or stored_filename,
                    stored_filename=stored_filename,
                    mime_type=mime_type,
                    size=len(data),
                    path=f"/uploads/{stored_filename}",
                    uploaded_by=user.uuid,
                    manual_id=manual_uuid
                )
        except Exception:
            # Без строки в БД файл на диске не нужен
            target.unlink(missing_ok=True)
            raise

        logger.info(f"File {record.uuid} ({mime_type}, {record.size} bytes) uploaded by {user.uuid}")
        return UploadedFileResponse(
            uuid=record.uuid,
            filename=record.filename,
            url=record.path,
            mime_type=record.mime_type,
            size=record.size
        )
