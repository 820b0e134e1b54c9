from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from app.db.models.file import StoredFile as StoredFileModel


class StoredFileRepository:
    """Метаданные загруженных файлов"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        filename: str,
        stored_filename: str,
        mime_type: str,
        size: int,
        path: str,
        uploaded_by: uuid.UUID,
        manual_id: uuid.UUID = None
    ) -> StoredFileModel:
        db_file = StoredFileModel(
            filename=filename,
            stored_filename=stored_filename,
            mime_type=mime_type,
            size=size,
            path=path,
            uploaded_by=uploaded_by,
            manual_id=manual_id
        )
        self.session.add(db_file)
        await self.session.flush()
        await self.session.refresh(db_file)
        return db_file
