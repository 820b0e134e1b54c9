"""
Схемы содержимого блоков.

Содержимое хранится строкой, но на входе проверяется по типу блока:
заголовки, код, изображения, видео и таблицы хранят JSON, BODY хранит HTML,
DIVIDER пустой.
"""
import json
from typing import Any, Dict, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from app.core.errors import ValidationError
from app.db.models.manual import BlockType

MAX_BODY_LENGTH = 200_000
MAX_TABLE_ROWS = 200
MAX_TABLE_COLS = 50


class HeadingContent(BaseModel):
    text: str = Field(default="", max_length=1000)


class CodeContent(BaseModel):
    text: str = Field(default="", max_length=MAX_BODY_LENGTH)
    language: Optional[str] = Field(None, max_length=50)


class ImageContent(BaseModel):
    url: Optional[str] = Field(None, max_length=2000)
    file_id: Optional[str] = Field(None, alias="fileId")
    width: Optional[int] = Field(None, gt=0)
    height: Optional[int] = Field(None, gt=0)
    alt: Optional[str] = Field(None, max_length=500)

    model_config = ConfigDict(populate_by_name=True)


class VideoContent(BaseModel):
    url: Optional[str] = Field(None, max_length=2000)

    @field_validator('url')
    @classmethod
    def validate_url(cls, v):
        if v and not v.startswith(("http://", "https://", "/")):
            raise ValueError('Video url must be an absolute http(s) url or a server path')
        return v


class TableContent(BaseModel):
    rows: int = Field(default=2, ge=1, le=MAX_TABLE_ROWS)
    cols: int = Field(default=2, ge=1, le=MAX_TABLE_COLS)
    cells: Dict[str, str] = {}

    @model_validator(mode='after')
    def check_cells(self):
        for key in self.cells:
            row, _, col = key.partition("-")
            if not (row.isdigit() and col.isdigit()):
                raise ValueError(f'Invalid cell key "{key}", expected "row-col"')
            if int(row) >= self.rows or int(col) >= self.cols:
                raise ValueError(f'Cell "{key}" is outside of a {self.rows}x{self.cols} table')
        return self


JSON_CONTENT_SCHEMAS: Dict[BlockType, Type[BaseModel]] = {
    BlockType.HEADING1: HeadingContent,
    BlockType.HEADING2: HeadingContent,
    BlockType.HEADING3: HeadingContent,
    BlockType.CODE: CodeContent,
    BlockType.IMAGE: ImageContent,
    BlockType.VIDEO: VideoContent,
    BlockType.TABLE: TableContent,
}

HEADING_TYPES = (BlockType.HEADING1, BlockType.HEADING2, BlockType.HEADING3)


def normalize_block_content(block_type: BlockType, content: Union[str, Dict[str, Any], None]) -> str:
    """Проверка содержимого по типу блока и приведение к строке для хранения"""
    if block_type == BlockType.DIVIDER:
        if content not in (None, "", {}, "{}"):
            raise ValidationError("Divider blocks have no content")
        return ""

    if block_type == BlockType.BODY:
        if content is None:
            return ""
        if not isinstance(content, str):
            raise ValidationError("BODY content must be an HTML string")
        if len(content) > MAX_BODY_LENGTH:
            raise ValidationError("BODY content is too long")
        return content

    schema = JSON_CONTENT_SCHEMAS[block_type]
    if content is None or content == "":
        data: Any = {}
    elif isinstance(content, str):
        try:
            data = json.loads(content)
        except ValueError:
            raise ValidationError(f"{block_type.value} content must be valid JSON")
    else:
        data = content

    if not isinstance(data, dict):
        raise ValidationError(f"{block_type.value} content must be a JSON object")

    try:
        parsed = schema.model_validate(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        raise ValidationError(
            f"Invalid {block_type.value} content: {first['msg']}",
            details=[{"loc": list(err["loc"]), "msg": err["msg"]} for err in e.errors()]
        )

    return parsed.model_dump_json(by_alias=True, exclude_none=True)
