from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator


def _check_encodable(value: Any) -> Any:
    """Строки должны кодироваться в UTF-8 (без одиночных суррогатов)"""
    if isinstance(value, str):
        try:
            value.encode("utf-8")
        except UnicodeEncodeError:
            raise ValueError("Text must be valid Unicode")
    elif isinstance(value, dict):
        for key, item in value.items():
            _check_encodable(key)
            _check_encodable(item)
    elif isinstance(value, list):
        for item in value:
            _check_encodable(item)
    return value


class CreateRequest(BaseModel):
    """Тело POST: содержимое, расширение и метаданные (meta.name - явное имя)"""
    data: str = ""
    type: Optional[str] = None
    meta: Optional[Any] = None

    @field_validator('data', 'type', 'meta')
    @classmethod
    def validate_text(cls, v):
        return _check_encodable(v)

    def base_name(self) -> Optional[str]:
        """Явное имя файла без расширения, если клиент его передал"""
        if isinstance(self.meta, dict):
            name = self.meta.get("name")
            if isinstance(name, str) and name:
                return name
        return None


class UpdateRequest(BaseModel):
    """Тело PUT: новое содержимое или update="meta-data" """
    data: Optional[str] = None
    update: Optional[str] = None
    meta: Optional[Any] = None

    @field_validator('data', 'update', 'meta')
    @classmethod
    def validate_text(cls, v):
        return _check_encodable(v)

    @property
    def metadata_only(self) -> bool:
        return self.update == "meta-data"


class StorageResponse(BaseModel):
    """Ответ на запись: URL, имя файла и итоговые метаданные"""
    url: str
    file: str
    meta: dict[str, Any]


class FileExistsResponse(BaseModel):
    """Явное имя уже занято"""
    error: Literal["file_exists"] = "file_exists"
    file: str


class FileInfo(BaseModel):
    """Результат typeahead-поиска: метаданные последней версии + url и name"""
    url: str
    name: str

    model_config = ConfigDict(extra="allow")
