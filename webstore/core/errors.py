"""Исключения хранилища.

Роутеры переводят их в HTTP-ответы, сервисы только поднимают.
"""


class StorageError(Exception):
    """Базовое исключение хранилища"""


class NotFoundError(StorageError):
    """Идентификатор не указывает ни на документ, ни на хеш"""

    def __init__(self, identifier: str):
        super().__init__(f"Not found: {identifier}")
        self.identifier = identifier


class DocumentExistsError(StorageError):
    """Документ с таким именем уже существует"""

    def __init__(self, file: str):
        super().__init__(f"File exists: {file}")
        self.file = file


class InvalidMetadataError(StorageError):
    """Недопустимые метаданные (только в строгом режиме)"""

    def __init__(self, keys: list[str]):
        super().__init__(f"Invalid metadata: {', '.join(keys)}")
        self.keys = keys


class NameAllocationError(StorageError):
    """Не удалось подобрать свободное случайное имя"""


class StoreConflictError(StorageError):
    """Документ изменился во время обновления"""
