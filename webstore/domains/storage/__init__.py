from webstore.domains.storage.entities import Authenticity, MetadataRecord, Resolution, StoredDocument
from webstore.domains.storage.schemas import (
    CreateRequest, UpdateRequest, StorageResponse, FileExistsResponse, FileInfo
)
from webstore.domains.storage.services import (
    NameAllocator, StorageGateway, resolve_identity, resolve_file
)

__all__ = [
    "Authenticity", "MetadataRecord", "Resolution", "StoredDocument",
    "CreateRequest", "UpdateRequest", "StorageResponse", "FileExistsResponse", "FileInfo",
    "NameAllocator", "StorageGateway", "resolve_identity", "resolve_file"
]
