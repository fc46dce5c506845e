from webstore.db.repositories.object_repository import ObjectRepository

__all__ = [
    "ObjectRepository"
]
